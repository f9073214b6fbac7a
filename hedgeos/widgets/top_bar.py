from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Label

from hedgeos.core.state import AppState, AppStateStore


class TopBar(Container):
    """Custom application title bar."""

    current_path = reactive("", always_update=True)
    status = reactive("Loading", always_update=True)
    open_windows = reactive(0, always_update=True)
    show_hidden = reactive(False, always_update=True)

    def __init__(
        self,
        *,
        app_title: str | None,
        app_version: str,
        state_store: AppStateStore,
    ) -> None:
        super().__init__()
        self._state_store = state_store
        self._state_subscription = self._handle_state_update

        self.title_label = Horizontal(
            Label(
                f"{app_title}",
                id="topbar_app_name",
            ),
            Label(
                f"v{app_version}",
                id="topbar_app_version",
            ),
            id="app_meta_container",
        )
        self.status_label = Label("", id="topbar_status")
        self.windows_label = Label("", id="topbar_windows")

    def on_mount(self) -> None:
        self._state_store.subscribe(self._state_subscription)

    def on_unmount(self) -> None:
        self._state_store.unsubscribe(self._state_subscription)

    def watch_current_path(self) -> None:
        self._update_status()

    def watch_status(self) -> None:
        self._update_status()

    def watch_show_hidden(self) -> None:
        self._update_status()

    def watch_open_windows(self) -> None:
        count = self.open_windows
        if count == 0:
            self.windows_label.update("[dim]No open windows[/dim]")
            return
        noun = "window" if count == 1 else "windows"
        self.windows_label.update(f"[dim]{count} open {noun}[/dim]")

    def _update_status(self) -> None:
        if not self.current_path:
            self.status_label.update(f"[dim]{escape(self.status)}[/dim]")
            return

        hidden = " [dim](hidden shown)[/dim]" if self.show_hidden else ""
        self.status_label.update(f"[dim]~ [/dim]{escape(self.current_path)}{hidden}")

    def _handle_state_update(self, state: AppState) -> None:
        self.current_path = state.current_path
        self.status = state.status
        self.open_windows = state.open_windows
        self.show_hidden = state.show_hidden

    def compose(self) -> ComposeResult:
        yield self.title_label
        yield self.status_label
        yield self.windows_label
