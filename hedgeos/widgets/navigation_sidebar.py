from __future__ import annotations

from textual import on
from textual.binding import Binding
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from hedgeos.core.messages import NavigateRequest
from hedgeos.core.navigation import ROOT_LABEL
from hedgeos.core.path_navigation import is_within
from hedgeos.core.state import AppState, AppStateStore
from hedgeos.core.tree_store import TreeStore


class NavigationSidebar(OptionList):
    """Quick-jump list: home plus the top-level folders under it."""

    LABEL_MAX_WIDTH = 20

    BINDINGS = [
        Binding("k", "cursor_up", "Up", show=False),
        Binding("j", "cursor_down", "Down", show=False),
    ]

    def __init__(
        self,
        *,
        state_store: AppStateStore,
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self._state_store = state_store
        self._state_subscription = self._handle_state_update
        self._option_paths: dict[str, str] = {}
        self._current_path = ""

    def on_mount(self) -> None:
        self.border_title = "Places"
        self._state_store.subscribe(self._state_subscription)

    def on_unmount(self) -> None:
        self._state_store.unsubscribe(self._state_subscription)

    def populate(self, store: TreeStore, *, include_hidden: bool = False) -> None:
        places: list[tuple[str, str]] = [(f"{ROOT_LABEL} Home", store.home_path)]
        for child in store.get_contents(store.home_path, include_hidden):
            if child.is_folder:
                places.append((child.name, child.path))

        self._option_paths = {}
        options: list[Option] = []
        for index, (label, path) in enumerate(places):
            option_id = f"place_{index}"
            self._option_paths[option_id] = path
            options.append(Option(self._truncate(label), id=option_id))
        self.set_options(options)
        self._sync_highlight()

    @on(OptionList.OptionSelected)
    def _on_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        path = self._option_paths.get(event.option.id or "")
        if path:
            self.post_message(NavigateRequest(path))

    def _handle_state_update(self, state: AppState) -> None:
        self._current_path = state.current_path
        self._sync_highlight()

    def _sync_highlight(self) -> None:
        if not self._current_path:
            return
        best: str | None = None
        best_length = -1
        for option_id, path in self._option_paths.items():
            if is_within(self._current_path, path) and len(path) > best_length:
                best = option_id
                best_length = len(path)
        if best is not None:
            self.highlighted = self.get_option_index(best)

    def _truncate(self, label: str) -> str:
        if len(label) <= self.LABEL_MAX_WIDTH:
            return label
        return f"{label[: self.LABEL_MAX_WIDTH - 1]}…"
