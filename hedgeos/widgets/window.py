from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.events import Click, MouseDown, MouseMove, MouseUp
from textual.geometry import Offset
from textual.widgets import Label, Static

from hedgeos.core.messages import CloseWindowRequest, FocusWindowRequest
from hedgeos.core.window_manager import (
    OpenWindow,
    WindowEvent,
    WindowEventKind,
    WindowManager,
)
from hedgeos.widgets.file_grid import FileGrid

CASCADE_STEPS = 6


class WindowCloseButton(Static):
    def __init__(self, path: str) -> None:
        super().__init__("✕", classes="window_close")
        self.path = path

    def on_mouse_down(self, event: MouseDown) -> None:
        event.stop()

    def on_click(self, event: Click) -> None:
        event.stop()
        self.post_message(CloseWindowRequest(self.path))


class WindowTitleBar(Horizontal):
    """Title and close button; dragging it moves the owning window."""

    def __init__(self, title: str, path: str) -> None:
        super().__init__(classes="window_titlebar")
        self._title = title
        self._path = path
        self._drag_origin: Offset | None = None

    def compose(self) -> ComposeResult:
        yield Label(escape(self._title), classes="window_title")
        yield WindowCloseButton(self._path)

    def on_mouse_down(self, event: MouseDown) -> None:
        self._drag_origin = event.screen_offset
        self.capture_mouse()

    def on_mouse_move(self, event: MouseMove) -> None:
        if self._drag_origin is None:
            return
        delta = event.screen_offset - self._drag_origin
        self._drag_origin = event.screen_offset
        window = self.parent
        if isinstance(window, FloatingWindow):
            window.move_by(delta.x, delta.y)

    def on_mouse_up(self, _event: MouseUp) -> None:
        if self._drag_origin is not None:
            self._drag_origin = None
            self.release_mouse()


class FloatingWindow(Vertical):
    """One open file, drawn above the file grid and draggable by its title."""

    can_focus = True

    def __init__(self, window: OpenWindow, *, slot: int) -> None:
        super().__init__(classes="floating_window")
        self.window = window
        self.path = window.path
        step = slot % CASCADE_STEPS
        self.styles.offset = (4 + step * 4, 1 + step * 2)

    def compose(self) -> ComposeResult:
        yield WindowTitleBar(self.window.title, self.path)
        yield VerticalScroll(
            self.window.mounted.build_view(),
            classes="window_body",
        )

    def on_click(self, _event: Click) -> None:
        self.post_message(FocusWindowRequest(self.path))

    def move_by(self, dx: int, dy: int) -> None:
        current = self.styles.offset
        self.styles.offset = (
            max(0, int(current.x.value) + dx),
            max(0, int(current.y.value) + dy),
        )


class Desktop(Container):
    """File grid plus the floating windows the window manager owns."""

    def __init__(self, window_manager: WindowManager, id: str | None = None) -> None:
        super().__init__(id=id)
        self._window_manager = window_manager
        self._subscription = self._handle_window_event
        self._views: dict[str, FloatingWindow] = {}
        self._opened = 0

    def compose(self) -> ComposeResult:
        yield FileGrid(id="file_grid")

    def on_mount(self) -> None:
        self._window_manager.subscribe(self._subscription)

    def on_unmount(self) -> None:
        self._window_manager.unsubscribe(self._subscription)

    def view_for(self, path: str) -> FloatingWindow | None:
        return self._views.get(path)

    def _handle_window_event(self, event: WindowEvent) -> None:
        path = event.window.path
        if event.kind is WindowEventKind.OPENED:
            view = FloatingWindow(event.window, slot=self._opened)
            self._opened += 1
            self._views[path] = view
            self.mount(view)
            self.call_after_refresh(view.focus)
        elif event.kind is WindowEventKind.RAISED:
            view = self._views.get(path)
            if view is None:
                return
            siblings = [child for child in self.children if isinstance(child, FloatingWindow)]
            if siblings and siblings[-1] is not view:
                self.move_child(view, after=siblings[-1])
            view.focus()
        elif event.kind is WindowEventKind.CLOSED:
            view = self._views.pop(path, None)
            if view is not None:
                view.remove()
            if not self._views:
                self._opened = 0
