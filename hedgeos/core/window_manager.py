from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.tree_store import Node
from hedgeos.handlers.base import Handler, Mounted

logger = get_logger(__name__)


@dataclass
class OpenWindow:
    file: Node
    handler: Handler
    mounted: Mounted
    z_index: int = 0
    opened_at: float = field(default_factory=time.time)

    @property
    def path(self) -> str:
        return self.file.path

    @property
    def title(self) -> str:
        return self.mounted.title


class WindowEventKind(Enum):
    OPENED = "opened"
    RAISED = "raised"
    CLOSED = "closed"


@dataclass(frozen=True)
class WindowEvent:
    kind: WindowEventKind
    window: OpenWindow


WindowListener = Callable[[WindowEvent], None]


class WindowManager:
    """Owns every open content window, keyed by file path.

    A path is either closed or open; opening an open path raises the
    existing window instead of rendering a second one. Closing runs the
    handler's cleanup before the record is dropped.
    """

    def __init__(self) -> None:
        self._windows: dict[str, OpenWindow] = {}
        self._next_z = 0
        self._listeners: list[WindowListener] = []

    def subscribe(self, callback: WindowListener) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: WindowListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def open(self, file: Node, handler: Handler) -> OpenWindow:
        existing = self._windows.get(file.path)
        if existing is not None:
            self._raise(existing)
            return existing

        mounted = handler.render(file)
        window = OpenWindow(file=file, handler=handler, mounted=mounted, z_index=self._take_z())
        self._windows[file.path] = window
        log_event(logger, "window_opened", path=file.path, handler=handler.file_type)
        self._emit(WindowEventKind.OPENED, window)
        return window

    def close(self, path: str) -> bool:
        window = self._windows.get(path)
        if window is None:
            return False
        try:
            window.handler.cleanup(window.mounted)
        finally:
            del self._windows[path]
            log_event(logger, "window_closed", path=path)
            self._emit(WindowEventKind.CLOSED, window)
        return True

    def close_all(self) -> int:
        """Close every window, then re-raise the first cleanup failure."""
        closed = 0
        failures: list[Exception] = []
        for path in list(self._windows):
            try:
                self.close(path)
            except Exception as exc:
                log_event(logger, "window_cleanup_failed", path=path, error=str(exc))
                failures.append(exc)
            closed += 1
        if failures:
            raise failures[0]
        return closed

    def focus(self, path: str) -> OpenWindow | None:
        window = self._windows.get(path)
        if window is not None:
            self._raise(window)
        return window

    def get(self, path: str) -> OpenWindow | None:
        return self._windows.get(path)

    def is_open(self, path: str) -> bool:
        return path in self._windows

    @property
    def windows(self) -> list[OpenWindow]:
        """Open windows from the bottom of the stack to the top."""
        return sorted(self._windows.values(), key=lambda window: window.z_index)

    @property
    def top(self) -> OpenWindow | None:
        windows = self.windows
        return windows[-1] if windows else None

    def __len__(self) -> int:
        return len(self._windows)

    def __iter__(self) -> Iterator[OpenWindow]:
        return iter(self.windows)

    def _raise(self, window: OpenWindow) -> None:
        if window is not self.top:
            window.z_index = self._take_z()
        log_event(logger, "window_raised", path=window.path)
        self._emit(WindowEventKind.RAISED, window)

    def _take_z(self) -> int:
        self._next_z += 1
        return self._next_z

    def _emit(self, kind: WindowEventKind, window: OpenWindow) -> None:
        event = WindowEvent(kind, window)
        for callback in list(self._listeners):
            callback(event)
