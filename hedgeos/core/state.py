from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True, slots=True)
class AppState:
    current_path: str = ""
    show_hidden: bool = False
    status: str = "Loading"
    open_windows: int = 0


class AppStateStore:
    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial or AppState()
        self._listeners: set[Callable[[AppState], None]] = set()

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, callback: Callable[[AppState], None]) -> None:
        self._listeners.add(callback)
        callback(self._state)

    def unsubscribe(self, callback: Callable[[AppState], None]) -> None:
        self._listeners.discard(callback)

    def set_current_path(self, value: str) -> None:
        self._update_state(current_path=value)

    def set_show_hidden(self, value: bool) -> None:
        self._update_state(show_hidden=value)

    def set_status(self, value: str) -> None:
        self._update_state(status=value)

    def set_open_windows(self, value: int) -> None:
        self._update_state(open_windows=value)

    def _update_state(self, **changes: object) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        for callback in list(self._listeners):
            callback(self._state)
