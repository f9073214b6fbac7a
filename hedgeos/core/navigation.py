from __future__ import annotations

from dataclasses import dataclass

from hedgeos.core.errors import NotAFolder, NotFound
from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.path_navigation import SEPARATOR, parent_path, path_prefixes
from hedgeos.core.tree_store import Node, TreeStore

logger = get_logger(__name__)

ROOT_LABEL = "~"


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    name: str
    path: str


class Navigator:
    """Current folder plus back/forward history over a ``TreeStore``.

    Only paths are kept, never nodes, so the store can be reloaded
    underneath without leaving stale references behind.
    """

    HISTORY_LIMIT = 200

    def __init__(self, store: TreeStore) -> None:
        self._store = store
        self._current_path = ""
        self._history: list[str] = []
        self._history_index = -1

    @property
    def current_path(self) -> str:
        return self._current_path

    def set_path(self, path: str) -> tuple[Breadcrumb, ...]:
        self._validate(path)
        self._current_path = path
        self._record_history(path)
        log_event(logger, "navigate", path=path)
        return self.breadcrumbs()

    def reset(self) -> tuple[Breadcrumb, ...]:
        self._history = []
        self._history_index = -1
        return self.set_path(self._store.home_path)

    def get_contents(self, include_hidden: bool = False) -> tuple[Node, ...]:
        return self._store.get_contents(self._current_path, include_hidden)

    def breadcrumbs(self) -> tuple[Breadcrumb, ...]:
        if not self._current_path:
            return ()
        root = self._store.home_path
        crumbs: list[Breadcrumb] = []
        for prefix in path_prefixes(self._current_path, root):
            if prefix == root:
                crumbs.append(Breadcrumb(ROOT_LABEL, prefix))
            else:
                crumbs.append(Breadcrumb(prefix.rsplit(SEPARATOR, 1)[-1], prefix))
        return tuple(crumbs)

    def go_up(self) -> tuple[Breadcrumb, ...] | None:
        if not self._current_path:
            return None
        parent = parent_path(self._current_path, self._store.home_path)
        if parent is None:
            return None
        return self.set_path(parent)

    def can_go_back(self) -> bool:
        return self._history_index > 0

    def can_go_forward(self) -> bool:
        return 0 <= self._history_index < len(self._history) - 1

    def back(self) -> tuple[Breadcrumb, ...] | None:
        return self._step_history(-1)

    def forward(self) -> tuple[Breadcrumb, ...] | None:
        return self._step_history(1)

    def _validate(self, path: str) -> None:
        if not self._store.exists(path):
            log_event(logger, "navigate_failed", path=path, reason="not_found")
            raise NotFound(path)
        if not self._store.is_folder(path):
            log_event(logger, "navigate_failed", path=path, reason="not_a_folder")
            raise NotAFolder(path)

    def _step_history(self, delta: int) -> tuple[Breadcrumb, ...] | None:
        next_index = self._history_index + delta
        while 0 <= next_index < len(self._history):
            candidate = self._history[next_index]
            if self._store.is_folder(candidate):
                self._history_index = next_index
                self._current_path = candidate
                log_event(logger, "navigate", path=candidate, history=delta)
                return self.breadcrumbs()
            del self._history[next_index]
            if delta < 0:
                next_index -= 1
        self._history_index = max(0, min(self._history_index, len(self._history) - 1))
        return None

    def _record_history(self, path: str) -> None:
        if self._history and self._history_index >= 0:
            if self._history[self._history_index] == path:
                return
        if self._history_index < len(self._history) - 1:
            self._history = self._history[: self._history_index + 1]
        self._history.append(path)
        if len(self._history) > self.HISTORY_LIMIT:
            overflow = len(self._history) - self.HISTORY_LIMIT
            self._history = self._history[overflow:]
        self._history_index = len(self._history) - 1
