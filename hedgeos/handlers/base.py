from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Protocol, runtime_checkable

from hedgeos.core.tree_store import Node, get_extension

if TYPE_CHECKING:
    from textual.widget import Widget


@dataclass(frozen=True, slots=True)
class Mounted:
    """What ``render`` hands back: a view factory plus handler-owned state."""

    title: str
    build_view: Callable[[], Widget]
    state: Any = None


@runtime_checkable
class Handler(Protocol):
    file_type: str

    def can_handle(self, file: Node) -> bool: ...

    def render(self, file: Node) -> Mounted: ...

    def cleanup(self, mounted: Mounted | None) -> None: ...


class Cancellable(Protocol):
    def stop(self) -> None: ...


IntervalFactory = Callable[[float, Callable[[], None]], Cancellable]


class BaseHandler:
    """Shared defaults: match by tag or extension, nothing to clean up."""

    file_type: ClassVar[str] = ""
    extensions: ClassVar[tuple[str, ...]] = ()

    def can_handle(self, file: Node) -> bool:
        if file.file_type:
            return file.file_type == self.file_type
        return get_extension(file.name) in self.extensions

    def render(self, file: Node) -> Mounted:
        raise NotImplementedError

    def cleanup(self, mounted: Mounted | None) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.file_type!r})"
