from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import Click
from textual.widgets import Static

from hedgeos.core.messages import NavigateRequest
from hedgeos.core.navigation import Breadcrumb


class BreadcrumbSegment(Static):
    def __init__(self, crumb: Breadcrumb, *, current: bool) -> None:
        classes = "breadcrumb current" if current else "breadcrumb"
        super().__init__(escape(crumb.name), classes=classes)
        self.crumb = crumb

    def on_click(self, event: Click) -> None:
        event.stop()
        if self.has_class("current"):
            return
        self.post_message(NavigateRequest(self.crumb.path))


class Breadcrumbs(Horizontal):
    """Clickable path segments from the home folder down to the current one."""

    def __init__(self, id: str | None = None) -> None:
        super().__init__(id=id)
        self._crumbs: tuple[Breadcrumb, ...] = ()

    def compose(self) -> ComposeResult:
        yield Static("[dim]loading…[/dim]", classes="breadcrumb_placeholder")

    def set_crumbs(self, crumbs: tuple[Breadcrumb, ...]) -> None:
        if crumbs == self._crumbs:
            return
        self._crumbs = crumbs
        self.remove_children()
        segments: list[Static] = []
        for index, crumb in enumerate(crumbs):
            if index:
                segments.append(Static("/", classes="breadcrumb_separator"))
            segments.append(BreadcrumbSegment(crumb, current=index == len(crumbs) - 1))
        self.mount_all(segments)

