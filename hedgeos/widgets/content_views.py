from __future__ import annotations

from typing import Callable

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Static


class LinkView(Vertical):
    """Shows a link target with a button that opens it in the browser."""

    def __init__(self, url: str, *, open_url: Callable[[str], None]) -> None:
        super().__init__(classes="link_view")
        self._url = url
        self._open_url = open_url

    def compose(self) -> ComposeResult:
        if not self._url:
            yield Static("[dim]This link has no target.[/dim]", classes="link_target")
            return
        yield Static(f"[bold]→[/bold] {escape(self._url)}", classes="link_target")
        yield Button("Open in browser", id="link_open", variant="primary")

    @on(Button.Pressed, "#link_open")
    def _open(self, event: Button.Pressed) -> None:
        event.stop()
        self._open_url(self._url)
