from __future__ import annotations

import webbrowser
from typing import Any, Callable, Sequence

from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from textual.widgets import Markdown, Static

from hedgeos.core.tree_store import Node
from hedgeos.handlers.base import BaseHandler, Mounted
from hedgeos.widgets.content_views import LinkView

EMPTY_FILE = "(empty file)"


def open_in_browser(url: str) -> None:
    webbrowser.open(url, new=2)


class TextHandler(BaseHandler):
    file_type = "text"
    extensions = ("txt",)

    def render(self, file: Node) -> Mounted:
        text = Text(file.content or EMPTY_FILE)
        return Mounted(file.name, lambda: Static(text, classes="text_view"))


class MarkdownHandler(BaseHandler):
    file_type = "markdown"
    extensions = ("md",)

    def render(self, file: Node) -> Mounted:
        content = file.content or f"*{EMPTY_FILE}*"
        return Mounted(file.name, lambda: Markdown(content, classes="markdown_view"))


class ShellHandler(BaseHandler):
    """Shell scripts, shown highlighted and never executed."""

    file_type = "shell"
    extensions = ("sh", "bash")

    def render(self, file: Node) -> Mounted:
        syntax = Syntax(
            file.content or "",
            "bash",
            theme="monokai",
            line_numbers=True,
            word_wrap=True,
        )
        return Mounted(file.name, lambda: Static(syntax, classes="shell_view"))


class LinkHandler(BaseHandler):
    file_type = "link"
    extensions = ("link",)

    def __init__(self, *, open_url: Callable[[str], None] | None = None) -> None:
        self._open_url = open_url or open_in_browser

    def render(self, file: Node) -> Mounted:
        url = str(file.config.get("url") or (file.content or "").strip())
        return Mounted(file.name, lambda: LinkView(url, open_url=self._open_url), url)


class ArchiveHandler(BaseHandler):
    """Lists the entries an archive declares in ``config.entries``."""

    file_type = "archive"
    extensions = ("tar", "gz", "zip")

    def render(self, file: Node) -> Mounted:
        entries = self._entries(file.config.get("entries"))
        table = Table(expand=True, show_edge=False)
        table.add_column("Name")
        table.add_column("Size", justify="right")
        for name, size in entries:
            table.add_row(name, size)
        if not entries:
            renderable: Any = Text("Empty archive.", style="dim")
        else:
            renderable = table
        return Mounted(file.name, lambda: Static(renderable, classes="archive_view"), entries)

    @staticmethod
    def _entries(raw: Any) -> list[tuple[str, str]]:
        if not isinstance(raw, Sequence) or isinstance(raw, str):
            return []
        rows: list[tuple[str, str]] = []
        for item in raw:
            if isinstance(item, dict):
                name = str(item.get("name") or "").strip()
                size = str(item.get("size") or "")
            else:
                name = str(item).strip()
                size = ""
            if name:
                rows.append((name, size))
        return rows
