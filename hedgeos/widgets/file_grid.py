from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual import on
from textual.binding import Binding
from textual.widgets import ListItem, ListView

from hedgeos.core.messages import NavigateRequest, OpenNodeRequest
from hedgeos.core.tree_store import Node, get_extension

ICONS: dict[str, str] = {
    "folder": "▸",
    "markdown": "¶",
    "shell": "$",
    "text": "≡",
    "link": "↗",
    "app": "◆",
    "archive": "▣",
}
DEFAULT_ICON = "·"


def type_label(node: Node) -> str:
    if node.is_folder:
        return "folder"
    return node.file_type or get_extension(node.name) or "file"


def _truncate_row_value(value: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return f"{value[: width - 3]}..."


def _render_row_text(
    *,
    icon: str,
    name: str,
    label: str,
    width: int,
    rich_style: str | Style,
) -> Text:
    label_width = min(len(label), max(0, width // 3))
    name_width = max(1, width - label_width - 3)
    name = _truncate_row_value(name, name_width)
    text = Text()
    text.append(f"{icon} ")
    text.append(name.ljust(name_width))
    text.append(" ")
    text.append(_truncate_row_value(label, label_width), style="dim")
    text.stylize(rich_style)
    return text


class FileItem(ListItem):
    def __init__(self, node: Node, **kwargs) -> None:
        self.node = node
        row_classes = "file_grid_row"
        if node.is_folder:
            row_classes = f"{row_classes} file_grid_type_dir"
        else:
            row_classes = f"{row_classes} file_grid_type_file"
        if node.hidden:
            row_classes = f"{row_classes} file_grid_hidden"
        super().__init__(classes=row_classes, **kwargs)

    def render(self) -> Text:
        label = type_label(self.node)
        icon = ICONS.get("folder" if self.node.is_folder else label, DEFAULT_ICON)
        name = f"{self.node.name}/" if self.node.is_folder else self.node.name
        return _render_row_text(
            icon=icon,
            name=name,
            label=label,
            width=self.size.width,
            rich_style=self.rich_style,
        )


class EmptyItem(ListItem):
    def __init__(self, message: str) -> None:
        self._message = message
        super().__init__(classes="file_grid_empty")
        self.disabled = True

    def render(self) -> Text:
        return Text(self._message, style="dim")


class FileGrid(ListView):
    """Entries of the current folder; activating one opens or enters it."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("g", "first", "Top", show=False),
        Binding("G", "last", "Bottom", key_display="G", show=False),
        Binding("backspace", "go_up", "Up a folder", show=True),
    ]

    def __init__(self, id: str | None = None) -> None:
        super().__init__(id=id)
        self._listing_path = ""
        self._parent_path: str | None = None

    @property
    def listing_path(self) -> str:
        return self._listing_path

    def show_listing(
        self,
        path: str,
        nodes: tuple[Node, ...],
        *,
        parent: str | None = None,
    ) -> None:
        self._listing_path = path
        self._parent_path = parent
        self.border_title = path
        self.clear()
        if not nodes:
            self.append(EmptyItem("This folder is empty."))
            return
        for node in nodes:
            self.append(FileItem(node))
        self.call_after_refresh(self._reset_cursor)

    def _reset_cursor(self) -> None:
        if self.children:
            self.index = 0

    def action_first(self) -> None:
        if self.children:
            self.index = 0

    def action_last(self) -> None:
        if self.children:
            self.index = len(self.children) - 1

    def action_go_up(self) -> None:
        if self._parent_path is not None:
            self.post_message(NavigateRequest(self._parent_path))

    @on(ListView.Selected)
    def _on_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, FileItem):
            event.stop()
            self.post_message(OpenNodeRequest(item.node))
