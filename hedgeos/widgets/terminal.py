from __future__ import annotations

from datetime import datetime

from rich.markup import escape
from textual.binding import Binding
from textual.widgets import RichLog


class TerminalLog(RichLog):
    """Scrolling activity log styled like a shell session."""

    BINDINGS = [
        Binding("ctrl+l", "clear_log", "Clear log", show=True),
    ]

    PROMPT = "hedge@hedgeos"

    def __init__(self, id: str | None = None, max_lines: int = 500) -> None:
        super().__init__(id=id, max_lines=max_lines, markup=True, wrap=True)

    def on_mount(self) -> None:
        self.border_title = "Terminal"

    def log_line(self, message: str, *, style: str = "") -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        body = escape(message)
        if style:
            body = f"[{style}]{body}[/]"
        self.write(f"[dim]{stamp}[/dim] {body}")

    def system(self, message: str) -> None:
        self.log_line(f"[sys] {message}", style="bold magenta")

    def success(self, message: str) -> None:
        self.log_line(message, style="green")

    def error(self, message: str) -> None:
        self.log_line(f"error: {message}", style="bold red")

    def command(self, command: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self.write(
            f"[dim]{stamp}[/dim] [bold #ff4d6d]{self.PROMPT}[/]:[dim]~$[/dim] {escape(command)}"
        )

    def log_nav(self, path: str) -> None:
        self.command(f"cd {path}")

    def log_open(self, name: str) -> None:
        self.command(f"open {name}")

    def log_close(self, name: str) -> None:
        self.command(f"close {name}")

    def log_hidden_toggle(self, visible: bool) -> None:
        state = "shown" if visible else "hidden"
        self.system(f"hidden files {state}")

    def action_clear_log(self) -> None:
        self.clear()
