from rich.markup import escape
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, Static


class LoadFailedScreen(ModalScreen[None]):
    """Shown instead of the desktop when the tree description cannot load."""

    BINDINGS = [
        Binding("escape", "quit", "Quit", show=True),
        Binding("q", "quit", "Quit", show=False),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self):
        yield Vertical(
            Label("Unable to load the filesystem", id="load_failed_title"),
            Static(escape(self.message), id="load_failed_message"),
            Footer(id="load_failed_footer"),
            id="load_failed_modal",
        )

    def action_quit(self) -> None:
        self.app.exit(return_code=1)
