from textual.message import Message

from hedgeos.core.tree_store import Node


class NavigateRequest(Message):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__()


class OpenNodeRequest(Message):
    """A grid entry was activated: folders navigate, files open."""

    def __init__(self, node: Node) -> None:
        self.node = node
        super().__init__()


class CloseWindowRequest(Message):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__()


class FocusWindowRequest(Message):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__()
