from .breadcrumbs import Breadcrumbs
from .file_grid import FileGrid, FileItem
from .terminal import TerminalLog
from .top_bar import TopBar

__all__ = [
    "Breadcrumbs",
    "FileGrid",
    "FileItem",
    "TerminalLog",
    "TopBar",
]
