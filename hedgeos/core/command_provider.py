from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from textual.command import CommandListItem, SimpleCommand, SimpleProvider
from textual.screen import Screen
from textual.style import Style

if TYPE_CHECKING:
    from hedgeos.core.app import HedgeOS


class HedgeCommandProvider(SimpleProvider):
    """Command palette provider for HedgeOS desktop actions."""

    _COMMAND_DEFS: tuple[tuple[str, str, str], ...] = (
        (
            "Go Home",
            "Navigate back to the home folder.",
            "action_go_home",
        ),
        (
            "Toggle Hidden Files",
            "Show or hide hidden entries in the file grid.",
            "action_toggle_hidden",
        ),
        (
            "Open Music Player",
            "Open the background music player app.",
            "action_open_music_player",
        ),
        (
            "Close All Windows",
            "Close every open window.",
            "action_close_all_windows",
        ),
        (
            "Clear Terminal",
            "Clear the activity log.",
            "action_clear_terminal",
        ),
    )

    def __init__(self, screen: Screen[Any], match_style: Style | None = None) -> None:
        app = cast("HedgeOS", screen.app)
        commands: list[CommandListItem] = [
            SimpleCommand(label, getattr(app, handler_name), description)
            for label, description, handler_name in self._COMMAND_DEFS
        ]
        super().__init__(screen, commands)
        if match_style is not None:
            self._SimpleProvider__match_style = match_style  # type: ignore[attr-defined]
