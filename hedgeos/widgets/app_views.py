from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, Static

if TYPE_CHECKING:
    from hedgeos.handlers.app_handler import (
        AudioControlState,
        CountdownBreakdown,
        CountdownState,
        UnknownAppState,
    )


class CountdownView(Vertical):
    """Days / hours / minutes / seconds tiles for a countdown app."""

    UNITS = ("days", "hours", "minutes", "seconds")

    def __init__(self, state: CountdownState) -> None:
        super().__init__(classes="countdown_display")
        self._state = state
        self._state_subscription = self._handle_tick

    def compose(self) -> ComposeResult:
        yield Label(escape(self._state.title), classes="countdown_title")
        with Horizontal(classes="countdown_timer"):
            for unit in self.UNITS:
                with Vertical(classes="countdown_unit"):
                    yield Static("--", id=f"countdown_{unit}", classes="countdown_value")
                    yield Static(unit.title(), classes="countdown_label")
        message = Static(escape(self._state.message), id="countdown_message")
        message.display = False
        yield message

    def on_mount(self) -> None:
        self._state.subscribe(self._state_subscription)

    def on_unmount(self) -> None:
        self._state.unsubscribe(self._state_subscription)

    def _handle_tick(self, breakdown: CountdownBreakdown) -> None:
        values = {
            "days": str(breakdown.days),
            "hours": f"{breakdown.hours:02d}",
            "minutes": f"{breakdown.minutes:02d}",
            "seconds": f"{breakdown.seconds:02d}",
        }
        if breakdown.expired:
            values = dict.fromkeys(self.UNITS, "0")
        for unit, value in values.items():
            self.query_one(f"#countdown_{unit}", Static).update(value)
        self.query_one("#countdown_message", Static).display = breakdown.expired


class AudioControlView(Vertical):
    """Play/pause button bound to the background music player."""

    def __init__(self, state: AudioControlState) -> None:
        super().__init__(classes="audio_player_app")
        self._state = state
        self._state_subscription = self._handle_state

    def compose(self) -> ComposeResult:
        yield Label(escape(self._state.title), classes="audio_title")
        yield Button("▶ Play Music", id="audio_toggle", variant="primary")
        yield Static(self._state.status, id="audio_status")

    def on_mount(self) -> None:
        button = self.query_one("#audio_toggle", Button)
        if not self._state.available:
            button.disabled = True
            self.query_one("#audio_status", Static).update("No audio player available")
            return
        self._state.subscribe(self._state_subscription)

    def on_unmount(self) -> None:
        self._state.unsubscribe(self._state_subscription)

    @on(Button.Pressed, "#audio_toggle")
    def _toggle(self, event: Button.Pressed) -> None:
        event.stop()
        self._state.toggle()

    def _handle_state(self, playing: bool) -> None:
        button = self.query_one("#audio_toggle", Button)
        button.label = "⏸ Pause Music" if playing else "▶ Play Music"
        self.query_one("#audio_status", Static).update("Playing" if playing else "Paused")


class UnknownAppView(Static):
    def __init__(self, state: UnknownAppState) -> None:
        super().__init__(
            f"[dim]?[/dim]\n\nUnknown application type: {escape(state.app_type)}",
            classes="unknown_app",
        )
