from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping

from hedgeos.core.audio import AudioPlayer
from hedgeos.core.tree_store import Node
from hedgeos.handlers.base import BaseHandler, Cancellable, IntervalFactory, Mounted
from hedgeos.widgets.app_views import AudioControlView, CountdownView, UnknownAppView

DEFAULT_TARGET_DATE = "December 31, 2025"
DEFAULT_COUNTDOWN_TITLE = "Countdown"
DEFAULT_COUNTDOWN_MESSAGE = "Time's up!"
DEFAULT_AUDIO_TITLE = "Audio Player"
TICK_SECONDS = 1.0

_DATE_FORMATS = (
    "%B %d, %Y %H:%M:%S",
    "%B %d, %Y %H:%M",
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m-%d",
)

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE
_MS_PER_DAY = 24 * _MS_PER_HOUR


def local_now() -> datetime:
    return datetime.now().astimezone()


def parse_target_date(value: Any) -> datetime:
    """Accept ISO 8601 or ``December 31, 2025`` style dates.

    Naive values are read as local time. Unparseable values fall back to
    the default target.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        parsed = None
        if text:
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                for fmt in _DATE_FORMATS:
                    try:
                        parsed = datetime.strptime(text, fmt)
                        break
                    except ValueError:
                        continue
        if parsed is None:
            parsed = datetime.strptime(DEFAULT_TARGET_DATE, "%B %d, %Y")
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


@dataclass(frozen=True, slots=True)
class CountdownBreakdown:
    days: int
    hours: int
    minutes: int
    seconds: int
    expired: bool


def compute_breakdown(target: datetime, now: datetime) -> CountdownBreakdown:
    remaining = target - now
    if remaining <= timedelta(0):
        return CountdownBreakdown(0, 0, 0, 0, expired=True)
    total_ms = remaining // timedelta(milliseconds=1)
    return CountdownBreakdown(
        days=total_ms // _MS_PER_DAY,
        hours=(total_ms % _MS_PER_DAY) // _MS_PER_HOUR,
        minutes=(total_ms % _MS_PER_HOUR) // _MS_PER_MINUTE,
        seconds=(total_ms % _MS_PER_MINUTE) // _MS_PER_SECOND,
        expired=False,
    )


class CountdownState:
    """Live countdown owned by one open window, ticking once a second."""

    def __init__(
        self,
        *,
        target: datetime,
        title: str,
        message: str,
        clock: Callable[[], datetime],
    ) -> None:
        self.target = target
        self.title = title
        self.message = message
        self._clock = clock
        self._timer: Cancellable | None = None
        self._listeners: set[Callable[[CountdownBreakdown], None]] = set()
        self.breakdown = compute_breakdown(target, clock())

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self, interval_factory: IntervalFactory) -> None:
        if self._timer is None:
            self._timer = interval_factory(TICK_SECONDS, self.tick)

    def tick(self) -> None:
        self.breakdown = compute_breakdown(self.target, self._clock())
        for callback in list(self._listeners):
            callback(self.breakdown)

    def subscribe(self, callback: Callable[[CountdownBreakdown], None]) -> None:
        self._listeners.add(callback)
        callback(self.breakdown)

    def unsubscribe(self, callback: Callable[[CountdownBreakdown], None]) -> None:
        self._listeners.discard(callback)

    def close(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.stop()
        self._listeners.clear()


class AudioControlState:
    """Play/pause surface over the shared audio player."""

    def __init__(self, player: AudioPlayer | None, *, title: str) -> None:
        self.title = title
        self._player = player
        self._listeners: set[Callable[[bool], None]] = set()
        self._unsubscribe: Callable[[], None] | None = None
        if player is not None:
            self._unsubscribe = player.on_state_change(self._handle_player_change)

    @property
    def available(self) -> bool:
        return self._player is not None

    @property
    def playing(self) -> bool:
        return self._player is not None and self._player.is_playing()

    @property
    def status(self) -> str:
        return "Playing" if self.playing else "Paused"

    def toggle(self) -> None:
        if self._player is None:
            return
        self._player.toggle()
        self._notify()

    def subscribe(self, callback: Callable[[bool], None]) -> None:
        self._listeners.add(callback)
        callback(self.playing)

    def unsubscribe(self, callback: Callable[[bool], None]) -> None:
        self._listeners.discard(callback)

    def close(self) -> None:
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()
        self._listeners.clear()

    def _handle_player_change(self, _playing: bool) -> None:
        self._notify()

    def _notify(self) -> None:
        playing = self.playing
        for callback in list(self._listeners):
            callback(playing)


@dataclass(frozen=True, slots=True)
class UnknownAppState:
    app_type: str


class AppHandler(BaseHandler):
    """Mini applications, dispatched a second time on ``app_type``."""

    file_type = "app"
    extensions = ("app",)

    def __init__(
        self,
        *,
        interval_factory: IntervalFactory,
        audio_player: AudioPlayer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._interval_factory = interval_factory
        self._audio_player = audio_player
        self._clock = clock or local_now
        self._apps: dict[str, Callable[[Node, Mapping[str, Any]], Mounted]] = {
            "countdown": self._render_countdown,
            "audio": self._render_audio,
        }

    @property
    def app_types(self) -> tuple[str, ...]:
        return tuple(self._apps)

    def render(self, file: Node) -> Mounted:
        renderer = self._apps.get(file.app_type or "", self._render_unknown)
        return renderer(file, file.config or {})

    def cleanup(self, mounted: Mounted | None) -> None:
        if mounted is None:
            return
        state = mounted.state
        if isinstance(state, (CountdownState, AudioControlState)):
            state.close()

    def _render_countdown(self, file: Node, config: Mapping[str, Any]) -> Mounted:
        state = CountdownState(
            target=parse_target_date(config.get("targetDate", DEFAULT_TARGET_DATE)),
            title=str(config.get("title") or DEFAULT_COUNTDOWN_TITLE),
            message=str(config.get("message") or DEFAULT_COUNTDOWN_MESSAGE),
            clock=self._clock,
        )
        state.start(self._interval_factory)
        return Mounted(file.name, lambda: CountdownView(state), state)

    def _render_audio(self, file: Node, config: Mapping[str, Any]) -> Mounted:
        state = AudioControlState(
            self._audio_player,
            title=str(config.get("title") or DEFAULT_AUDIO_TITLE),
        )
        return Mounted(file.name, lambda: AudioControlView(state), state)

    def _render_unknown(self, file: Node, _config: Mapping[str, Any]) -> Mounted:
        state = UnknownAppState(file.app_type or "none")
        return Mounted(file.name, lambda: UnknownAppView(state), state)
