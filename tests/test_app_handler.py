from datetime import datetime, timedelta, timezone
from types import MappingProxyType

import pytest

from hedgeos.core.tree_store import Node, NodeKind
from hedgeos.core.window_manager import WindowManager
from hedgeos.handlers.app_handler import (
    DEFAULT_COUNTDOWN_MESSAGE,
    DEFAULT_COUNTDOWN_TITLE,
    AppHandler,
    AudioControlState,
    CountdownBreakdown,
    CountdownState,
    UnknownAppState,
    compute_breakdown,
    parse_target_date,
)

UTC = timezone.utc
TARGET = datetime(2030, 1, 1, tzinfo=UTC)


def _app(name, app_type=None, config=None):
    return Node(
        name=name,
        path=f"/home/hedge/Applications/{name}",
        kind=NodeKind.FILE,
        file_type="app",
        app_type=app_type,
        config=MappingProxyType(config or {}),
    )


@pytest.fixture
def handler(intervals, audio_player, clock):
    return AppHandler(interval_factory=intervals, audio_player=audio_player, clock=clock)


def test_breakdown_at_target_is_expired():
    assert compute_breakdown(TARGET, TARGET) == CountdownBreakdown(0, 0, 0, 0, expired=True)


def test_breakdown_past_target_is_expired():
    result = compute_breakdown(TARGET, TARGET + timedelta(hours=3))
    assert result.expired
    assert (result.days, result.hours, result.minutes, result.seconds) == (0, 0, 0, 0)


def test_breakdown_one_day_one_second():
    now = TARGET - timedelta(days=1, seconds=1)
    assert compute_breakdown(TARGET, now) == CountdownBreakdown(1, 0, 0, 1, expired=False)


def test_breakdown_floors_partial_seconds():
    now = TARGET - timedelta(hours=2, minutes=3, seconds=4, milliseconds=999)
    assert compute_breakdown(TARGET, now) == CountdownBreakdown(0, 2, 3, 4, expired=False)


def test_breakdown_one_millisecond_left_is_not_expired():
    result = compute_breakdown(TARGET, TARGET - timedelta(milliseconds=1))
    assert not result.expired
    assert result.seconds == 0


@pytest.mark.parametrize(
    "value",
    ["December 31, 2025", "2025-12-31", "2025-12-31T00:00:00"],
)
def test_parse_target_date_formats(value):
    parsed = parse_target_date(value)
    assert (parsed.year, parsed.month, parsed.day) == (2025, 12, 31)
    assert parsed.tzinfo is not None


def test_parse_target_date_falls_back_to_default():
    parsed = parse_target_date("not a date")
    assert (parsed.year, parsed.month, parsed.day) == (2025, 12, 31)


def test_countdown_render_uses_config(handler, intervals):
    mounted = handler.render(
        _app("t.app", "countdown", {"targetDate": "2030-01-01T00:00:00+00:00", "title": "Launch"})
    )
    state = mounted.state
    assert isinstance(state, CountdownState)
    assert state.title == "Launch"
    assert state.message == DEFAULT_COUNTDOWN_MESSAGE
    assert state.breakdown == CountdownBreakdown(1, 0, 0, 0, expired=False)
    assert len(intervals.active) == 1
    assert intervals.active[0].seconds == 1.0


def test_countdown_defaults(handler):
    state = handler.render(_app("t.app", "countdown")).state
    assert state.title == DEFAULT_COUNTDOWN_TITLE
    assert state.target.year == 2025


def test_countdown_ticks_follow_clock(handler, intervals, clock):
    mounted = handler.render(_app("t.app", "countdown", {"targetDate": "2030-01-01T00:00:00+00:00"}))
    received = []
    mounted.state.subscribe(received.append)
    clock.now = TARGET - timedelta(seconds=2)
    intervals.advance()
    clock.now = TARGET
    intervals.advance()
    assert received[-2] == CountdownBreakdown(0, 0, 0, 2, expired=False)
    assert received[-1].expired


def test_countdown_cleanup_stops_timer(handler, intervals):
    mounted = handler.render(_app("t.app", "countdown"))
    received = []
    mounted.state.subscribe(received.append)
    handler.cleanup(mounted)
    assert intervals.active == []
    assert not mounted.state.running
    before = len(received)
    assert intervals.advance(5) == 0
    assert len(received) == before


def test_open_then_close_through_window_manager_leaves_no_timers(handler, intervals):
    manager = WindowManager()
    app = _app("t.app", "countdown")
    manager.open(app, handler)
    manager.close(app.path)
    assert intervals.active == []
    assert intervals.advance(3) == 0


def test_cleanup_twice_is_harmless(handler, intervals):
    mounted = handler.render(_app("t.app", "countdown"))
    handler.cleanup(mounted)
    handler.cleanup(mounted)
    handler.cleanup(None)
    assert intervals.active == []


def test_audio_control_reflects_player(handler, audio_player):
    mounted = handler.render(_app("music_player.app", "audio"))
    state = mounted.state
    assert isinstance(state, AudioControlState)
    assert state.available
    received = []
    state.subscribe(received.append)
    assert received == [False]

    audio_player.play()
    assert state.playing
    assert state.status == "Playing"
    assert received[-1] is True

    state.toggle()
    assert not audio_player.is_playing()
    assert received[-1] is False


def test_audio_cleanup_unsubscribes(handler, audio_player):
    mounted = handler.render(_app("music_player.app", "audio"))
    assert len(audio_player.listeners) == 1
    handler.cleanup(mounted)
    assert audio_player.listeners == []


def test_audio_without_player(intervals):
    handler = AppHandler(interval_factory=intervals)
    state = handler.render(_app("music_player.app", "audio")).state
    assert not state.available
    state.toggle()
    assert state.status == "Paused"


def test_unknown_app_type(handler, intervals):
    mounted = handler.render(_app("calc.app", "calculator"))
    assert mounted.state == UnknownAppState("calculator")
    assert intervals.timers == []
    assert handler.render(_app("blank.app")).state == UnknownAppState("none")


def test_app_handler_claims_app_extension(handler):
    untagged = Node(name="x.app", path="/x.app", kind=NodeKind.FILE)
    assert handler.can_handle(untagged)
    assert handler.app_types == ("countdown", "audio")
