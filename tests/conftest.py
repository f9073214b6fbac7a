from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from hedgeos.core.navigation import Navigator
from hedgeos.core.tree_store import TreeStore

SAMPLE_TREE: dict[str, Any] = {
    "/home/hedge": {
        "name": "hedge",
        "type": "folder",
        "children": [
            {
                "name": "Documents",
                "type": "folder",
                "children": [
                    {"name": "readme.md", "type": "file", "content": "# Hello"},
                    {"name": "notes.txt", "type": "file", "content": "plain"},
                    {
                        "name": "script.md",
                        "type": "file",
                        "fileType": "shell",
                        "content": "echo hi",
                    },
                    {"name": "Empty", "type": "folder", "children": []},
                ],
            },
            {
                "name": "Applications",
                "type": "folder",
                "children": [
                    {
                        "name": "music_player.app",
                        "type": "file",
                        "appType": "audio",
                    },
                    {
                        "name": "timer.app",
                        "type": "file",
                        "appType": "countdown",
                        "config": {
                            "targetDate": "2030-01-01T00:00:00+00:00",
                            "title": "Launch",
                        },
                    },
                ],
            },
            {"name": "mystery.unknownext", "type": "file", "content": "?"},
            {"name": ".bashrc", "type": "file", "hidden": True, "content": "alias ll='ls -la'"},
            {
                "name": ".private",
                "type": "folder",
                "hidden": True,
                "children": [{"name": "diary.txt", "type": "file"}],
            },
        ],
    }
}


class FakeTimer:
    def __init__(self, seconds: float, callback: Callable[[], None]) -> None:
        self.seconds = seconds
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeIntervals:
    """Interval factory that only fires when a test advances it."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, seconds: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.stopped]

    def advance(self, ticks: int = 1) -> int:
        fired = 0
        for _ in range(ticks):
            for timer in self.active:
                timer.callback()
                fired += 1
        return fired


class FakeAudioPlayer:
    def __init__(self) -> None:
        self.playing = False
        self.listeners: list[Callable[[bool], None]] = []
        self.stopped = False

    def play(self) -> None:
        self._set(True)

    def pause(self) -> None:
        self._set(False)

    def toggle(self) -> None:
        self._set(not self.playing)

    def stop(self) -> None:
        self.stopped = True
        self._set(False)

    def is_playing(self) -> bool:
        return self.playing

    def on_state_change(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self.listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self.listeners:
                self.listeners.remove(callback)

        return unsubscribe

    def _set(self, value: bool) -> None:
        changed = value != self.playing
        self.playing = value
        if changed:
            for callback in list(self.listeners):
                callback(value)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def sample_tree() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_TREE)


@pytest.fixture
def store(sample_tree: dict[str, Any]) -> TreeStore:
    tree_store = TreeStore()
    tree_store.load(sample_tree)
    return tree_store


@pytest.fixture
def navigator(store: TreeStore) -> Navigator:
    return Navigator(store)


@pytest.fixture
def intervals() -> FakeIntervals:
    return FakeIntervals()


@pytest.fixture
def audio_player() -> FakeAudioPlayer:
    return FakeAudioPlayer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2029, 12, 31, 0, 0, 0, tzinfo=timezone.utc))
