import subprocess

import pytest

from hedgeos.core import audio as audio_module
from hedgeos.core.audio import AudioManager


class FakeProcess:
    def __init__(self, command):
        self.command = command
        self.pid = 4242
        self.returncode = None
        self.terminated = False

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = -15

    def wait(self, timeout=None):
        return self.returncode

    def kill(self):
        self.returncode = -9


class FakePsutilProcess:
    calls = []

    def __init__(self, pid):
        self.pid = pid

    def suspend(self):
        self.calls.append(("suspend", self.pid))

    def resume(self):
        self.calls.append(("resume", self.pid))


@pytest.fixture
def track(tmp_path):
    path = tmp_path / "theme.mp3"
    path.write_bytes(b"ID3")
    return path


@pytest.fixture
def spawned():
    return []


@pytest.fixture
def popen(spawned):
    def _popen(command, **kwargs):
        assert kwargs["stdout"] is subprocess.DEVNULL
        process = FakeProcess(command)
        spawned.append(process)
        return process

    return _popen


@pytest.fixture(autouse=True)
def fake_psutil(monkeypatch):
    FakePsutilProcess.calls = []
    monkeypatch.setattr(audio_module.psutil, "Process", FakePsutilProcess)
    return FakePsutilProcess


def _which_only(*names):
    return lambda name: f"/usr/bin/{name}" if name in names else None


def test_play_spawns_first_available_player(track, popen, spawned):
    manager = AudioManager(track, volume=0.5, popen=popen, which=_which_only("mpv"))
    changes = []
    manager.on_state_change(changes.append)
    manager.play()
    assert manager.is_playing()
    assert changes == [True]
    assert spawned[0].command[0] == "mpv"
    assert "--volume=50" in spawned[0].command


def test_explicit_player_is_used(track, popen, spawned):
    manager = AudioManager(track, player="ffplay", popen=popen, which=_which_only("mpv", "ffplay"))
    manager.play()
    assert spawned[0].command[0] == "ffplay"


def test_pause_suspends_and_play_resumes(track, popen, spawned, fake_psutil):
    manager = AudioManager(track, popen=popen, which=_which_only("mpv"))
    manager.play()
    manager.toggle()
    assert not manager.is_playing()
    manager.toggle()
    assert manager.is_playing()
    assert len(spawned) == 1
    assert fake_psutil.calls == [("suspend", 4242), ("resume", 4242)]


def test_missing_track_leaves_player_paused(tmp_path, popen, spawned):
    manager = AudioManager(tmp_path / "missing.mp3", popen=popen, which=_which_only("mpv"))
    changes = []
    manager.on_state_change(changes.append)
    manager.play()
    assert not manager.is_playing()
    assert spawned == []
    assert changes == []


def test_no_player_on_path(track, popen, spawned):
    manager = AudioManager(track, popen=popen, which=_which_only())
    manager.play()
    assert not manager.is_playing()
    assert spawned == []


def test_no_track_configured(popen):
    manager = AudioManager(None, popen=popen, which=_which_only("mpv"))
    manager.play()
    assert not manager.is_playing()


def test_finished_process_reports_not_playing(track, popen, spawned):
    manager = AudioManager(track, popen=popen, which=_which_only("mpv"))
    manager.play()
    spawned[0].returncode = 0
    assert not manager.is_playing()


def test_stop_terminates_process(track, popen, spawned):
    manager = AudioManager(track, popen=popen, which=_which_only("mpv"))
    manager.play()
    manager.stop()
    assert spawned[0].terminated
    assert not manager.is_playing()
    manager.stop()


def test_unsubscribe(track, popen):
    manager = AudioManager(track, popen=popen, which=_which_only("mpv"))
    changes = []
    unsubscribe = manager.on_state_change(changes.append)
    unsubscribe()
    unsubscribe()
    manager.play()
    assert changes == []


@pytest.mark.parametrize(("level", "expected"), [(-1, 0.0), (0.25, 0.25), (3, 1.0)])
def test_volume_is_clamped(level, expected):
    manager = AudioManager(None, volume=level)
    assert manager.volume == expected
    manager.set_volume(level)
    assert manager.volume == expected
