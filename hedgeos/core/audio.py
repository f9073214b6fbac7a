from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Protocol, Sequence

import psutil

from hedgeos.core.logging import get_logger, log_event

logger = get_logger(__name__)

StateListener = Callable[[bool], None]


class AudioPlayer(Protocol):
    def play(self) -> None: ...

    def pause(self) -> None: ...

    def toggle(self) -> None: ...

    def is_playing(self) -> bool: ...

    def on_state_change(self, callback: StateListener) -> Callable[[], None]: ...


def _ffplay(track: Path, volume: float) -> list[str]:
    return ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", "-volume", str(int(volume * 100)), str(track)]


def _mpv(track: Path, volume: float) -> list[str]:
    return ["mpv", "--no-video", "--really-quiet", f"--volume={int(volume * 100)}", str(track)]


def _afplay(track: Path, volume: float) -> list[str]:
    return ["afplay", "-v", f"{volume:.2f}", str(track)]


def _paplay(track: Path, volume: float) -> list[str]:
    return ["paplay", f"--volume={int(volume * 65536)}", str(track)]


PLAYER_COMMANDS: dict[str, Callable[[Path, float], list[str]]] = {
    "ffplay": _ffplay,
    "mpv": _mpv,
    "afplay": _afplay,
    "paplay": _paplay,
}


class AudioManager:
    """Background music driven by a system audio player process.

    Pausing suspends the player process and playing resumes it, so the
    track continues where it stopped. Playback failures are logged and
    leave the manager paused.
    """

    def __init__(
        self,
        track: Path | None,
        *,
        volume: float = 0.3,
        player: str = "",
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._track = track
        self._volume = self._clamp(volume)
        self._player = player
        self._popen = popen
        self._which = which
        self._process: subprocess.Popen | None = None
        self._playing = False
        self._listeners: list[StateListener] = []

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, level: float) -> None:
        """Applies from the next time the player process starts."""
        self._volume = self._clamp(level)

    def on_state_change(self, callback: StateListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def is_playing(self) -> bool:
        return self._playing and self._process_alive()

    def toggle(self) -> None:
        if self.is_playing():
            self.pause()
        else:
            self.play()

    def play(self) -> None:
        if self.is_playing():
            return
        try:
            if self._process_alive():
                psutil.Process(self._process.pid).resume()  # type: ignore[union-attr]
            else:
                self._process = self._spawn()
        except (OSError, psutil.Error, RuntimeError) as exc:
            log_event(logger, "audio_play_failed", error=str(exc), track=str(self._track))
            self._process = None
            self._set_playing(False)
            return
        self._set_playing(True)

    def pause(self) -> None:
        if self._process_alive():
            try:
                psutil.Process(self._process.pid).suspend()  # type: ignore[union-attr]
            except psutil.Error as exc:
                log_event(logger, "audio_pause_failed", error=str(exc))
        self._set_playing(False)

    def stop(self) -> None:
        process = self._process
        self._process = None
        if process is not None and process.poll() is None:
            try:
                psutil.Process(process.pid).resume()
            except psutil.Error as exc:
                log_event(logger, "audio_resume_failed", error=str(exc))
            process.terminate()
            try:
                process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                process.kill()
        self._set_playing(False)

    def _spawn(self) -> subprocess.Popen:
        if self._track is None:
            raise RuntimeError("No audio track configured")
        if not self._track.exists():
            raise RuntimeError(f"Audio track not found: {self._track}")
        command = self._player_command()
        return self._popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def _player_command(self) -> Sequence[str]:
        names = [self._player] if self._player else list(PLAYER_COMMANDS)
        for name in names:
            builder = PLAYER_COMMANDS.get(name)
            if builder is not None and self._which(name):
                return builder(self._track, self._volume)  # type: ignore[arg-type]
        raise RuntimeError("No supported audio player found on PATH")

    def _process_alive(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def _set_playing(self, value: bool) -> None:
        changed = value != self._playing
        self._playing = value
        if changed:
            for callback in list(self._listeners):
                callback(value)

    @staticmethod
    def _clamp(level: float) -> float:
        return max(0.0, min(1.0, float(level)))
