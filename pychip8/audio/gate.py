"""Sound-timer driven play/pause gate for an audio sink."""

from __future__ import annotations

from typing import Optional, Protocol

from pychip8.utils import debug_enabled, debug_log


class AudioError(RuntimeError):
    """Raised by an audio sink when playback cannot be toggled."""


class AudioSink(Protocol):
    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...


class AudioGate:
    """Keep ``sink`` playing while the sound timer is non-zero.

    The sink is only called on transitions. A failed call leaves the gate in
    its previous state so the next update retries.
    """

    def __init__(self, sink: Optional[AudioSink] = None) -> None:
        self._sink = sink
        self._playing = False

    def attach(self, sink: Optional[AudioSink]) -> None:
        self._sink = sink
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    def update(self, sound_timer: int) -> None:
        want = sound_timer > 0
        if want == self._playing:
            return
        if self._sink is not None:
            if want:
                self._sink.play()
            else:
                self._sink.pause()
        self._playing = want
        if debug_enabled("audio"):
            debug_log("audio", "tone %s timer=%d", "on" if want else "off", sound_timer)
