"""Frame-paced cycle loop for the CHIP-8 interpreter.

Each iteration of :meth:`FrameScheduler.run_frame` waits for the next 1/60s
frame boundary, applies at most one pending key event, executes as many
instructions as the configured rate says should have completed by now,
gates the tone on the sound timer before decaying both timers once, and
presents the frame if any instruction asked for a redraw.
"""

from __future__ import annotations

import threading
import time
from typing import Optional, Protocol

from pychip8.audio import AudioError, AudioGate
from pychip8.cpu import Chip8CPU
from pychip8.io import KeyEventQueue
from pychip8.utils import debug_enabled, debug_log, report
from pychip8.video import DisplayError

FRAME_RATE = 60
FRAME_DURATION = 1.0 / FRAME_RATE
DEFAULT_CYCLE_RATE = 700

# absorbs float error when elapsed time lands exactly on a cycle boundary
_ROUNDING = 1e-6


class Clock(Protocol):
    def now(self) -> float:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """Wall-clock time source backed by ``time.perf_counter``."""

    def now(self) -> float:
        return time.perf_counter()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class CancellationToken:
    """Stop signal shared between the window thread and the cycle loop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class FrameScheduler:
    """Drive a :class:`Chip8CPU` at ``cycle_rate`` instructions per second."""

    def __init__(
        self,
        cpu: Chip8CPU,
        *,
        cycle_rate: int = DEFAULT_CYCLE_RATE,
        clock: Optional[Clock] = None,
        key_events: Optional[KeyEventQueue] = None,
        audio_gate: Optional[AudioGate] = None,
        token: Optional[CancellationToken] = None,
    ) -> None:
        if cycle_rate <= 0:
            raise ValueError("cycle_rate must be positive")
        self._cpu = cpu
        self._cycle_rate = cycle_rate
        self._clock = clock or SystemClock()
        self._key_events = key_events
        self._audio_gate = audio_gate or AudioGate()
        self.token = token or CancellationToken()

        self._start_time: float | None = None
        self._last_frame_time = 0.0
        self.cycles_executed = 0
        self.frame_count = 0

    @property
    def cycle_rate(self) -> int:
        return self._cycle_rate

    def start(self) -> None:
        now = self._clock.now()
        self._start_time = now
        self._last_frame_time = now
        self.cycles_executed = 0
        self.frame_count = 0

    def run(self) -> None:
        """Loop frames until the token is cancelled.

        CPU errors (stack underflow, out-of-bounds access) stop the loop and
        propagate to the caller.
        """

        if self._start_time is None:
            self.start()
        while not self.token.cancelled:
            self.run_frame()
        if debug_enabled("timing"):
            debug_log("timing", "stopped frames=%d cycles=%d", self.frame_count, self.cycles_executed)

    def run_frame(self) -> int:
        """Run one frame and return the number of instructions executed."""

        if self._start_time is None:
            self.start()
        clock = self._clock

        elapsed = clock.now() - self._last_frame_time
        if elapsed < FRAME_DURATION:
            clock.sleep(FRAME_DURATION - elapsed)
        now = clock.now()
        self._last_frame_time = now

        if self._key_events is not None:
            self._key_events.drain_one(self._cpu.keypad)

        due = int((now - self._start_time) * self._cycle_rate + _ROUNDING) - self.cycles_executed
        if due > 0:
            self._cpu.run_cycles(due)
            self.cycles_executed += due
        else:
            due = 0

        self._update_audio()
        self._cpu.tick_timers()

        if self._cpu.draw_requested:
            self._present()
            self._cpu.draw_requested = False

        self.frame_count += 1
        if debug_enabled("timing"):
            debug_log("timing", "frame=%d cycles=%d total=%d", self.frame_count, due, self.cycles_executed)
        return due

    def _update_audio(self) -> None:
        try:
            self._audio_gate.update(self._cpu.state.sound_timer)
        except AudioError as exc:
            report("audio", "tone toggle failed: %s", exc)

    def _present(self) -> None:
        try:
            self._cpu.display.present()
        except DisplayError as exc:
            report("video", "failed to present frame: %s", exc)


__all__ = [
    "CancellationToken",
    "Clock",
    "DEFAULT_CYCLE_RATE",
    "FRAME_DURATION",
    "FRAME_RATE",
    "FrameScheduler",
    "SystemClock",
]
