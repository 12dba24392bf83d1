"""Looping square-wave tone played through pygame's mixer."""

from __future__ import annotations

from array import array
import math
from typing import Optional

from .gate import AudioError


class SquareWaveBeeper:
    """Pre-build one looping tone and expose play/pause on it."""

    def __init__(
        self,
        *,
        frequency: float = 440.0,
        sample_rate: int = 44_100,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise AudioError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise AudioError("pygame mixer must be initialised before creating SquareWaveBeeper")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._volume = max(0.0, min(1.0, volume))
        self._frequency = frequency
        self._sound: Optional["pygame.mixer.Sound"] = self._build_sound(frequency)
        self._channel: Optional["pygame.mixer.Channel"] = None

    # ------------------------------------------------------------------
    # Public API

    def play(self) -> None:
        """Start (or resume) the looping tone."""

        pygame = self._pygame
        try:
            if self._channel is None:
                self._channel = self._sound.play(loops=-1)
                if self._channel is None:
                    raise AudioError("no free mixer channel for the beeper")
                self._channel.set_volume(self._volume)
            else:
                self._channel.unpause()
        except pygame.error as exc:
            raise AudioError(f"failed to start tone: {exc}") from exc

    def pause(self) -> None:
        if self._channel is None:
            return
        try:
            self._channel.pause()
        except self._pygame.error as exc:
            raise AudioError(f"failed to pause tone: {exc}") from exc

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        if self._channel is not None:
            self._channel.stop()
        self._channel = None

    # ------------------------------------------------------------------
    # Internals

    def _build_sound(self, frequency: float) -> "pygame.mixer.Sound":
        if frequency <= 0.0:
            raise AudioError("tone frequency must be positive")

        period_samples = max(32, int(round(self._sample_rate / frequency)))
        # Band-limited square wave: sum of odd harmonics below Nyquist.
        rank = int(((self._sample_rate / (2.0 * frequency)) + 1.0) / 2.0)
        rank = max(1, min(30, rank))

        buffer = array("h")
        amplitude = 12_000
        scale = (4.0 / math.pi) * amplitude
        for index in range(period_samples):
            phase = (2.0 * math.pi * index) / period_samples
            total = 0.0
            for harmonic in range(rank):
                k = 2 * harmonic + 1
                total += math.sin(k * phase) / k
            value = max(-amplitude, min(amplitude, total * scale))
            buffer.append(int(value))

        try:
            return self._pygame.mixer.Sound(buffer=buffer.tobytes())
        except self._pygame.error as exc:  # pragma: no cover - pygame error path
            raise AudioError(f"failed to build tone: {exc}") from exc


__all__ = ["SquareWaveBeeper"]
