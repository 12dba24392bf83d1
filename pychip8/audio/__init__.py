"""Audio output for the CHIP-8 interpreter."""

from .gate import AudioError, AudioGate, AudioSink
from .beeper import SquareWaveBeeper

__all__ = [
    "AudioError",
    "AudioGate",
    "AudioSink",
    "SquareWaveBeeper",
]
