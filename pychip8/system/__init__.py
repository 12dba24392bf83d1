"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import Machine, MachineConfig, create_machine
from .scheduler import (
    DEFAULT_CYCLE_RATE,
    FRAME_RATE,
    CancellationToken,
    FrameScheduler,
    SystemClock,
)

__all__ = [
    "DEFAULT_CYCLE_RATE",
    "FRAME_RATE",
    "CancellationToken",
    "FrameScheduler",
    "Machine",
    "MachineConfig",
    "SystemClock",
    "create_machine",
]
