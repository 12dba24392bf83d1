"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from pychip8.audio import AudioGate, AudioSink
from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU, Quirks
from pychip8.io import KeyEventQueue, Keypad
from pychip8.utils import TraceRecorder
from pychip8.video import MONOCHROME, FrameBuffer
from pychip8.video.display import Presenter

from .scheduler import DEFAULT_CYCLE_RATE, CancellationToken, Clock, FrameScheduler


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    cycle_rate: int = DEFAULT_CYCLE_RATE
    quirks: Quirks = field(default_factory=Quirks)
    rom_image: Optional[bytes] = None
    presenter: Optional[Presenter] = None
    audio_sink: Optional[AudioSink] = None
    rng: Optional[random.Random] = None
    trace_capacity: Optional[int] = None
    palette: Sequence[Sequence[int]] = MONOCHROME


@dataclass
class Machine:
    """Aggregates the core components of the interpreter."""

    memory: Memory
    cpu: Chip8CPU
    keypad: Keypad
    display: FrameBuffer
    key_events: KeyEventQueue
    audio_gate: AudioGate
    scheduler: FrameScheduler
    token: CancellationToken
    trace: TraceRecorder | None = None


def create_machine(config: MachineConfig, *, clock: Optional[Clock] = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    memory = Memory()
    display = FrameBuffer(config.presenter, config.palette)
    keypad = Keypad()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity else None

    cpu = Chip8CPU(
        memory,
        display,
        keypad,
        quirks=config.quirks,
        rng=config.rng or random.Random(),
        trace=trace,
    )
    if config.rom_image:
        cpu.load_rom(config.rom_image)

    key_events = KeyEventQueue()
    audio_gate = AudioGate(config.audio_sink)
    token = CancellationToken()
    scheduler = FrameScheduler(
        cpu,
        cycle_rate=config.cycle_rate,
        clock=clock,
        key_events=key_events,
        audio_gate=audio_gate,
        token=token,
    )

    return Machine(
        memory=memory,
        cpu=cpu,
        keypad=keypad,
        display=display,
        key_events=key_events,
        audio_gate=audio_gate,
        scheduler=scheduler,
        token=token,
        trace=trace,
    )
