from __future__ import annotations

import random

from pychip8.bus import PROGRAM_START
from pychip8.cpu import Quirks
from pychip8.system import DEFAULT_CYCLE_RATE, MachineConfig, create_machine
from pychip8.video import FONT_START


def test_machine_wires_shared_components() -> None:
    machine = create_machine(MachineConfig())

    assert machine.cpu.memory is machine.memory
    assert machine.cpu.keypad is machine.keypad
    assert machine.cpu.display is machine.display
    assert machine.scheduler.token is machine.token
    assert machine.scheduler.cycle_rate == DEFAULT_CYCLE_RATE
    assert machine.trace is None


def test_rom_and_font_are_loaded() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x12\x00"))

    assert machine.memory.read_block(PROGRAM_START, 2) == b"\x12\x00"
    assert machine.memory.read_block(FONT_START, 5) == b"\xF0\x90\x90\x90\xF0"
    assert machine.cpu.state.pc == PROGRAM_START


def test_config_options_are_applied() -> None:
    quirks = Quirks.cosmac_vip()
    rng = random.Random(1)
    machine = create_machine(
        MachineConfig(cycle_rate=1000, quirks=quirks, rng=rng, trace_capacity=8)
    )

    assert machine.cpu.quirks is quirks
    assert machine.cpu.rng is rng
    assert machine.scheduler.cycle_rate == 1000
    assert machine.trace is not None
    assert machine.cpu.trace is machine.trace


def test_trace_records_executed_instructions() -> None:
    # LD V3, 7; JP 0x202
    machine = create_machine(MachineConfig(rom_image=b"\x63\x07\x12\x02", trace_capacity=4))

    machine.cpu.run_cycles(3)

    entries = list(machine.trace.entries())
    assert len(entries) == 3
    assert entries[0].word == 0x6307
    assert entries[-1].word == 0x1202
