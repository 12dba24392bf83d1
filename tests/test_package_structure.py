"""Baseline tests ensuring the package skeleton loads correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("cpu", "bus", "video", "audio", "io", "system", "loader", "ui", "utils"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_cpu_exports() -> None:
    from pychip8 import cpu

    for name in ("Chip8CPU", "CPUState", "Instruction", "Opcode", "Quirks", "decode", "StackUnderflowError"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"


def test_system_exports() -> None:
    from pychip8 import system

    for name in ("Machine", "MachineConfig", "create_machine", "FrameScheduler", "CancellationToken"):
        assert hasattr(system, name), f"system missing symbol: {name}"
