"""Raw ROM image loading for CHIP-8 programs."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START

MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot fit into program memory."""


def load_rom(stream: BinaryIO) -> bytes:
    """Read a ROM image from ``stream`` and check that it fits at 0x200."""

    data = stream.read(MAX_ROM_SIZE + 1)
    if not data:
        raise RomFormatError("ROM image is empty")
    if len(data) > MAX_ROM_SIZE:
        raise RomFormatError(f"ROM image exceeds {MAX_ROM_SIZE} bytes of program memory")
    return bytes(data)


def load_rom_from_path(path: Path) -> bytes:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle)
