"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import MAX_ROM_SIZE, RomFormatError, load_rom, load_rom_from_path

__all__ = [
    "MAX_ROM_SIZE",
    "RomFormatError",
    "load_rom",
    "load_rom_from_path",
]
