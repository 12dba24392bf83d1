"""Selectable legacy behaviours of the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Quirks:
    """Construction-time switches between historical interpreter variants.

    shift_uses_vy
        8XY6/8XYE shift VY into VX (COSMAC VIP) instead of shifting VX in
        place (CHIP-48/SUPER-CHIP).
    jump_offset_uses_v0
        BNNN jumps to NNN + V0 (COSMAC VIP) instead of XNN + VX.
    load_store_advances_index
        FX55/FX65 leave I pointing past the last transferred byte.
    """

    shift_uses_vy: bool = False
    jump_offset_uses_v0: bool = False
    load_store_advances_index: bool = False

    @classmethod
    def cosmac_vip(cls) -> "Quirks":
        return cls(shift_uses_vy=True, jump_offset_uses_v0=True, load_store_advances_index=True)
