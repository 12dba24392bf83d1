"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log


# CHIP-8 keypad     QWERTY keyboard
# 1 | 2 | 3 | C     1 | 2 | 3 | 4
# 4 | 5 | 6 | D     Q | W | E | R
# 7 | 8 | 9 | E     A | S | D | F
# A | 0 | B | F     Z | X | C | V
KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def lookup_key(key_name: str) -> int | None:
    """Return the keypad code for a physical key name, or None if unmapped."""

    return KEY_MAP.get(key_name.lower())


@dataclass
class Keypad:
    """Set of currently held keypad codes (0x0-0xF)."""

    _pressed: set[int] = field(default_factory=set)

    def press(self, key_name: str) -> None:
        code = lookup_key(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return
        self.press_code(code)

    def release(self, key_name: str) -> None:
        code = lookup_key(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return
        self.release_code(code)

    def press_code(self, code: int) -> None:
        code &= 0x0F
        if code in self._pressed:
            return
        self._pressed.add(code)
        if debug_enabled("input"):
            debug_log("input", "press key=%X", code)

    def release_code(self, code: int) -> None:
        code &= 0x0F
        if code not in self._pressed:
            return
        self._pressed.discard(code)
        if debug_enabled("input"):
            debug_log("input", "release key=%X", code)

    def is_pressed(self, code: int) -> bool:
        return (code & 0x0F) in self._pressed

    def lowest_pressed(self) -> int | None:
        """Return the smallest held code; ties between held keys resolve low."""

        if not self._pressed:
            return None
        return min(self._pressed)

    def reset(self) -> None:
        self._pressed.clear()

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._pressed)
