"""Input handling for the CHIP-8 interpreter."""

from .events import KeyEvent, KeyEventQueue
from .keyboard import KEY_MAP, Keypad, lookup_key

__all__ = [
    "KEY_MAP",
    "KeyEvent",
    "KeyEventQueue",
    "Keypad",
    "lookup_key",
]
