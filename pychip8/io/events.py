"""Key events passed from the window thread to the emulation thread."""

from __future__ import annotations

import queue
from dataclasses import dataclass

from .keyboard import Keypad


@dataclass(frozen=True)
class KeyEvent:
    """Press or release of a physical key, named as pygame names it."""

    key_name: str
    pressed: bool


class KeyEventQueue:
    """Single-producer/single-consumer FIFO of :class:`KeyEvent`."""

    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[KeyEvent]" = queue.SimpleQueue()

    def put(self, event: KeyEvent) -> None:
        self._queue.put(event)

    def get_nowait(self) -> KeyEvent | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def empty(self) -> bool:
        return self._queue.empty()

    def drain_one(self, keypad: Keypad) -> bool:
        """Apply at most one pending event to ``keypad``.

        Returns True when an event was consumed.
        """

        event = self.get_nowait()
        if event is None:
            return False
        if event.pressed:
            keypad.press(event.key_name)
        else:
            keypad.release(event.key_name)
        return True
