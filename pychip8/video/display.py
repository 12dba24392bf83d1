"""Shared 64x32 frame buffer used by the CPU and the window thread.

The buffer is packed RGBA, four bytes per pixel, row-major. A pixel is lit
when its red channel is non-zero. All access goes through one lock which is
held only for the duration of a single operation.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional, Sequence

from .palette import MONOCHROME, validate_palette

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
BYTES_PER_PIXEL = 4

Presenter = Callable[[bytes], None]


class DisplayError(RuntimeError):
    """Raised by a presenter when the frame could not be committed."""


class FrameBuffer:
    """Packed RGBA pixel buffer with a fallible present operation."""

    width = DISPLAY_WIDTH
    height = DISPLAY_HEIGHT

    def __init__(
        self,
        presenter: Optional[Presenter] = None,
        palette: Sequence[Sequence[int]] = MONOCHROME,
    ) -> None:
        self._presenter = presenter
        self._background, self._foreground = validate_palette(palette)
        self._buffer = bytearray(bytes(self._background) * (DISPLAY_WIDTH * DISPLAY_HEIGHT))
        self._lock = threading.Lock()
        self.present_count = 0

    def clear(self) -> None:
        pattern = bytes(self._background) * (DISPLAY_WIDTH * DISPLAY_HEIGHT)
        with self._lock:
            self._buffer[:] = pattern

    def toggle_pixel(self, x: int, y: int) -> bool:
        """XOR a lit sprite bit onto ``(x, y)``; return True on collision."""

        offset = self._offset(x, y)
        with self._lock:
            lit = self._buffer[offset] != 0
            color = self._background if lit else self._foreground
            self._buffer[offset : offset + 3] = bytes(color[:3])
            if not lit:
                self._buffer[offset + 3] = color[3]
        return lit

    def is_lit(self, x: int, y: int) -> bool:
        offset = self._offset(x, y)
        with self._lock:
            return self._buffer[offset] != 0

    def snapshot(self) -> bytes:
        with self._lock:
            return bytes(self._buffer)

    def lit_pixels(self) -> set[tuple[int, int]]:
        data = self.snapshot()
        lit: set[tuple[int, int]] = set()
        for y in range(DISPLAY_HEIGHT):
            for x in range(DISPLAY_WIDTH):
                if data[(y * DISPLAY_WIDTH + x) * BYTES_PER_PIXEL] != 0:
                    lit.add((x, y))
        return lit

    def present(self) -> None:
        """Hand the current frame to the presenter.

        Raises :class:`DisplayError` when the presenter fails.
        """

        with self._lock:
            self.present_count += 1
            if self._presenter is None:
                return
            self._presenter(bytes(self._buffer))

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < DISPLAY_WIDTH and 0 <= y < DISPLAY_HEIGHT):
            raise ValueError(f"pixel ({x}, {y}) outside {DISPLAY_WIDTH}x{DISPLAY_HEIGHT} display")
        return (y * DISPLAY_WIDTH + x) * BYTES_PER_PIXEL


__all__ = [
    "BYTES_PER_PIXEL",
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "DisplayError",
    "FrameBuffer",
    "Presenter",
]
