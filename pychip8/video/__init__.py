"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import (
    BYTES_PER_PIXEL,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    DisplayError,
    FrameBuffer,
)
from .font import FONT_DATA, FONT_START, GLYPH_BYTES, glyph_address, load_font
from .palette import MONOCHROME, validate_palette

__all__ = [
    "BYTES_PER_PIXEL",
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "DisplayError",
    "FrameBuffer",
    "FONT_DATA",
    "FONT_START",
    "GLYPH_BYTES",
    "glyph_address",
    "load_font",
    "MONOCHROME",
    "validate_palette",
]
