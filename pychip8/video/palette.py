"""Palette definitions for CHIP-8 rendering."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBAColor = Tuple[int, int, int, int]


# (background, foreground)
MONOCHROME: Tuple[RGBAColor, RGBAColor] = ((0x00, 0x00, 0x00, 0xFF), (0xFF, 0xFF, 0xFF, 0xFF))


def validate_palette(palette: Sequence[Sequence[int]]) -> Tuple[RGBAColor, RGBAColor]:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (background and foreground)")
    if any(len(color) not in (3, 4) for color in palette):
        raise ValueError("palette entries must be RGB or RGBA tuples")
    result = []
    for color in palette:
        channels = [int(channel) & 0xFF for channel in color]
        if len(channels) == 3:
            channels.append(0xFF)
        result.append(tuple(channels))
    if result[0][0] != 0 or result[1][0] == 0:
        raise ValueError("background red channel must be 0 and foreground red channel non-zero")
    return tuple(result)  # type: ignore[return-value]
