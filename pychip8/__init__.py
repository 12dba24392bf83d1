"""CHIP-8 interpreter with a pygame front end.

Subpackages: ``bus`` (memory), ``cpu`` (decoder and execution engine),
``io`` (keypad and key events), ``video`` (frame buffer and font), ``audio``
(tone gate), ``system`` (machine assembly and frame scheduler), ``loader``
(ROM images), ``ui`` (window) and ``utils`` (debug logging and tracing).
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
