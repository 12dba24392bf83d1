"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.cpu import Quirks
from pychip8.system import DEFAULT_CYCLE_RATE
from pychip8.ui.app import AppConfig, Chip8App


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="A CHIP-8 interpreter",
    )
    parser.add_argument(
        "--rom",
        type=Path,
        required=True,
        help="Path to the CHIP-8 ROM",
    )
    parser.add_argument(
        "--rate",
        type=int,
        default=DEFAULT_CYCLE_RATE,
        help=f"Instructions executed per second (default: {DEFAULT_CYCLE_RATE})",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the interpreter in fullscreen mode",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Do not open an audio device",
    )
    parser.add_argument(
        "--shift-quirk",
        action="store_true",
        help="Original behaviour of 8XY6/8XYE: shift VY into VX",
    )
    parser.add_argument(
        "--jump-offset-quirk",
        action="store_true",
        help="Original behaviour of BNNN: jump to NNN + V0",
    )
    parser.add_argument(
        "--load-store-quirk",
        action="store_true",
        help="Original behaviour of FX55/FX65: advance I past the transferred bytes",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.rate <= 0:
        parser.error("--rate must be positive")
    if args.scale <= 0:
        parser.error("--scale must be positive")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        cycle_rate=args.rate,
        quirks=Quirks(
            shift_uses_vy=args.shift_quirk,
            jump_offset_uses_v0=args.jump_offset_quirk,
            load_store_advances_index=args.load_store_quirk,
        ),
        fullscreen=args.fullscreen,
        mute=args.mute,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
