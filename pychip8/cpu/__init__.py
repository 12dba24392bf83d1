"""CPU package for the CHIP-8 interpreter."""

from .core import FLAG, Chip8CPU, CPUError, CPUState, StackUnderflowError
from .opcodes import Instruction, Opcode, decode
from .quirks import Quirks
from . import opcodes

__all__ = [
    "FLAG",
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "StackUnderflowError",
    "Instruction",
    "Opcode",
    "Quirks",
    "decode",
    "opcodes",
]
