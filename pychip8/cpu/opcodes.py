"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Mapping


class Opcode(Enum):
    """Every instruction shape the interpreter understands.

    Values are ``(mnemonic, handler, operand layout)``; ``UNKNOWN`` covers
    every word that matches no other member.
    """

    CLS = ("CLS", "op_cls", "")
    RET = ("RET", "op_ret", "")
    JP = ("JP", "op_jp", "nnn")
    CALL = ("CALL", "op_call", "nnn")
    SE_IMM = ("SE", "op_se_imm", "x,nn")
    SNE_IMM = ("SNE", "op_sne_imm", "x,nn")
    SE_REG = ("SE", "op_se_reg", "x,y")
    LD_IMM = ("LD", "op_ld_imm", "x,nn")
    ADD_IMM = ("ADD", "op_add_imm", "x,nn")
    LD_REG = ("LD", "op_ld_reg", "x,y")
    OR = ("OR", "op_or", "x,y")
    AND = ("AND", "op_and", "x,y")
    XOR = ("XOR", "op_xor", "x,y")
    ADD_REG = ("ADD", "op_add_reg", "x,y")
    SUB = ("SUB", "op_sub", "x,y")
    SHR = ("SHR", "op_shr", "x,y")
    SUBN = ("SUBN", "op_subn", "x,y")
    SHL = ("SHL", "op_shl", "x,y")
    SNE_REG = ("SNE", "op_sne_reg", "x,y")
    LD_I = ("LD", "op_ld_i", "I,nnn")
    JP_OFFSET = ("JP", "op_jp_offset", "V0,nnn")
    RND = ("RND", "op_rnd", "x,nn")
    DRW = ("DRW", "op_drw", "x,y,n")
    SKP = ("SKP", "op_skp", "x")
    SKNP = ("SKNP", "op_sknp", "x")
    LD_VX_DT = ("LD", "op_ld_vx_dt", "x,DT")
    LD_VX_K = ("LD", "op_ld_vx_k", "x,K")
    LD_DT_VX = ("LD", "op_ld_dt_vx", "DT,x")
    LD_ST_VX = ("LD", "op_ld_st_vx", "ST,x")
    ADD_I = ("ADD", "op_add_i", "I,x")
    LD_F = ("LD", "op_ld_f", "F,x")
    LD_B = ("LD", "op_ld_b", "B,x")
    LD_MEM_VX = ("LD", "op_ld_mem_vx", "[I],x")
    LD_VX_MEM = ("LD", "op_ld_vx_mem", "x,[I]")
    UNKNOWN = ("???", "op_unknown", "word")

    @property
    def mnemonic(self) -> str:
        return self.value[0]

    @property
    def handler(self) -> str:
        return self.value[1]

    @property
    def layout(self) -> str:
        return self.value[2]


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word and its operand fields."""

    word: int
    opcode: Opcode
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def mnemonic(self) -> str:
        return self.opcode.mnemonic

    def disassemble(self) -> str:
        """Return assembler-style text such as ``ADD V1, V2``."""

        if self.opcode is Opcode.UNKNOWN:
            return f"??? {self.word:04X}"
        layout = self.opcode.layout
        if not layout:
            return self.mnemonic
        operands = []
        for part in layout.split(","):
            if part == "x":
                operands.append(f"V{self.x:X}")
            elif part == "y":
                operands.append(f"V{self.y:X}")
            elif part == "n":
                operands.append(f"{self.n:X}")
            elif part == "nn":
                operands.append(f"{self.nn:02X}")
            elif part == "nnn":
                operands.append(f"{self.nnn:03X}")
            else:
                operands.append(part)
        return f"{self.mnemonic} {', '.join(operands)}"


# Families selected by the top nibble alone.
_BY_FAMILY: Final[Mapping[int, Opcode]] = {
    0x1: Opcode.JP,
    0x2: Opcode.CALL,
    0x3: Opcode.SE_IMM,
    0x4: Opcode.SNE_IMM,
    0x6: Opcode.LD_IMM,
    0x7: Opcode.ADD_IMM,
    0xA: Opcode.LD_I,
    0xB: Opcode.JP_OFFSET,
    0xC: Opcode.RND,
    0xD: Opcode.DRW,
}

# 8XYn
_ALU: Final[Mapping[int, Opcode]] = {
    0x0: Opcode.LD_REG,
    0x1: Opcode.OR,
    0x2: Opcode.AND,
    0x3: Opcode.XOR,
    0x4: Opcode.ADD_REG,
    0x5: Opcode.SUB,
    0x6: Opcode.SHR,
    0x7: Opcode.SUBN,
    0xE: Opcode.SHL,
}

# EXnn
_KEYS: Final[Mapping[int, Opcode]] = {
    0x9E: Opcode.SKP,
    0xA1: Opcode.SKNP,
}

# FXnn
_MISC: Final[Mapping[int, Opcode]] = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I,
    0x29: Opcode.LD_F,
    0x33: Opcode.LD_B,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}


def classify(word: int) -> Opcode:
    """Map a 16-bit word to its :class:`Opcode`; never raises."""

    word &= 0xFFFF
    family = word >> 12
    n = word & 0x000F
    nn = word & 0x00FF

    if family == 0x0:
        if word == 0x00E0:
            return Opcode.CLS
        if word == 0x00EE:
            return Opcode.RET
        return Opcode.UNKNOWN
    if family in _BY_FAMILY:
        return _BY_FAMILY[family]
    if family == 0x5:
        return Opcode.SE_REG if n == 0 else Opcode.UNKNOWN
    if family == 0x9:
        return Opcode.SNE_REG if n == 0 else Opcode.UNKNOWN
    if family == 0x8:
        return _ALU.get(n, Opcode.UNKNOWN)
    if family == 0xE:
        return _KEYS.get(nn, Opcode.UNKNOWN)
    if family == 0xF:
        return _MISC.get(nn, Opcode.UNKNOWN)
    return Opcode.UNKNOWN


def decode(word: int) -> Instruction:
    word &= 0xFFFF
    return Instruction(
        word=word,
        opcode=classify(word),
        x=(word >> 8) & 0x0F,
        y=(word >> 4) & 0x0F,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


__all__ = ["Instruction", "Opcode", "classify", "decode"]
