"""Decoder coverage for every 16-bit word."""

from __future__ import annotations

import pytest

from pychip8.cpu import Opcode, decode
from pychip8.cpu.opcodes import classify


@pytest.mark.parametrize(
    ("word", "opcode"),
    [
        (0x00E0, Opcode.CLS),
        (0x00EE, Opcode.RET),
        (0x1234, Opcode.JP),
        (0x2345, Opcode.CALL),
        (0x3A12, Opcode.SE_IMM),
        (0x4A12, Opcode.SNE_IMM),
        (0x5AB0, Opcode.SE_REG),
        (0x6A12, Opcode.LD_IMM),
        (0x7A12, Opcode.ADD_IMM),
        (0x8AB0, Opcode.LD_REG),
        (0x8AB1, Opcode.OR),
        (0x8AB2, Opcode.AND),
        (0x8AB3, Opcode.XOR),
        (0x8AB4, Opcode.ADD_REG),
        (0x8AB5, Opcode.SUB),
        (0x8AB6, Opcode.SHR),
        (0x8AB7, Opcode.SUBN),
        (0x8ABE, Opcode.SHL),
        (0x9AB0, Opcode.SNE_REG),
        (0xA123, Opcode.LD_I),
        (0xB123, Opcode.JP_OFFSET),
        (0xCA12, Opcode.RND),
        (0xDAB5, Opcode.DRW),
        (0xEA9E, Opcode.SKP),
        (0xEAA1, Opcode.SKNP),
        (0xFA07, Opcode.LD_VX_DT),
        (0xFA0A, Opcode.LD_VX_K),
        (0xFA15, Opcode.LD_DT_VX),
        (0xFA18, Opcode.LD_ST_VX),
        (0xFA1E, Opcode.ADD_I),
        (0xFA29, Opcode.LD_F),
        (0xFA33, Opcode.LD_B),
        (0xFA55, Opcode.LD_MEM_VX),
        (0xFA65, Opcode.LD_VX_MEM),
    ],
)
def test_known_shapes(word: int, opcode: Opcode) -> None:
    assert classify(word) is opcode


@pytest.mark.parametrize(
    "word",
    [0x0000, 0x0123, 0x00E1, 0x5AB1, 0x8AB8, 0x8ABF, 0x9AB1, 0xEA9F, 0xE000, 0xF000, 0xFAFF],
)
def test_unknown_shapes(word: int) -> None:
    assert classify(word) is Opcode.UNKNOWN


def test_decoding_is_total() -> None:
    seen: set[Opcode] = set()
    for word in range(0x10000):
        instruction = decode(word)
        assert isinstance(instruction.opcode, Opcode)
        seen.add(instruction.opcode)
    assert seen == set(Opcode)


def test_operand_fields() -> None:
    instruction = decode(0xD7A3)

    assert instruction.x == 0x7
    assert instruction.y == 0xA
    assert instruction.n == 0x3
    assert instruction.nn == 0xA3
    assert instruction.nnn == 0x7A3


def test_every_opcode_has_a_cpu_handler() -> None:
    from pychip8.cpu import Chip8CPU

    for opcode in Opcode:
        assert callable(getattr(Chip8CPU, opcode.handler, None)), opcode


def test_disassemble() -> None:
    assert decode(0x00E0).disassemble() == "CLS"
    assert decode(0x8124).disassemble() == "ADD V1, V2"
    assert decode(0xA2F0).disassemble() == "LD I, 2F0"
    assert decode(0xD125).disassemble() == "DRW V1, V2, 5"
    assert decode(0xF355).disassemble() == "LD [I], V3"
    assert decode(0x0123).disassemble() == "??? 0123"
