"""CHIP-8 CPU: register file, fetch/decode/execute and timers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

from pychip8.bus import PROGRAM_START, Memory
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log, report
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, FrameBuffer, glyph_address, load_font

from .opcodes import Instruction, Opcode, decode
from .quirks import Quirks


class CPUError(Exception):
    """Base error for CPU-related failures."""


class StackUnderflowError(CPUError):
    """Raised when RET executes with an empty call stack."""

    def __init__(self, pc: int) -> None:
        self.pc = pc
        super().__init__(f"return with empty call stack at pc={pc:#05x}")


FLAG = 0xF


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    pc: int = PROGRAM_START
    index: int = 0x000
    v: bytearray = field(default_factory=lambda: bytearray(16))
    stack: list[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0


@dataclass
class Chip8CPU:
    """Fetch/decode/execute engine operating on memory, keypad and display."""

    memory: Memory
    display: FrameBuffer
    keypad: Keypad
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)
    trace: TraceRecorder | None = None

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0
    draw_requested: bool = False
    unknown_count: int = 0

    def __post_init__(self) -> None:
        load_font(self.memory)

    def reset(self) -> None:
        """Zero memory and registers and reload the font."""

        self.memory.clear()
        load_font(self.memory)
        self.state = CPUState()
        self.cycle_count = 0
        self.draw_requested = False
        self.unknown_count = 0

    def load_rom(self, data: Iterable[int]) -> None:
        """Copy ``data`` verbatim to the program origin."""

        self.memory.write_block(PROGRAM_START, data)

    def fetch(self) -> int:
        word = self.memory.load16(self.state.pc)
        self.state.pc = (self.state.pc + 2) & 0xFFFF
        return word

    def step(self) -> Instruction:
        """Execute a single instruction and return it decoded."""

        pc_before = self.state.pc
        word = self.fetch()
        instruction = decode(word)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x word=%04x %s", pc_before, word, instruction.disassemble())
        handler = getattr(self, instruction.opcode.handler)
        handler(instruction)
        self.cycle_count += 1
        if self.trace is not None:
            self.trace.record_step(self.state, word, mnemonic=instruction.disassemble())
        return instruction

    def run_cycles(self, count: int) -> int:
        for _ in range(count):
            self.step()
        return count

    def tick_timers(self) -> None:
        """Decay both timers by one frame tick."""

        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1
        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_unknown(self, instruction: Instruction) -> None:
        self.unknown_count += 1
        report(
            "cpu",
            "unknown instruction %04X at pc=%03X",
            instruction.word,
            (self.state.pc - 2) & 0xFFFF,
        )

    def op_cls(self, _: Instruction) -> None:
        self.display.clear()
        self.draw_requested = True

    def op_ret(self, _: Instruction) -> None:
        if not self.state.stack:
            raise StackUnderflowError((self.state.pc - 2) & 0xFFFF)
        self.state.pc = self.state.stack.pop()

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        self.state.stack.append(self.state.pc)
        self.state.pc = instruction.nnn

    def op_se_imm(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == instruction.nn:
            self._skip()

    def op_sne_imm(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != instruction.nn:
            self._skip()

    def op_se_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == self.state.v[instruction.y]:
            self._skip()

    def op_sne_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != self.state.v[instruction.y]:
            self._skip()

    def op_ld_imm(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.nn

    def op_add_imm(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.nn) & 0xFF

    def op_ld_reg(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.v[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] |= self.state.v[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] &= self.state.v[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] ^= self.state.v[instruction.y]

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[FLAG] = 1 if total > 0xFF else 0

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vx - vy) & 0xFF
        v[FLAG] = 1 if vx >= vy else 0

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vy - vx) & 0xFF
        v[FLAG] = 1 if vy >= vx else 0

    def op_shr(self, instruction: Instruction) -> None:
        v = self.state.v
        value = self._shift_source(instruction)
        v[instruction.x] = value >> 1
        v[FLAG] = value & 0x01

    def op_shl(self, instruction: Instruction) -> None:
        v = self.state.v
        value = self._shift_source(instruction)
        v[instruction.x] = (value << 1) & 0xFF
        v[FLAG] = (value >> 7) & 0x01

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.index = instruction.nnn

    def op_jp_offset(self, instruction: Instruction) -> None:
        register = 0 if self.quirks.jump_offset_uses_v0 else instruction.x
        self.state.pc = (instruction.nnn + self.state.v[register]) & 0xFFFF

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.rng.randrange(0x100) & instruction.nn

    def op_drw(self, instruction: Instruction) -> None:
        v = self.state.v
        origin_x = v[instruction.x] % DISPLAY_WIDTH
        origin_y = v[instruction.y] % DISPLAY_HEIGHT
        v[FLAG] = 0
        self.draw_requested = True

        collision = False
        for row in range(instruction.n):
            y = origin_y + row
            if y >= DISPLAY_HEIGHT:
                break
            sprite = self.memory.load8(self.state.index + row)
            for column in range(8):
                x = origin_x + column
                if x >= DISPLAY_WIDTH:
                    break
                if sprite & (0x80 >> column) and self.display.toggle_pixel(x, y):
                    collision = True
        if collision:
            v[FLAG] = 1

    def op_skp(self, instruction: Instruction) -> None:
        if self.keypad.is_pressed(self.state.v[instruction.x]):
            self._skip()

    def op_sknp(self, instruction: Instruction) -> None:
        if not self.keypad.is_pressed(self.state.v[instruction.x]):
            self._skip()

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.delay_timer

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = self.keypad.lowest_pressed()
        if key is None:
            # re-execute this instruction on the next cycle
            self.state.pc = (self.state.pc - 2) & 0xFFFF
            return
        self.state.v[instruction.x] = key

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.v[instruction.x]

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.v[instruction.x]

    def op_add_i(self, instruction: Instruction) -> None:
        self.state.index = (self.state.index + self.state.v[instruction.x]) & 0xFFFF

    def op_ld_f(self, instruction: Instruction) -> None:
        self.state.index = glyph_address(self.state.v[instruction.x])

    def op_ld_b(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        self.memory.write_block(self.state.index, (value // 100, (value // 10) % 10, value % 10))

    def op_ld_mem_vx(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.memory.write_block(self.state.index, self.state.v[:count])
        self._advance_index(count)

    def op_ld_vx_mem(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.state.v[:count] = self.memory.read_block(self.state.index, count)
        self._advance_index(count)

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _shift_source(self, instruction: Instruction) -> int:
        if self.quirks.shift_uses_vy:
            return self.state.v[instruction.y]
        return self.state.v[instruction.x]

    def _advance_index(self, count: int) -> None:
        if self.quirks.load_store_advances_index:
            self.state.index = (self.state.index + count) & 0xFFFF


__all__ = [
    "CPUError",
    "CPUState",
    "Chip8CPU",
    "FLAG",
    "Opcode",
    "StackUnderflowError",
]
