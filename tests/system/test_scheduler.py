"""Frame scheduler tests driven by a fake clock."""

from __future__ import annotations

import threading

import pytest

from pychip8.audio import AudioError
from pychip8.cpu import StackUnderflowError
from pychip8.io import KeyEvent
from pychip8.system import FRAME_RATE, CancellationToken, MachineConfig, create_machine
from pychip8.video import DisplayError


class FakeClock:
    """Manual time source; sleeping advances time instantly."""

    def __init__(self) -> None:
        self.time = 0.0
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.time

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds

    def advance(self, seconds: float) -> None:
        self.time += seconds


def program(*words: int) -> bytes:
    data = bytearray()
    for word in words:
        data += bytes(((word >> 8) & 0xFF, word & 0xFF))
    return bytes(data)


# JP 0x200: spin forever
SPIN = program(0x1200)


def make_machine(rom: bytes = SPIN, *, rate: int = 600, **kwargs):
    clock = FakeClock()
    machine = create_machine(MachineConfig(cycle_rate=rate, rom_image=rom, **kwargs), clock=clock)
    return machine, clock


def test_first_frame_sleeps_a_full_frame_and_runs_due_cycles() -> None:
    machine, clock = make_machine(rate=600)

    executed = machine.scheduler.run_frame()

    assert clock.sleeps == [pytest.approx(1 / FRAME_RATE)]
    assert executed == 10
    assert machine.cpu.cycle_count == 10


def test_cycle_count_tracks_elapsed_time() -> None:
    machine, clock = make_machine(rate=700)

    for _ in range(FRAME_RATE):
        machine.scheduler.run_frame()

    assert machine.scheduler.cycles_executed == 700
    assert machine.cpu.cycle_count == 700


def test_catch_up_after_stall_without_sleeping() -> None:
    machine, clock = make_machine(rate=600)
    machine.scheduler.run_frame()
    clock.sleeps.clear()

    clock.advance(0.5)
    executed = machine.scheduler.run_frame()

    assert clock.sleeps == []
    assert executed == 300


@pytest.mark.parametrize("rate", [60, 700, 5000])
def test_timers_decrement_once_per_frame_regardless_of_rate(rate: int) -> None:
    machine, _ = make_machine(rate=rate)
    machine.cpu.state.delay_timer = 30
    machine.cpu.state.sound_timer = 20

    for _ in range(10):
        machine.scheduler.run_frame()

    assert machine.cpu.state.delay_timer == 20
    assert machine.cpu.state.sound_timer == 10


def test_multiple_draws_are_presented_once_per_frame() -> None:
    frames: list[bytes] = []
    # CLS, DRW V0,V0,1, DRW V0,V0,1, JP 0x206
    rom = program(0x00E0, 0xD001, 0xD001, 0x1206)
    machine, _ = make_machine(rom, rate=600, presenter=frames.append)

    machine.scheduler.run_frame()
    assert len(frames) == 1
    assert not machine.cpu.draw_requested

    machine.scheduler.run_frame()
    assert len(frames) == 1


def test_display_failure_does_not_stop_the_loop(capsys) -> None:
    def failing(_: bytes) -> None:
        raise DisplayError("surface lost")

    machine, _ = make_machine(program(0x00E0, 0x1200), presenter=failing)

    machine.scheduler.run_frame()
    machine.scheduler.run_frame()

    assert machine.scheduler.frame_count == 2
    assert "failed to present frame" in capsys.readouterr().err


class FlakySink:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def play(self) -> None:
        raise AudioError("no device")

    def pause(self) -> None:
        self.calls.append("pause")


def test_audio_failure_does_not_stop_the_loop(capsys) -> None:
    machine, _ = make_machine(audio_sink=FlakySink())
    machine.cpu.state.sound_timer = 5

    machine.scheduler.run_frame()

    assert machine.scheduler.frame_count == 1
    assert "tone toggle failed" in capsys.readouterr().err


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def play(self) -> None:
        self.calls.append("play")

    def pause(self) -> None:
        self.calls.append("pause")


def test_tone_follows_sound_timer() -> None:
    sink = RecordingSink()
    # LD V0, 3; LD ST, V0; JP 0x204
    machine, _ = make_machine(program(0x6003, 0xF018, 0x1204), audio_sink=sink)

    machine.scheduler.run_frame()
    assert machine.cpu.state.sound_timer == 2
    assert sink.calls == ["play"]

    machine.scheduler.run_frame()
    machine.scheduler.run_frame()
    assert machine.cpu.state.sound_timer == 0
    assert sink.calls == ["play"]

    machine.scheduler.run_frame()
    assert sink.calls == ["play", "pause"]


def test_sound_timer_of_one_sounds_for_one_frame() -> None:
    sink = RecordingSink()
    # LD V0, 1; LD ST, V0; JP 0x204
    machine, _ = make_machine(program(0x6001, 0xF018, 0x1204), audio_sink=sink)

    machine.scheduler.run_frame()
    assert sink.calls == ["play"]
    assert machine.cpu.state.sound_timer == 0

    machine.scheduler.run_frame()
    assert sink.calls == ["play", "pause"]


def test_key_events_are_drained_one_per_frame() -> None:
    machine, _ = make_machine()
    machine.key_events.put(KeyEvent("1", True))
    machine.key_events.put(KeyEvent("2", True))

    machine.scheduler.run_frame()
    assert machine.keypad.snapshot() == frozenset({0x1})

    machine.scheduler.run_frame()
    assert machine.keypad.snapshot() == frozenset({0x1, 0x2})


def test_block_for_key_waits_across_frames() -> None:
    # LD V5, K; JP 0x202
    machine, _ = make_machine(program(0xF50A, 0x1202), rate=600)

    for _ in range(3):
        machine.scheduler.run_frame()
        assert machine.cpu.state.pc == 0x200

    machine.key_events.put(KeyEvent("e", True))
    machine.scheduler.run_frame()

    assert machine.cpu.state.pc == 0x202
    assert machine.cpu.state.v[5] == 0x6


def test_run_stops_when_token_cancelled() -> None:
    machine, _ = make_machine()
    token = machine.token

    original = machine.scheduler.run_frame

    def counting_frame() -> int:
        executed = original()
        if machine.scheduler.frame_count >= 5:
            token.cancel()
        return executed

    machine.scheduler.run_frame = counting_frame  # type: ignore[method-assign]
    machine.scheduler.run()

    assert machine.scheduler.frame_count == 5


def test_run_propagates_fatal_cpu_errors() -> None:
    machine, _ = make_machine(program(0x00EE))

    with pytest.raises(StackUnderflowError):
        machine.scheduler.run()


def test_run_in_thread_with_real_clock_stops_on_cancel() -> None:
    machine = create_machine(MachineConfig(rom_image=SPIN))
    thread = threading.Thread(target=machine.scheduler.run)
    thread.start()

    machine.token.cancel()
    thread.join(timeout=2.0)

    assert not thread.is_alive()


def test_cancellation_token() -> None:
    token = CancellationToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled


def test_rate_must_be_positive() -> None:
    with pytest.raises(ValueError):
        make_machine(rate=0)
