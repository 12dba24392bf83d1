"""Tests for the sound-timer tone gate."""

from __future__ import annotations

import pytest

from pychip8.audio import AudioError, AudioGate


class RecordingSink:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[str] = []
        self.fail = fail

    def play(self) -> None:
        if self.fail:
            raise AudioError("device gone")
        self.calls.append("play")

    def pause(self) -> None:
        self.calls.append("pause")


def test_gate_toggles_only_on_transitions() -> None:
    sink = RecordingSink()
    gate = AudioGate(sink)

    for timer in (0, 3, 2, 1, 0, 0, 5):
        gate.update(timer)

    assert sink.calls == ["play", "pause", "play"]
    assert gate.playing


def test_gate_without_sink_tracks_state() -> None:
    gate = AudioGate()
    gate.update(4)
    assert gate.playing
    gate.update(0)
    assert not gate.playing


def test_failed_play_is_retried_next_update() -> None:
    sink = RecordingSink(fail=True)
    gate = AudioGate(sink)

    with pytest.raises(AudioError):
        gate.update(2)
    assert not gate.playing

    sink.fail = False
    gate.update(1)
    assert sink.calls == ["play"]


def test_attach_replaces_sink() -> None:
    gate = AudioGate()
    gate.update(1)
    sink = RecordingSink()

    gate.attach(sink)
    gate.update(1)

    assert sink.calls == ["play"]
