"""Pygame front end for the CHIP-8 interpreter.

The window, event pump and blitting stay on the main thread. The cycle loop
runs on a separate emulation thread and hands finished frames over through
the frame buffer's presenter; key presses travel the other way through the
machine's key event queue.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pychip8.audio import AudioError, SquareWaveBeeper
from pychip8.bus import MemoryAccessError
from pychip8.cpu import CPUError, Quirks
from pychip8.io import KeyEvent, lookup_key
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import DEFAULT_CYCLE_RATE, Machine, MachineConfig, create_machine
from pychip8.utils import debug_enabled, debug_log, report
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, DisplayError

WINDOW_TITLE = "Chip-8"


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 window front end."""

    rom_path: Optional[Path] = None
    scale: int = 10
    cycle_rate: int = DEFAULT_CYCLE_RATE
    quirks: Quirks = field(default_factory=Quirks)
    fullscreen: bool = False
    mute: bool = False
    title: str = WINDOW_TITLE


class Chip8App:
    """Owns the pygame window and the emulation thread."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._latest_frame: bytes | None = None
        self._emulation_thread: threading.Thread | None = None
        self._emulation_error: BaseException | None = None

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")

        machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(self._config.title)
        self._pygame = pygame

        if not self._config.mute:
            self._initialise_audio(pygame)
        machine.audio_gate.attach(self._beeper)

        surface_size = (DISPLAY_WIDTH * self._config.scale, DISPLAY_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)
        clock = pygame.time.Clock()

        self._running = True
        self._start_emulation(machine)

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._request_stop()
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._request_stop()
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                if self._emulation_error is not None:
                    self._request_stop()
                    break

                self._blit_latest_frame(pygame, screen)
                clock.tick(_WINDOW_FPS)
        finally:
            self._stop_emulation(machine)
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

        if self._emulation_error is not None:
            if machine.trace is not None:
                machine.trace.dump("trace", limit=64)
            raise RuntimeError(f"Emulator halted: {self._emulation_error}") from self._emulation_error

    # ------------------------------------------------------------------
    # Setup

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            rom = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        trace_capacity = 512 if debug_enabled("trace") else None
        machine = create_machine(
            MachineConfig(
                cycle_rate=self._config.cycle_rate,
                quirks=self._config.quirks,
                rom_image=rom,
                presenter=self._accept_frame,
                trace_capacity=trace_capacity,
            )
        )
        self._machine = machine
        return machine

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                report("audio", "mixer_init_failed=%s", exc)
                return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=pygame.mixer.get_init()[0])
        except AudioError as exc:
            self._beeper = None
            report("audio", "beeper_init_failed=%s", exc)

    # ------------------------------------------------------------------
    # Emulation thread

    def _start_emulation(self, machine: Machine) -> None:
        thread = threading.Thread(
            target=self._emulation_main,
            args=(machine,),
            name="chip8-emulation",
            daemon=True,
        )
        self._emulation_thread = thread
        thread.start()

    def _emulation_main(self, machine: Machine) -> None:
        try:
            machine.scheduler.run()
        except (CPUError, MemoryAccessError) as exc:
            report("cpu", "halted: %s", exc)
            self._emulation_error = exc
        except Exception as exc:
            report("cpu", "emulation thread failed: %r", exc)
            self._emulation_error = exc

    def _request_stop(self) -> None:
        # cancel first so a frame still in flight is dropped, not reported
        if self._machine is not None:
            self._machine.token.cancel()
        self._running = False

    def _stop_emulation(self, machine: Machine) -> None:
        machine.token.cancel()
        thread = self._emulation_thread
        if thread is not None:
            thread.join(timeout=_JOIN_TIMEOUT)
            if thread.is_alive():
                report("timing", "emulation thread did not stop within %.1fs", _JOIN_TIMEOUT)
        self._emulation_thread = None

    # ------------------------------------------------------------------
    # Frame hand-off

    def _accept_frame(self, frame: bytes) -> None:
        """Presenter called from the emulation thread under the buffer lock.

        Frames arriving after the token was cancelled are dropped.
        """

        if not self._running:
            if self._machine is not None and self._machine.token.cancelled:
                return
            raise DisplayError("window is closed")
        self._latest_frame = frame

    def _blit_latest_frame(self, pygame, screen) -> None:
        frame = self._latest_frame
        if frame is None:
            return
        self._latest_frame = None
        try:
            image = pygame.image.frombuffer(frame, (DISPLAY_WIDTH, DISPLAY_HEIGHT), "RGBA")
            scaled = pygame.transform.scale(image, screen.get_size())
            screen.blit(scaled, (0, 0))
            pygame.display.flip()
        except pygame.error as exc:
            report("video", "blit failed: %s", exc)

    # ------------------------------------------------------------------
    # Input

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if lookup_key(name) is None:
            return
        machine.key_events.put(KeyEvent(name, pressed))


_WINDOW_FPS = 60
_JOIN_TIMEOUT = 1.0
