"""CHIP-8 driver binding the core to its peripherals and clocks."""

import time
from typing import Optional

from chipcore.constants import DEFAULT_CORE_FREQUENCY, TIMER_FREQUENCY
from chipcore.emulator import format_state, load_program, load_rom, step
from chipcore.errors import Chip8Error
from chipcore.logging import get_logger
from chipcore.peripherals import (
    DownTimer, Graphics, JaxRandom, Keypad, NullGraphics, NullKeypad, Random, Timer,
)
from chipcore.state import EmulatorState, create_state

logger = get_logger("machine")


class Chip8:
    """Steps the core at ``core_freq`` and ticks both timers at 60 Hz.

    Timers are ticked every ``core_freq // 60`` core steps, so their rate
    follows the number of steps executed rather than wall-clock time.
    """

    def __init__(
        self,
        state: Optional[EmulatorState] = None,
        core_freq: int = DEFAULT_CORE_FREQUENCY,
        keypad: Optional[Keypad] = None,
        graphics: Optional[Graphics] = None,
        delay_timer: Optional[Timer] = None,
        sound_timer: Optional[Timer] = None,
        random: Optional[Random] = None,
    ):
        if core_freq <= 0:
            raise ValueError(f"core_freq must be positive, got {core_freq}")
        self.state = create_state() if state is None else state
        self.core_freq = core_freq
        self.keypad = NullKeypad() if keypad is None else keypad
        self.graphics = NullGraphics() if graphics is None else graphics
        self.delay_timer = DownTimer("delay") if delay_timer is None else delay_timer
        self.sound_timer = DownTimer("sound") if sound_timer is None else sound_timer
        self.random = JaxRandom() if random is None else random
        self.timer_freq_div = max(1, core_freq // TIMER_FREQUENCY)
        self.timer_freq_count = 0
        self.steps = 0

    def __str__(self) -> str:
        return format_state(self.state)

    def load_program(self, data: bytes) -> None:
        self.state = load_program(self.state, data)

    def load_rom(self, filename: str) -> None:
        self.state = load_rom(self.state, filename)

    def tick(self) -> None:
        """Run one core step, then the timers when their divider elapses."""
        self.tick_core()

        self.timer_freq_count += 1
        if self.timer_freq_count >= self.timer_freq_div:
            self.timer_freq_count = 0
            self.tick_timers()

    def tick_core(self) -> None:
        keys = self.keypad.pressed_keys()
        edges = self.keypad.last_released_key()
        self.state = step(
            self.state, keys, edges, self.graphics,
            self.delay_timer, self.sound_timer, self.random,
        )
        self.steps += 1

    def tick_timers(self) -> None:
        self.delay_timer.tick()
        if self.sound_timer.tick():
            logger.debug("sound timer expired")

    def run(self, max_steps: Optional[int] = None, should_stop=None) -> None:
        """Tick at ``core_freq`` against the wall clock until stopped.

        Raises whatever error stops the core, after logging it.
        """
        cycle_duration = 1.0 / self.core_freq
        executed = 0

        while max_steps is None or executed < max_steps:
            if should_stop is not None and should_stop():
                break

            before_tick = time.perf_counter()
            try:
                self.tick()
            except Chip8Error as e:
                logger.error(f"CHIP-8 stopped: {e} ({self})")
                raise
            executed += 1

            remaining = cycle_duration - (time.perf_counter() - before_tick)
            if remaining > 0:
                time.sleep(remaining)
