"""Tests for the Chip8 driver."""

import pytest
from chipcore import (
    Chip8, Chip8Error, DownTimer, Framebuffer, KeypadState, MemoryOverrun, NullRandom, RomTooLarge,
    InvalidInstruction, create_state, format_state, load_program, execute,
)


# LD V0, 0A / LD DT, V0 / LD V1, DT / JP 204
COUNTDOWN = bytes([0x60, 0x0A, 0xF0, 0x15, 0xF1, 0x07, 0x12, 0x04])


def test_timer_divider():
    assert Chip8(core_freq=700).timer_freq_div == 11
    assert Chip8(core_freq=60).timer_freq_div == 1
    assert Chip8(core_freq=30).timer_freq_div == 1


def test_rejects_non_positive_frequency():
    with pytest.raises(ValueError):
        Chip8(core_freq=0)


def test_timers_tick_every_divider_steps():
    delay = DownTimer("delay")
    chip8 = Chip8(core_freq=120, delay_timer=delay, random=NullRandom())
    chip8.load_program(COUNTDOWN)

    chip8.tick()  # LD V0, 0A
    chip8.tick()  # LD DT, V0, then timers tick
    assert delay.get() == 9
    assert chip8.timer_freq_count == 0

    chip8.tick()  # LD V1, DT
    assert chip8.state.V[1] == 9
    assert chip8.steps == 3


def test_key_wait_through_keypad():
    keypad = KeypadState()
    chip8 = Chip8(keypad=keypad, random=NullRandom())
    chip8.load_program(bytes([0xF2, 0x0A]))

    chip8.tick()
    assert chip8.state.pc == 0x200

    keypad.press(7)
    chip8.tick()
    assert chip8.state.pc == 0x200

    keypad.release(7)
    chip8.tick()
    assert chip8.state.pc == 0x202
    assert chip8.state.V[2] == 7


def test_draw_through_framebuffer():
    framebuffer = Framebuffer()
    chip8 = Chip8(graphics=framebuffer, random=NullRandom())
    # LD V0, 0B / LD F, V0 / DRW V1, V1, 5
    chip8.load_program(bytes([0x60, 0x0B, 0xF0, 0x29, 0xD1, 0x15]))

    for _ in range(3):
        chip8.tick()

    assert framebuffer.snapshot()[0, 0]
    assert framebuffer.take_dirty()


def test_run_max_steps():
    chip8 = Chip8(core_freq=10_000, random=NullRandom())
    chip8.load_program(COUNTDOWN)

    chip8.run(max_steps=10)

    assert chip8.steps == 10
    assert chip8.state.pc in (0x204, 0x206)


def test_run_should_stop():
    chip8 = Chip8(core_freq=10_000, random=NullRandom())
    chip8.load_program(COUNTDOWN)

    chip8.run(should_stop=lambda: chip8.steps >= 4)

    assert chip8.steps == 4


def test_run_raises_core_error():
    chip8 = Chip8(core_freq=10_000, random=NullRandom())
    chip8.load_program(bytes([0xFF, 0xFF]))

    with pytest.raises(InvalidInstruction):
        chip8.run(max_steps=5)
    assert chip8.steps == 0


def test_load_rom(tmp_path):
    rom = tmp_path / "countdown.ch8"
    rom.write_bytes(COUNTDOWN)

    chip8 = Chip8(random=NullRandom())
    chip8.load_rom(str(rom))

    assert [int(b) for b in chip8.state.memory[0x200:0x208]] == list(COUNTDOWN)


def test_rom_too_large():
    state = create_state()
    capacity = 4096 - 0x200

    load_program(state, bytes(capacity))
    with pytest.raises(RomTooLarge) as exc_info:
        load_program(state, bytes(capacity + 1))

    assert exc_info.value.size == capacity + 1
    assert exc_info.value.capacity == capacity


def test_format_state():
    state = execute(create_state(), 0x6A42)

    line = format_state(state)

    assert line.startswith("PC 0202 SP 00 I 0000 regs [")
    assert "00 00 00 00 00 00 00 00 00 00 42" in line
    assert line.endswith("[LD VA, 42]")
    assert str(Chip8(state=state)) == line


def test_run_stops_on_memory_overrun():
    chip8 = Chip8(core_freq=10_000, random=NullRandom())
    # LD I, FFE / LD B, V0
    chip8.load_program(bytes([0xAF, 0xFE, 0xF0, 0x33]))

    with pytest.raises(MemoryOverrun) as exc_info:
        chip8.run(max_steps=5)

    assert isinstance(exc_info.value, Chip8Error)
    assert chip8.steps == 1
    assert chip8.state.pc == 0x202
