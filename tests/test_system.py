"""Tests for system instructions (0xxx) and the fetch/decode/execute step."""

import jax.numpy as jnp
import pytest
from chipcore import (
    execute, step, fetch, load_program, null_io, decode,
    DownTimer, FallingEdges, Keys, NullRandom,
    InvalidAlignment, InvalidInstruction, UnsupportedInstruction,
)
from conftest import RecordingGraphics


def run_step(state, graphics=None):
    return step(
        state, Keys(mask=0), FallingEdges(mask=0), graphics or RecordingGraphics(),
        DownTimer("delay"), DownTimer("sound"), NullRandom(),
    )


def test_execute_clear_screen(fresh_state, io, graphics):
    """Test 00E0 - Clear display."""
    state = execute(fresh_state, 0x00E0, io)

    assert jnp.sum(graphics.snapshot()) == 0
    assert graphics.clears == 1
    assert state.pc == 0x202


def test_machine_routine_unsupported(fresh_state):
    """0NNN is refused instead of silently skipped."""
    with pytest.raises(UnsupportedInstruction) as exc_info:
        execute(fresh_state, 0x0234)

    assert exc_info.value.instruction == decode(0x0234)


def test_step_fetches_big_endian(fresh_state):
    state = load_program(fresh_state, bytes([0x6A, 0x42]))

    assert fetch(state) == 0x6A42

    state = run_step(state)
    assert state.V[0xA] == 0x42
    assert state.pc == 0x202
    assert state.last_instruction == decode(0x6A42)


def test_step_runs_sequence(fresh_state):
    program = bytes([
        0x60, 0x05,  # LD V0, 05
        0x70, 0x03,  # ADD V0, 03
        0x12, 0x00,  # JP 200
    ])
    state = load_program(fresh_state, program)

    for _ in range(3):
        state = run_step(state)

    assert state.V[0] == 8
    assert state.pc == 0x200


def test_fetch_past_memory_end(fresh_state):
    """PC at the last byte cannot fetch a full opcode."""
    state = fresh_state.replace(pc=jnp.asarray(0xFFF, dtype=jnp.uint16))

    with pytest.raises(InvalidAlignment):
        fetch(state)
    with pytest.raises(InvalidAlignment):
        run_step(state)


def test_fetch_last_word(fresh_state):
    state = fresh_state.replace(
        pc=jnp.asarray(0xFFE, dtype=jnp.uint16),
        memory=fresh_state.memory.at[0xFFE].set(0x00).at[0xFFF].set(0xE0),
    )

    assert fetch(state) == 0x00E0


def test_invalid_instruction_leaves_state_untouched(fresh_state):
    """Decode errors are raised before anything is executed."""
    state = load_program(fresh_state, bytes([0x8A, 0xB8]))
    graphics = RecordingGraphics()

    with pytest.raises(InvalidInstruction) as exc_info:
        run_step(state, graphics)

    assert exc_info.value.opcode == 0x8AB8
    assert state.pc == 0x200
    assert graphics.clears == 0
    assert graphics.refreshes == 0


@pytest.mark.parametrize("opcode", [0x0000, 0x00E1, 0x5121, 0x912F, 0xE0FF, 0xF0FF])
def test_invalid_opcodes_raise(fresh_state, opcode):
    with pytest.raises(InvalidInstruction):
        execute(fresh_state, opcode, null_io())
