"""CHIP-8 machine state structures."""

from typing import Optional

import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipcore.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_REGISTERS, STACK_SIZE,
)
from chipcore.decode import Instruction
from chipcore.errors import MemoryOverrun


@dataclass(frozen=True)
class StackState:
    """Return address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Machine state owned by the execution core.

    Timers, display and keypad are peripherals and live outside of it.
    """
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    stack: StackState = StackState()
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    last_instruction: Optional[Instruction] = field(pytree_node=False, default=None)


def create_state() -> EmulatorState:
    """Create initial machine state with font data loaded."""
    state = EmulatorState()
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def register(state: EmulatorState, index: int) -> int:
    """Read register VX as a Python int."""
    return int(state.V[index])


def set_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Write register VX, truncating to 8 bits."""
    return state.replace(V=state.V.at[index].set(value & 0xFF))


def set_index(state: EmulatorState, value: int) -> EmulatorState:
    """Write the index register, truncating to 16 bits."""
    return state.replace(I=jnp.asarray(value & 0xFFFF, dtype=jnp.uint16))


def memory_range(state: EmulatorState, count: int) -> tuple[int, int]:
    """Bounds of the ``count`` bytes starting at I.

    Raises:
        MemoryOverrun: if the range does not fit in memory.
    """
    start = int(state.I)
    if start + count > state.memory.shape[0]:
        raise MemoryOverrun(start, count)
    return start, start + count
