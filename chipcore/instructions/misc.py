"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chipcore.constants import FONT_START, FONT_GLYPH_SIZE
from chipcore.decode import Instruction, Op
from chipcore.flow import ADVANCE, HOLD, PcUpdate, StepIO
from chipcore.logging import get_logger
from chipcore.state import EmulatorState, memory_range, register, set_register, set_index

logger = get_logger("core")


def bcd(value: int) -> tuple[int, int, int]:
    """Split 0..255 into hundreds, tens and ones."""
    hundreds, rest = divmod(value, 100)
    tens, ones = divmod(rest, 10)
    return hundreds, tens, ones


def execute_get_delay_timer(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, io.delay_timer.get()), ADVANCE


def execute_wait_for_key(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX0A - Wait for a key release, store its index in VX."""
    pending = io.edges.mask
    key = io.edges.pop_next_idx()
    if key is None:
        return state, HOLD
    logger.debug(f"FX0A consumed key {key:X} from edges {pending:016b}")
    return set_register(state, instruction.x, key), ADVANCE


def execute_set_delay_timer(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX15 - Set delay timer to VX."""
    io.delay_timer.set(register(state, instruction.x))
    return state, ADVANCE


def execute_set_sound_timer(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX18 - Set sound timer to VX."""
    io.sound_timer.set(register(state, instruction.x))
    return state, ADVANCE


def execute_add_to_index(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX1E - Add VX to I, wrapping at 16 bits. VF is not affected."""
    return set_index(state, int(state.I) + register(state, instruction.x)), ADVANCE


def execute_font_character(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX29 - Set I to location of sprite for digit VX."""
    return set_index(state, FONT_START + register(state, instruction.x) * FONT_GLYPH_SIZE), ADVANCE


def execute_bcd_conversion(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    digits = jnp.array(bcd(register(state, instruction.x)), dtype=jnp.uint8)
    start, end = memory_range(state, 3)
    return state.replace(memory=state.memory.at[start:end].set(digits)), ADVANCE


def execute_store_registers(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX55 - Store V0 through VX in memory starting at I."""
    start, end = memory_range(state, instruction.x + 1)
    new_memory = state.memory.at[start:end].set(state.V[:instruction.x + 1])
    return state.replace(memory=new_memory), ADVANCE


def execute_load_registers(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """FX65 - Load V0 through VX from memory starting at I."""
    start, end = memory_range(state, instruction.x + 1)
    new_V = state.V.at[:instruction.x + 1].set(state.memory[start:end])
    return state.replace(V=new_V), ADVANCE


MISC_INSTRUCTIONS = {
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.STORE_REGS: execute_store_registers,
    Op.LOAD_REGS: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: Instruction, io: StepIO) -> tuple[EmulatorState, PcUpdate]:
    """Dispatch misc instructions by their low byte."""
    return MISC_INSTRUCTIONS[instruction.op](state, instruction, io)
