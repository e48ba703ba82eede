"""Main CHIP-8 execution engine."""

from typing import Optional, Union

import jax.numpy as jnp

from chipcore.constants import PROGRAM_START
from chipcore.decode import Instruction, Op, decode
from chipcore.errors import InvalidAlignment, RomTooLarge
from chipcore.flow import PcUpdate, StepIO, apply_pc_update
from chipcore.instructions.system import execute_clear_screen, execute_return, execute_machine_routine
from chipcore.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipcore.instructions.alu import ALU_OPERATIONS, execute_alu_operation
from chipcore.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipcore.instructions.display import execute_display
from chipcore.instructions.misc import MISC_INSTRUCTIONS, execute_misc_instruction
from chipcore.logging import get_logger
from chipcore.peripherals import (
    DownTimer, FallingEdges, Graphics, Keys, NullGraphics, NullRandom, Random, Timer,
)
from chipcore.state import EmulatorState

logger = get_logger("core")

HANDLERS = {
    Op.SYS: execute_machine_routine,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_key,
    **{op: execute_alu_operation for op in ALU_OPERATIONS},
    **{op: execute_misc_instruction for op in MISC_INSTRUCTIONS},
}


def null_io(
    keys: Optional[Keys] = None,
    edges: Optional[FallingEdges] = None,
    graphics: Optional[Graphics] = None,
    delay_timer: Optional[Timer] = None,
    sound_timer: Optional[Timer] = None,
    random: Optional[Random] = None,
) -> StepIO:
    """Bundle peripherals, filling gaps with headless stand-ins."""
    return StepIO(
        keys=Keys(mask=0) if keys is None else keys,
        edges=FallingEdges(mask=0) if edges is None else edges,
        graphics=NullGraphics() if graphics is None else graphics,
        delay_timer=DownTimer("delay") if delay_timer is None else delay_timer,
        sound_timer=DownTimer("sound") if sound_timer is None else sound_timer,
        random=NullRandom() if random is None else random,
    )


def fetch(state: EmulatorState) -> int:
    """Fetch the big-endian opcode at PC."""
    pc = int(state.pc)
    if pc + 2 > state.memory.shape[0]:
        raise InvalidAlignment(pc)
    return (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])


def execute(state: EmulatorState, instruction: Union[int, Instruction], io: Optional[StepIO] = None) -> EmulatorState:
    """Execute a single instruction and move the program counter."""
    if not isinstance(instruction, Instruction):
        instruction = decode(instruction)
    if io is None:
        io = null_io()

    state, update = HANDLERS[instruction.op](state, instruction, io)
    return _advance(state, update).replace(last_instruction=instruction)


def _advance(state: EmulatorState, update: PcUpdate) -> EmulatorState:
    new_pc = apply_pc_update(int(state.pc), update)
    return state.replace(pc=jnp.asarray(new_pc, dtype=jnp.uint16))


def step(
    state: EmulatorState,
    keys: Keys,
    edges: FallingEdges,
    graphics: Graphics,
    delay_timer: Timer,
    sound_timer: Timer,
    random: Random,
) -> EmulatorState:
    """Fetch, decode and execute the instruction at PC.

    Decode and fetch errors are raised before any state or peripheral is
    touched.
    """
    instruction = decode(fetch(state))
    io = StepIO(
        keys=keys, edges=edges, graphics=graphics,
        delay_timer=delay_timer, sound_timer=sound_timer, random=random,
    )
    state = execute(state, instruction, io)
    if logger.is_enabled("TRACE"):
        logger.trace(format_state(state))
    return state


def format_state(state: EmulatorState) -> str:
    """One-line register dump, with the last executed instruction if any."""
    regs = " ".join(f"{int(v):02X}" for v in state.V)
    line = f"PC {int(state.pc):04X} SP {state.stack.pointer:02X} I {int(state.I):04X} regs [{regs}]"
    if state.last_instruction is not None:
        line += f" [{state.last_instruction}]"
    return line


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy raw program bytes into memory starting at 0x200."""
    capacity = state.memory.shape[0] - PROGRAM_START
    if len(data) > capacity:
        raise RomTooLarge(len(data), capacity)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    logger.info(f"Loaded {len(rom_data)} bytes from {filename}")
    return load_program(state, rom_data)
