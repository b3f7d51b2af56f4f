"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import Op, decode
from octet.constants import PROGRAM_START, MAX_PROGRAM_SIZE, ADDRESS_MASK, STACK_OK
from octet.errors import RomTooLarge
from octet.keypad import resolve_key_wait
from octet.instructions.system import no_op, execute_clear_screen, execute_return, execute_unknown
from octet.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from octet.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from octet.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octet.instructions.display import execute_display
from octet.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.NOP: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_KEY: execute_wait_for_key,
    Op.LD_DT: execute_set_delay_timer,
    Op.LD_ST: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE: execute_store_registers,
    Op.LOAD: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
}

assert set(HANDLERS) == set(Op), "every instruction variant needs a handler"

_BRANCHES = [HANDLERS[op] for op in sorted(Op)]


@jax.jit
def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is expected to already point past the instruction, as ``fetch`` leaves
    it.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.kind, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    address = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(state.memory[address & ADDRESS_MASK], state.memory[(address + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def _run_instruction(state: EmulatorState) -> EmulatorState:
    fetched, instruction = fetch(state)
    executed = execute(fetched, instruction)
    # A stack fault leaves the machine exactly as it was before the fetch
    return jax.lax.cond(
        executed.stack_fault != STACK_OK,
        lambda: state.replace(stack_fault=executed.stack_fault),
        lambda: executed,
    )


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Run one decode-execute cycle, or poll the pending key wait."""
    state = state.replace(
        unknown_opcode=jnp.zeros((), dtype=jnp.bool_),
        stack_fault=jnp.zeros((), dtype=jnp.uint8),
    )
    return jax.lax.cond(state.waiting_for_key, resolve_key_wait, _run_instruction, state)


def current_opcode(state: EmulatorState) -> int:
    """Instruction word at PC, read on the host."""
    pc = int(state.pc)
    return (int(state.memory[pc & ADDRESS_MASK]) << 8) | int(state.memory[(pc + 1) & ADDRESS_MASK])


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a program image into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomTooLarge(len(data), MAX_PROGRAM_SIZE)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
