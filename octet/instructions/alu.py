"""CHIP-8 ALU operations (8xxx).

Every operation is a pure ``(vx, vy) -> (result, flag)`` function. The
instruction wrappers write VX first and VF second, so when X is F the flag
is what remains in the register.

In legacy (COSMAC VIP) mode the shifts read VY instead of VX.
"""

import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import DecodedInstruction
from octet.constants import FLAG_REGISTER


def alu_set(vx: int, vy: int) -> int:
    """8XY0 - Set: VX = VY."""
    return vy


def alu_or(vx: int, vy: int) -> int:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy


def alu_and(vx: int, vy: int) -> int:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy


def alu_xor(vx: int, vy: int) -> int:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, flag is 1 when no borrow occurred."""
    borrow_flag = jnp.astype(vx >= vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - vy) & 0xFF
    return jnp.astype(result, jnp.uint8), borrow_flag


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = jnp.astype(vx & 1, jnp.uint8)
    result = vx >> 1
    return jnp.astype(result, jnp.uint8), shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, flag is 1 when no borrow occurred."""
    return alu_sub_xy(vy, vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = jnp.astype((vx & 0x80) >> 7, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) << 1) & 0xFF
    return jnp.astype(result, jnp.uint8), shifted_bit


def make_logic_instruction(operation):
    """Factory for bitwise instructions, which leave VF alone."""
    def logic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result = operation(state.V[instruction.x], state.V[instruction.y])
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8)))
    return logic_instruction


def make_flag_instruction(operation, is_shift: bool = False):
    """Factory for instructions that report a flag in VF."""
    def flag_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        if is_shift and not state.modern_mode:
            vx = vy
        result, flag = operation(vx, vy)
        new_V = state.V.at[instruction.x].set(result)
        new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    return flag_instruction


execute_alu_set = make_logic_instruction(alu_set)
execute_alu_or = make_logic_instruction(alu_or)
execute_alu_and = make_logic_instruction(alu_and)
execute_alu_xor = make_logic_instruction(alu_xor)
execute_alu_add = make_flag_instruction(alu_add)
execute_alu_sub_xy = make_flag_instruction(alu_sub_xy)
execute_alu_shift_right = make_flag_instruction(alu_shift_right, is_shift=True)
execute_alu_sub_yx = make_flag_instruction(alu_sub_yx)
execute_alu_shift_left = make_flag_instruction(alu_shift_left, is_shift=True)
