"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handler."""

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import DecodedInstruction
from octet.constants import STACK_UNDERFLOW
from octet.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0000 - No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    return jax.lax.cond(
        underflow,
        lambda s: s.replace(stack_fault=jnp.astype(STACK_UNDERFLOW, jnp.uint8)),
        lambda s: s.replace(stack=stack, pc=address),
        state
    )


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unsupported word: flag it and carry on."""
    return state.replace(unknown_opcode=jnp.ones((), dtype=jnp.bool_))
