"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from octet.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, STACK_OK, NO_KEY
)


class StackState(PyTreeNode):
    """Bounded return-address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Every component of the machine lives in this single immutable value, so a
    step or timer tick replaces the whole machine at once and observers never
    see a half-executed instruction.

    Attributes:
        rng: PRNG key consumed by the random instruction (CXNN)
        memory: 4 KiB of byte-addressable memory
        pc: Program counter
        display: Boolean frame buffer indexed as ``display[x, y]``
        stack: Return-address stack
        delay_timer: 60 Hz countdown readable by programs
        sound_timer: 60 Hz countdown, tone plays while non-zero
        keypad: Pressed state of the 16 keys
        V: General purpose registers V0..VF
        I: Index register
        waiting_for_key: Key-wait latch set by FX0A
        key_register: Target register of a pending key wait
        key_event: First key pressed while latched, or -1
        unknown_opcode: Last step decoded an unsupported word
        stack_fault: Stack fault code of the last step
        modern_mode: Static quirk switch, see ``octet.instructions.alu``
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    waiting_for_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    key_event: jnp.ndarray = field(default_factory=lambda: jnp.astype(NO_KEY, jnp.int8))
    unknown_opcode: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack_fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(STACK_OK, jnp.uint8))
    modern_mode: bool = field(pytree_node=False, default=True)


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), modern_mode: bool = True) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, modern_mode=modern_mode)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))
