"""CHIP-8 keypad state and key-wait resolution."""

import jax
import jax.lax
import jax.numpy as jnp
from octet.state import EmulatorState
from octet.constants import NO_KEY


@jax.jit
def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Set the pressed state of one key.

    While a key wait is pending, the first key that goes from released to
    pressed is remembered so the next step can complete the wait. Keys that
    were already held when the wait began do not count.
    """
    pressed = jnp.asarray(pressed, dtype=jnp.bool_)
    was_pressed = state.keypad[index]
    record = state.waiting_for_key & (state.key_event == NO_KEY) & pressed & ~was_pressed
    return state.replace(
        keypad=state.keypad.at[index].set(pressed),
        key_event=jnp.where(record, jnp.astype(index, jnp.int8), state.key_event),
    )


def resolve_key_wait(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A if a key event arrived, otherwise stay put."""
    def resume(state):
        key = jnp.astype(state.key_event, jnp.uint8)
        return state.replace(
            V=state.V.at[state.key_register].set(key),
            pc=state.pc + 2,
            waiting_for_key=jnp.zeros((), dtype=jnp.bool_),
            key_event=jnp.astype(NO_KEY, jnp.int8),
        )

    return jax.lax.cond(state.key_event != NO_KEY, resume, lambda s: s, state)
