"""CHIP-8 delay and sound timers."""

import jax
import jax.numpy as jnp
from octet.state import EmulatorState


def _count_down(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


@jax.jit
def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement both timers once, stopping at zero.

    Meant to be called at 60 Hz by the driver, however many instructions ran
    in between.
    """
    return state.replace(
        delay_timer=_count_down(state.delay_timer),
        sound_timer=_count_down(state.sound_timer),
    )
