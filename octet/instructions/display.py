"""CHIP-8 display operations."""

import jax.numpy as jnp
from octet.state import EmulatorState
from octet.decode import DecodedInstruction
from octet.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(memory: jnp.ndarray, address: jnp.ndarray, x: jnp.ndarray, y: jnp.ndarray,
                height: jnp.ndarray) -> jnp.ndarray:
    """Project an 8xN sprite onto a screen-shaped boolean mask.

    Sprite rows are read from ``memory`` starting at ``address``. Both axes
    wrap, so a sprite at x=60 continues in columns 0-3.
    """
    col_offset = (xx - jnp.astype(x, jnp.int32)) % SCREEN_WIDTH
    row_offset = (yy - jnp.astype(y, jnp.int32)) % SCREEN_HEIGHT
    covered = (col_offset < 8) & (row_offset < height)

    row_address = (jnp.astype(address, jnp.int32) + row_offset) & ADDRESS_MASK
    sprite_bytes = jnp.astype(memory[row_address], jnp.int32)
    bit_position = 7 - jnp.minimum(col_offset, 7)
    return (((sprite_bytes >> bit_position) & 1) == 1) & covered


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite = sprite_mask(
        state.memory,
        state.I,
        state.V[instruction.x] % SCREEN_WIDTH,
        state.V[instruction.y] % SCREEN_HEIGHT,
        instruction.n,
    )
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
