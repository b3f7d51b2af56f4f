"""CHIP-8 stack operations."""

import jax.numpy as jnp
from octet.constants import ADDRESS_MASK, STACK_SIZE
from octet.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack.

    Returns the new stack and an overflow flag. On overflow the stack is
    returned unchanged.
    """
    overflow = stack.pointer >= STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = jnp.where(overflow, stack.data, stack.data.at[slot].set(masked_address))
    new_pointer = jnp.where(overflow, stack.pointer, stack.pointer + 1)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack.

    Returns the new stack, the popped address and an underflow flag. On
    underflow the stack is returned unchanged and the address is 0.
    """
    underflow = stack.pointer == 0
    slot = jnp.maximum(jnp.astype(stack.pointer, jnp.int32) - 1, 0)
    popped_address = jnp.where(underflow, jnp.zeros((), dtype=jnp.uint16), stack.data[slot])
    new_data = jnp.where(underflow, stack.data, stack.data.at[slot].set(0))
    new_pointer = jnp.where(underflow, stack.pointer, stack.pointer - 1)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), popped_address, underflow
