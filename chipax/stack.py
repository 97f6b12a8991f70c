"""CHIP-8 stack operations.

Both operations report whether they succeeded instead of touching memory
outside the 16 slots; callers turn a failure into a machine fault.
"""

import jax.numpy as jnp
from chipax.constants import ADDRESS_MASK, STACK_SIZE
from chipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack. Returns the new stack and an ok flag."""
    ok = stack.pointer < STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = jnp.where(ok, stack.data.at[slot].set(masked_address), stack.data)
    new_pointer = jnp.where(ok, stack.pointer + 1, stack.pointer)
    return stack.replace(data=new_data, pointer=new_pointer), ok


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack. Returns the new stack, the address and an ok flag."""
    ok = stack.pointer > 0
    new_pointer = jnp.where(ok, stack.pointer - 1, stack.pointer)
    popped_address = stack.data[jnp.maximum(new_pointer, 0)]
    new_data = jnp.where(ok, stack.data.at[new_pointer].set(0), stack.data)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, ok
