"""Input-producer helpers for the 16-key hexadecimal keypad."""

import jax.numpy as jnp
from chipax.constants import NUM_KEYS
from chipax.state import EmulatorState


def _check_key(key: int):
    if isinstance(key, int) and not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key must be in [0, {NUM_KEYS}), got {key}")


def set_key(state: EmulatorState, key: int, pressed: bool = True) -> EmulatorState:
    """Press or release a single key."""
    _check_key(key)
    return state.replace(keypad=state.keypad.at[key].set(pressed))


def set_keypad(state: EmulatorState, mask) -> EmulatorState:
    """Replace the whole key mask with a 16-entry boolean sequence."""
    keypad = jnp.asarray(mask, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected a keypad mask of shape ({NUM_KEYS},), got {keypad.shape}")
    return state.replace(keypad=keypad)


def release_all(state: EmulatorState) -> EmulatorState:
    """Release every key."""
    return state.replace(keypad=jnp.zeros_like(state.keypad))
