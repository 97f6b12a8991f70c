"""CHIP-8 delay and sound timers, driven at 60 Hz independently of the CPU."""

import jax.numpy as jnp
from chipax.state import EmulatorState


def tick_timers(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Decrement both timers once, clamped at zero.

    Args:
        state: Current emulator state

    Returns:
        Tuple of:
            - state: State with decremented timers
            - sound_stopped: True when the sound timer reached zero on this tick
    """
    delay = state.delay_timer
    sound = state.sound_timer
    new_sound = jnp.where(sound > 0, sound - 1, sound).astype(jnp.uint8)
    sound_stopped = (sound > 0) & (new_sound == 0)
    state = state.replace(
        delay_timer=jnp.where(delay > 0, delay - 1, delay).astype(jnp.uint8),
        sound_timer=new_sound,
    )
    return state, sound_stopped


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """Whether the buzzer should currently sound."""
    return state.sound_timer > 0
