"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipax import create_state, load_bytes, MODERN, COSMAC_VIP, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with the modern quirk profile."""
    return create_state(quirks=MODERN)


@pytest.fixture
def legacy_state():
    """Provide a fresh state with the COSMAC VIP quirk profile."""
    return create_state(quirks=COSMAC_VIP)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def load_program(state, words):
    """Helper to write 16-bit instruction words at the program start."""
    data = b"".join(word.to_bytes(2, "big") for word in words)
    return load_bytes(state, PROGRAM_START, data)
