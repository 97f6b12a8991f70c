"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import ADDRESS_MASK, FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: EmulatorState, x, y, height) -> jnp.ndarray:
    """Screen-sized mask of the sprite at I, anchored at (x, y) and wrapped on both axes."""
    # Offsets of every screen pixel relative to the anchor, wrapped
    col_offset = (xx - x) % SCREEN_WIDTH
    row_offset = (yy - y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < height)

    sprite_bytes = state.memory[(state.I + row_offset) & ADDRESS_MASK]
    bits = (sprite_bytes >> (7 - jnp.minimum(col_offset, 7))) & 1
    return in_sprite & (bits == 1)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite_x = jnp.astype(state.V[instruction.x] % SCREEN_WIDTH, jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y] % SCREEN_HEIGHT, jnp.int32)

    sprite = sprite_mask(state, sprite_x, sprite_y, instruction.n)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
