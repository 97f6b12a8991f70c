"""Display-consumer helpers: turn the 64x32 display buffer into images."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chipax.state import EmulatorState

COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "vip": ((238, 238, 238), (34, 34, 34)),
}


def create_color_scheme(scheme: str = "classic") -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined (on_color, off_color) pair by name."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )
    return COLOR_SCHEMES[scheme]


def display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert the boolean display to an RGB array with nearest-neighbour upscaling.

    Args:
        display: Boolean array of shape (64, 32), indexed [x, y]
        scale: Upscaling factor
        on_color: RGB color for lit pixels
        off_color: RGB color for dark pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3)
    """
    pixels = np.asarray(display, dtype=np.bool_)
    if pixels.shape != (SCREEN_WIDTH, SCREEN_HEIGHT):
        raise ValueError(f"Expected display shape ({SCREEN_WIDTH}, {SCREEN_HEIGHT}), got {pixels.shape}")

    # (x, y) buffer -> (row, column) image
    pixels = pixels.T
    rgb_frame = np.where(pixels[..., None], np.array(on_color, np.uint8), np.array(off_color, np.uint8))

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame.astype(np.uint8)


def batch_render(displays: jnp.ndarray, scale: int = 4, color_scheme: str = "classic", padding: int = 5) -> np.ndarray:
    """Render a batch of (N, 64, 32) displays side by side in a near-square grid."""
    displays = np.asarray(displays)
    batch_size = displays.shape[0]
    on_color, off_color = create_color_scheme(color_scheme)

    grid_cols = int(np.ceil(np.sqrt(batch_size)))
    grid_rows = int(np.ceil(batch_size / grid_cols))

    tile_height, tile_width = SCREEN_HEIGHT * scale, SCREEN_WIDTH * scale
    grid = np.zeros(
        (grid_rows * tile_height + (grid_rows - 1) * padding,
         grid_cols * tile_width + (grid_cols - 1) * padding, 3),
        dtype=np.uint8,
    )

    for i in range(batch_size):
        row, col = divmod(i, grid_cols)
        y0 = row * (tile_height + padding)
        x0 = col * (tile_width + padding)
        grid[y0:y0 + tile_height, x0:x0 + tile_width] = display_to_rgb(displays[i], scale, on_color, off_color)

    return grid


def save_frame(state: EmulatorState, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Write the current display to an image file (format from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(display_to_rgb(state.display, scale, on_color, off_color)).save(filename)
