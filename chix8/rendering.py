"""Framebuffer export: RGB arrays for hosts, text for terminals and logs."""

from typing import NamedTuple, Tuple

import jax.numpy as jnp
import numpy as np

RGB = Tuple[int, int, int]


class ColorScheme(NamedTuple):
    on: RGB
    off: RGB


COLOR_SCHEMES = {
    "classic": ColorScheme(on=(0, 255, 0), off=(0, 0, 0)),
    "amber": ColorScheme(on=(255, 176, 0), off=(0, 0, 0)),
    "white": ColorScheme(on=(255, 255, 255), off=(0, 0, 0)),
    "blue": ColorScheme(on=(0, 255, 255), off=(0, 0, 64)),
    "retro": ColorScheme(on=(255, 255, 0), off=(64, 0, 64)),
}


def create_color_scheme(scheme: str = "classic") -> ColorScheme:
    """Look up a named ``(on, off)`` color pair.

    Args:
        scheme: One of "classic", "amber", "white", "blue", "retro"

    Raises:
        ValueError: If the scheme is unknown
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        )
    return COLOR_SCHEMES[scheme]


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: RGB = COLOR_SCHEMES["classic"].on,
    off_color: RGB = COLOR_SCHEMES["classic"].off,
) -> np.ndarray:
    """Convert the boolean framebuffer to an upscaled RGB image.

    Args:
        display: Boolean array of shape (32, 64), indexed [y, x]
        scale: Integer nearest-neighbour upscaling factor
        on_color: RGB color for lit pixels
        off_color: RGB color for dark pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3)
    """
    if scale < 1:
        raise ValueError(f"scale must be a positive integer, got {scale}")

    palette = np.array([off_color, on_color], dtype=np.uint8)
    rgb_frame = palette[np.asarray(display, dtype=np.uint8)]
    if scale > 1:
        rgb_frame = rgb_frame.repeat(scale, axis=0).repeat(scale, axis=1)
    return rgb_frame


def display_to_text(display: jnp.ndarray, on: str = "█", off: str = " ") -> str:
    """Render the framebuffer as text, one line per row."""
    pixels = np.asarray(display, dtype=np.bool_)
    return "\n".join("".join(on if pixel else off for pixel in row) for row in pixels)
