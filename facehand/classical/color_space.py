"""
Colorspace conversions used by the face and skin heuristics.

All functions take arrays whose last axis holds R, G, B in [0, 255]
(a single pixel of shape (3,) works too) and are evaluated in float64
so that thresholds behave identically for every frame size.
"""

from typing import Tuple

import numpy as np


def _round_half_up(values: np.ndarray) -> np.ndarray:
    # np.round is round-half-even; luma and hue use half-up rounding
    return np.floor(values + 0.5)


def _channels(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    pixels = np.asarray(rgb, dtype=np.float64)
    return pixels[..., 0], pixels[..., 1], pixels[..., 2]


def to_grayscale(rgb: np.ndarray) -> np.ndarray:
    """
    Convert RGB pixels to luma.

    luma = round(0.299 R + 0.587 G + 0.114 B), clamped to [0, 255].

    Args:
        rgb: Array of shape (..., 3)

    Returns:
        uint8 array of shape (...)
    """
    r, g, b = _channels(rgb)
    luma = _round_half_up(0.299 * r + 0.587 * g + 0.114 * b)
    luma = np.nan_to_num(luma, nan=0.0)
    return np.clip(luma, 0, 255).astype(np.uint8)


def rgb_to_yuv(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert RGB pixels to unscaled YUV.

    Returns:
        Tuple of (Y, U, V) float arrays
    """
    r, g, b = _channels(rgb)
    y = 0.299 * r + 0.587 * g + 0.114 * b
    u = -0.169 * r - 0.331 * g + 0.5 * b
    v = 0.5 * r - 0.419 * g - 0.081 * b
    return y, u, v


def rgb_to_hsv(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert RGB pixels to HSV.

    Hue is rounded to whole degrees in [0, 360); saturation and value
    are in [0, 1].

    Returns:
        Tuple of (H, S, V) float arrays
    """
    r, g, b = _channels(rgb)
    r, g, b = r / 255.0, g / 255.0, b / 255.0

    max_c = np.maximum(np.maximum(r, g), b)
    min_c = np.minimum(np.minimum(r, g), b)
    diff = max_c - min_c
    safe_diff = np.where(diff == 0, 1.0, diff)

    # Channel priority on ties is red, then green, then blue
    hue = np.where(
        max_c == r,
        np.fmod((g - b) / safe_diff, 6),
        np.where(max_c == g, (b - r) / safe_diff + 2, (r - g) / safe_diff + 4),
    )
    hue = np.where(diff == 0, 0.0, hue)
    hue = _round_half_up(hue * 60)
    hue = np.where(hue < 0, hue + 360, hue)

    safe_max = np.where(max_c == 0, 1.0, max_c)
    saturation = np.where(max_c == 0, 0.0, diff / safe_max)

    return hue, saturation, max_c
