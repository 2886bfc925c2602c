"""
Skin detection module using classical colour rules.

Each pixel is tested against three independent rules in YUV, HSV and
RGB; a pixel is skin when any rule accepts it. Frames are then
classified in fixed-size blocks so the hand path works on a handful of
tiles instead of individual pixels.
"""

from typing import Any, Dict, List

import numpy as np

from ..types import Region
from ..utils import get_logger
from .color_space import rgb_to_hsv, rgb_to_yuv
from .motion_detection import block_means, blocks_to_regions

logger = get_logger(__name__)


class SkinSegmenter:
    """
    Pixel skin classifier and block-level skin segmentation.
    """

    def __init__(self, method: str = 'combined', block_size: int = 12,
                 min_skin_ratio: float = 0.65):
        """
        Initialize the skin segmenter.

        Args:
            method: Pixel rule ('yuv', 'hsv', 'rgb', 'combined')
            block_size: Side of the square blocks in pixels
            min_skin_ratio: Fraction of skin pixels a block must exceed
        """
        self.method = method
        self.block_size = block_size
        self.min_skin_ratio = min_skin_ratio

        self.yuv_u_range = (-20, 30)
        self.yuv_v_range = (-15, 25)
        self.hsv_hue_range = (0, 60)
        self.hsv_saturation_range = (0.2, 0.8)
        self.rgb_min = (85, 35, 15)
        self.rgb_min_spread = 12
        self.rgb_min_red_green_gap = 12

    @classmethod
    def from_config(cls, skin_config: Dict[str, Any]) -> "SkinSegmenter":
        segmenter = cls(block_size=skin_config["block_size"],
                        min_skin_ratio=skin_config["min_skin_ratio"])
        segmenter.yuv_u_range = tuple(skin_config["yuv_u_range"])
        segmenter.yuv_v_range = tuple(skin_config["yuv_v_range"])
        segmenter.hsv_hue_range = tuple(skin_config["hsv_hue_range"])
        segmenter.hsv_saturation_range = tuple(skin_config["hsv_saturation_range"])
        segmenter.rgb_min = tuple(skin_config["rgb_min"])
        segmenter.rgb_min_spread = skin_config["rgb_min_spread"]
        segmenter.rgb_min_red_green_gap = skin_config["rgb_min_red_green_gap"]
        return segmenter

    def detect_skin_yuv(self, rgb: np.ndarray) -> np.ndarray:
        """
        Chrominance rule: U and V both inside their skin ranges.

        Args:
            rgb: Array of shape (..., 3)

        Returns:
            Boolean mask of shape (...)
        """
        _, u, v = rgb_to_yuv(rgb)
        u_low, u_high = self.yuv_u_range
        v_low, v_high = self.yuv_v_range
        return (u >= u_low) & (u <= u_high) & (v >= v_low) & (v <= v_high)

    def detect_skin_hsv(self, rgb: np.ndarray) -> np.ndarray:
        """
        Hue/saturation rule: warm hue with moderate saturation.
        """
        hue, saturation, _ = rgb_to_hsv(rgb)
        h_low, h_high = self.hsv_hue_range
        s_low, s_high = self.hsv_saturation_range
        return ((hue >= h_low) & (hue <= h_high)
                & (saturation >= s_low) & (saturation <= s_high))

    def detect_skin_rgb(self, rgb: np.ndarray) -> np.ndarray:
        """
        RGB rule: bright enough, red-dominant, and not grey.
        """
        pixels = np.asarray(rgb, dtype=np.int32)
        r, g, b = pixels[..., 0], pixels[..., 1], pixels[..., 2]
        r_min, g_min, b_min = self.rgb_min
        spread = pixels[..., :3].max(axis=-1) - pixels[..., :3].min(axis=-1)

        return ((r > r_min) & (g > g_min) & (b > b_min)
                & (spread > self.rgb_min_spread)
                & (np.abs(r - g) > self.rgb_min_red_green_gap)
                & (r > g) & (r > b))

    def detect_skin(self, rgb: np.ndarray) -> np.ndarray:
        """
        Main per-pixel classifier that routes to the configured rule.

        Args:
            rgb: Array of shape (..., 3)

        Returns:
            Boolean mask, True where the pixel is skin
        """
        if self.method == 'combined':
            return (self.detect_skin_yuv(rgb)
                    | self.detect_skin_hsv(rgb)
                    | self.detect_skin_rgb(rgb))
        elif self.method == 'yuv':
            return self.detect_skin_yuv(rgb)
        elif self.method == 'hsv':
            return self.detect_skin_hsv(rgb)
        elif self.method == 'rgb':
            return self.detect_skin_rgb(rgb)
        else:
            logger.warning(f"Unknown method {self.method}, using combined rules")
            self.method = 'combined'
            return self.detect_skin(rgb)

    def is_skin_color(self, r: int, g: int, b: int) -> bool:
        return bool(self.detect_skin(np.array([r, g, b])))

    def detect(self, rgb: np.ndarray) -> List[Region]:
        """
        Classify the image block by block.

        Args:
            rgb: RGB(A) image at working resolution

        Returns:
            Skin blocks in working coordinates, row-major order
        """
        mask = self.detect_skin(rgb[..., :3]).astype(np.float64)
        is_skin = block_means(mask, self.block_size) > self.min_skin_ratio
        return blocks_to_regions(is_skin, self.block_size)


def is_skin_color(r: int, g: int, b: int) -> bool:
    """Classify one pixel with the default combined rules."""
    return SkinSegmenter().is_skin_color(r, g, b)
