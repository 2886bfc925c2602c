"""
Block-based frame differencing.

The frame is tiled into non-overlapping square blocks; a block moves when
the mean absolute change of its channel-average brightness between two
consecutive frames exceeds a threshold. Partial blocks at the right and
bottom edges are never reported.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from ..types import Region
from ..utils import get_logger

logger = get_logger(__name__)


def block_means(values: np.ndarray, block_size: int) -> np.ndarray:
    """
    Average a 2D array over non-overlapping square blocks.

    Returns:
        Array of shape (H // block_size, W // block_size)
    """
    rows = values.shape[0] // block_size
    cols = values.shape[1] // block_size
    cropped = values[:rows * block_size, :cols * block_size]
    return cropped.reshape(rows, block_size, cols, block_size).mean(axis=(1, 3))


def blocks_to_regions(mask: np.ndarray, block_size: int) -> List[Region]:
    """Convert a boolean block grid into regions, row by row."""
    return [
        Region(int(col) * block_size, int(row) * block_size, block_size, block_size)
        for row, col in np.argwhere(mask)
    ]


class MotionDetector:
    """
    Detects moving blocks between the previous and the current frame.
    """

    def __init__(self, block_size: int = 16, threshold: float = 25):
        """
        Args:
            block_size: Side of the square blocks in pixels
            threshold: Minimum mean brightness change for a moving block
        """
        self.block_size = block_size
        self.threshold = threshold

    @classmethod
    def from_config(cls, motion_config: Dict[str, Any]) -> "MotionDetector":
        return cls(block_size=motion_config["block_size"],
                   threshold=motion_config["threshold"])

    @staticmethod
    def _brightness(image: np.ndarray) -> np.ndarray:
        return image[..., :3].astype(np.float64).sum(axis=2) / 3.0

    def detect(self, current: np.ndarray,
               previous: Optional[np.ndarray]) -> List[Region]:
        """
        Find moving blocks.

        Args:
            current: Current RGB(A) image at working resolution
            previous: Previous RGB(A) image, or None on the first frame

        Returns:
            Moving blocks in working coordinates, row-major order
        """
        if previous is None:
            return []
        if previous.shape[:2] != current.shape[:2]:
            logger.debug(
                f"Previous frame {previous.shape[:2]} does not match "
                f"{current.shape[:2]}; skipping motion"
            )
            return []

        delta = np.abs(self._brightness(current) - self._brightness(previous))
        moving = block_means(delta, self.block_size) > self.threshold
        return blocks_to_regions(moving, self.block_size)
