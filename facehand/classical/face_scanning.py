"""
Multi-scale sliding-window face search.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..types import Region
from ..utils import get_logger
from .face_scoring import FaceRegionScorer, integral_image

logger = get_logger(__name__)


class MultiScaleScanner:
    """
    Slides a FaceRegionScorer over every position and window size.
    """

    def __init__(self, scorer: Optional[FaceRegionScorer] = None, min_size: int = 60,
                 size_step: int = 25, position_step: int = 12,
                 max_size_divisor: float = 1.5):
        """
        Args:
            scorer: Window scorer (default thresholds when omitted)
            min_size: Smallest window side in pixels
            size_step: Increment between window sizes
            position_step: Stride of the window in both axes
            max_size_divisor: Largest window is min(width, height) / divisor
        """
        self.scorer = scorer or FaceRegionScorer()
        self.min_size = min_size
        self.size_step = size_step
        self.position_step = position_step
        self.max_size_divisor = max_size_divisor

    @classmethod
    def from_config(cls, face_config: Dict[str, Any]) -> "MultiScaleScanner":
        return cls(
            scorer=FaceRegionScorer.from_config(face_config),
            min_size=face_config["min_size"],
            size_step=face_config["size_step"],
            position_step=face_config["position_step"],
            max_size_divisor=face_config["max_size_divisor"],
        )

    def windows(self, width: int, height: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (x, y, size) for every window, smallest size first, row-major."""
        max_size = min(width, height) / self.max_size_divisor
        size = self.min_size
        while size <= max_size:
            for y in range(0, height - size + 1, self.position_step):
                for x in range(0, width - size + 1, self.position_step):
                    yield x, y, size
            size += self.size_step

    def scan(self, gray: np.ndarray, scale: int = 1) -> List[Region]:
        """
        Find every window that passes the face test.

        Args:
            gray: Grayscale image at working resolution
            scale: Factor mapping working coordinates back to frame coordinates

        Returns:
            Raw candidates in scan order, in frame coordinates
        """
        height, width = gray.shape[:2]
        integral = integral_image(gray)

        candidates = [
            Region(x, y, size, size).scaled(scale)
            for x, y, size in self.windows(width, height)
            if self.scorer.score_window(integral, x, y, size)
        ]
        logger.debug(f"Face scan over {width}x{height}: {len(candidates)} raw candidates")
        return candidates
