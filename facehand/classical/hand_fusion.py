"""
Hand candidates from motion and skin blocks.

A hand candidate needs both cues: a moving block that overlaps a skin
block. The candidate grows to the bounding box of the pair, then has to
look roughly hand-sized and hand-shaped.
"""

from typing import Any, Dict, List, Sequence, Tuple

from ..types import Region
from .suppression import calculate_overlap


def fuse_motion_and_skin(motion_regions: Sequence[Region],
                         skin_regions: Sequence[Region],
                         min_overlap: float = 0.25) -> List[Region]:
    """
    Pair every motion block with every skin block it overlaps.

    Args:
        motion_regions: Moving blocks
        skin_regions: Skin blocks
        min_overlap: IoU a pair must exceed

    Returns:
        Bounding box of each qualifying pair, motion-major order
    """
    return [
        motion.union(skin)
        for motion in motion_regions
        for skin in skin_regions
        if calculate_overlap(motion, skin) > min_overlap
    ]


def is_hand_like_shape(region: Region,
                       aspect_ratio_range: Tuple[float, float] = (0.4, 2.5),
                       area_range: Tuple[float, float] = (300, 8000)) -> bool:
    """Open-interval aspect ratio and area test."""
    if region.width <= 0 or region.height <= 0:
        return False
    aspect_ratio = region.width / region.height
    min_ratio, max_ratio = aspect_ratio_range
    min_area, max_area = area_range
    return min_ratio < aspect_ratio < max_ratio and min_area < region.area < max_area


class HandCandidateFilter:
    """
    Fuses motion and skin blocks and keeps hand-shaped results.
    """

    def __init__(self, min_overlap: float = 0.25,
                 aspect_ratio_range: Tuple[float, float] = (0.4, 2.5),
                 area_range: Tuple[float, float] = (300, 8000)):
        self.min_overlap = min_overlap
        self.aspect_ratio_range = tuple(aspect_ratio_range)
        self.area_range = tuple(area_range)

    @classmethod
    def from_config(cls, fusion_config: Dict[str, Any]) -> "HandCandidateFilter":
        return cls(min_overlap=fusion_config["min_overlap"],
                   aspect_ratio_range=fusion_config["aspect_ratio_range"],
                   area_range=fusion_config["area_range"])

    def find_hands(self, motion_regions: Sequence[Region],
                   skin_regions: Sequence[Region], scale: int = 1) -> List[Region]:
        """
        Args:
            motion_regions: Moving blocks at working resolution
            skin_regions: Skin blocks at working resolution
            scale: Factor mapping working coordinates back to frame coordinates

        Returns:
            Hand candidates in frame coordinates; no suppression or cap
        """
        fused = fuse_motion_and_skin(motion_regions, skin_regions, self.min_overlap)
        # Shape limits apply at working resolution
        return [
            region.scaled(scale)
            for region in fused
            if is_hand_like_shape(region, self.aspect_ratio_range, self.area_range)
        ]
