"""
Rectangle overlap and greedy non-max suppression.
"""

from typing import Iterable, List, Optional

from ..types import Region


def calculate_overlap(first: Region, second: Region) -> float:
    """
    Intersection-over-union of two rectangles.

    Returns:
        IoU in [0, 1]; 0 when the rectangles do not intersect
    """
    x1 = max(first.x, second.x)
    y1 = max(first.y, second.y)
    x2 = min(first.right, second.right)
    y2 = min(first.bottom, second.bottom)

    if x2 <= x1 or y2 <= y1:
        return 0.0

    intersection = (x2 - x1) * (y2 - y1)
    union = first.area + second.area - intersection
    return intersection / union


def suppress_overlaps(candidates: Iterable[Region], threshold: float = 0.4,
                      max_results: Optional[int] = 3) -> List[Region]:
    """
    Keep the largest candidates that do not overlap each other.

    Candidates are visited largest area first (ties keep their input order)
    and accepted when their IoU with every accepted candidate is at most
    ``threshold``.

    Args:
        candidates: Raw detections
        threshold: Maximum IoU allowed between two kept regions
        max_results: Stop after this many regions (None for no cap)

    Returns:
        The kept regions, largest first
    """
    accepted: List[Region] = []
    for candidate in sorted(candidates, key=lambda region: region.area, reverse=True):
        if max_results is not None and len(accepted) >= max_results:
            break
        if all(calculate_overlap(candidate, kept) <= threshold for kept in accepted):
            accepted.append(candidate)
    return accepted
