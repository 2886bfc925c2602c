"""
Haar-like face scoring for a single square window.

A window looks like a face when two eye bands are dark, roughly equal,
and clearly darker than the forehead band above them. Band means are read
from an integral image, so scoring a window costs the same at every size.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import cv2
import numpy as np

# (vertical offset, height, horizontal offset, width) as fractions of the window size
LEFT_EYE_BAND = (0.25, 0.25, 0.2, 0.2)
RIGHT_EYE_BAND = (0.25, 0.25, 0.65, 0.2)
FOREHEAD_BAND = (0.05, 0.25, 0.2, 0.6)
MOUTH_BAND = (0.65, 0.2, 0.3, 0.4)


def integral_image(gray: np.ndarray) -> np.ndarray:
    """
    Summed-area table of a grayscale image.

    Returns:
        float64 array of shape (H + 1, W + 1)
    """
    return cv2.integral(np.ascontiguousarray(gray, dtype=np.uint8), sdepth=cv2.CV_64F)


def band_mean(integral: np.ndarray, x: int, y: int,
              width: int, height: int) -> Optional[float]:
    """
    Mean intensity of a rectangle, ignoring the part outside the image.

    Returns:
        The mean, or None when no pixel of the band is inside the image
    """
    rows, cols = integral.shape[0] - 1, integral.shape[1] - 1
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + width, cols), min(y + height, rows)
    if x1 <= x0 or y1 <= y0:
        return None
    total = (integral[y1, x1] - integral[y0, x1]
             - integral[y1, x0] + integral[y0, x0])
    return float(total) / ((x1 - x0) * (y1 - y0))


def _band(integral: np.ndarray, x: int, y: int, size: int, band) -> Optional[float]:
    top, height, left, width = band
    return band_mean(
        integral,
        math.floor(x + size * left),
        math.floor(y + size * top),
        math.floor(size * width),
        math.floor(size * height),
    )


@dataclass(frozen=True)
class FaceFeatures:
    """Band means measured for one window."""

    left_eye: float
    right_eye: float
    forehead: Optional[float]
    mouth: Optional[float]


class FaceRegionScorer:
    """
    Binary face-likeness test over regional brightness statistics.
    """

    def __init__(self, eye_max_mean: float = 110, forehead_margin: float = 15,
                 symmetry_tolerance: float = 25, min_contrast: float = 20):
        """
        Args:
            eye_max_mean: Both eye bands must be darker than this
            forehead_margin: Forehead must exceed each eye band by more than this
            symmetry_tolerance: Maximum allowed difference between the eye bands
            min_contrast: Forehead must exceed the darker eye band by more than this
        """
        self.eye_max_mean = eye_max_mean
        self.forehead_margin = forehead_margin
        self.symmetry_tolerance = symmetry_tolerance
        self.min_contrast = min_contrast

    @classmethod
    def from_config(cls, face_config: Dict[str, Any]) -> "FaceRegionScorer":
        return cls(
            eye_max_mean=face_config["eye_max_mean"],
            forehead_margin=face_config["forehead_margin"],
            symmetry_tolerance=face_config["symmetry_tolerance"],
            min_contrast=face_config["min_contrast"],
        )

    def measure(self, integral: np.ndarray, x: int, y: int,
                size: int) -> Optional[FaceFeatures]:
        """
        Measure the band means of the window at (x, y).

        Returns:
            FaceFeatures, or None when an eye band has no samples
        """
        left_eye = _band(integral, x, y, size, LEFT_EYE_BAND)
        right_eye = _band(integral, x, y, size, RIGHT_EYE_BAND)
        if left_eye is None or right_eye is None:
            return None
        return FaceFeatures(
            left_eye=left_eye,
            right_eye=right_eye,
            forehead=_band(integral, x, y, size, FOREHEAD_BAND),
            mouth=_band(integral, x, y, size, MOUTH_BAND),
        )

    def passes(self, features: Optional[FaceFeatures]) -> bool:
        """Apply the dark-eyes / bright-forehead rules to measured features."""
        if features is None or features.forehead is None:
            return False

        left, right, forehead = features.left_eye, features.right_eye, features.forehead
        eyes_are_dark = left < self.eye_max_mean and right < self.eye_max_mean
        forehead_is_bright = (forehead > left + self.forehead_margin
                              and forehead > right + self.forehead_margin)
        symmetric = abs(left - right) < self.symmetry_tolerance
        contrasted = forehead - min(left, right) > self.min_contrast

        return eyes_are_dark and forehead_is_bright and symmetric and contrasted

    def score_window(self, integral: np.ndarray, x: int, y: int, size: int) -> bool:
        return self.passes(self.measure(integral, x, y, size))

    def is_face_region(self, gray: np.ndarray, x: int, y: int, size: int) -> bool:
        """
        Score one window directly from a grayscale image.

        Scanning code should build the integral image once and call
        ``score_window`` instead.
        """
        return self.score_window(integral_image(gray), x, y, size)
