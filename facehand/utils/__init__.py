"""
Utility functions for the face/hand detection project
"""

import time
from typing import Callable, List, Optional

import cv2
import numpy as np

from .exceptions import (
    DetectionBaseError,
    FrameError,
    FrameNotReadyError,
    MalformedFrameError,
    CapabilityUnavailableError,
    ConfigurationError,
    LifecycleError,
)
from .logging_utils import LoggerFactory, get_logger, log_execution_time


def to_rgb(image: np.ndarray) -> np.ndarray:
    """
    Drop the alpha channel of an RGBA image.

    Args:
        image: (H, W, 3) or (H, W, 4) uint8 array

    Returns:
        (H, W, 3) uint8 array
    """
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise MalformedFrameError(
            "Expected an RGB or RGBA image",
            expected="(H, W, 3|4)",
            actual=image.shape
        )
    if image.shape[2] == 4:
        return cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_RGBA2RGB)
    return np.ascontiguousarray(image)


def downsample(image: np.ndarray, scale: int) -> np.ndarray:
    """
    Shrink an image by an integer factor using area averaging.

    Args:
        image: Input image
        scale: Integer reduction factor (1 returns the input unchanged)

    Returns:
        Downsampled image of size (H // scale, W // scale)
    """
    if scale == 1:
        return image
    height, width = image.shape[:2]
    new_width, new_height = width // scale, height // scale
    if new_width == 0 or new_height == 0:
        raise FrameNotReadyError(width, height, reason="frame smaller than working scale")
    return cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)


class FPSCounter:
    """
    Frame rate counter for real-time applications
    """

    def __init__(self, window_size: int = 30,
                 clock: Optional[Callable[[], float]] = None):
        """
        Initialize FPS counter

        Args:
            window_size: Number of frames to average over
            clock: Time source in seconds (defaults to time.perf_counter)
        """
        self.window_size = window_size
        self.clock = clock or time.perf_counter
        self.frame_times: List[float] = []
        self.last_time = self.clock()

    def update(self) -> float:
        """
        Update FPS counter and return current FPS

        Returns:
            Current FPS
        """
        current_time = self.clock()
        frame_time = current_time - self.last_time
        self.last_time = current_time

        self.frame_times.append(frame_time)

        if len(self.frame_times) > self.window_size:
            self.frame_times.pop(0)

        avg_frame_time = sum(self.frame_times) / len(self.frame_times)
        return 1.0 / avg_frame_time if avg_frame_time > 0 else 0.0

    def reset(self):
        """Reset FPS counter"""
        self.frame_times = []
        self.last_time = self.clock()


__all__ = [
    "DetectionBaseError", "FrameError", "FrameNotReadyError", "MalformedFrameError",
    "CapabilityUnavailableError", "ConfigurationError", "LifecycleError",
    "LoggerFactory", "get_logger", "log_execution_time",
    "to_rgb", "downsample", "FPSCounter",
]
