"""
Data model shared by the detection pipeline and its callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

import numpy as np

from .utils import FrameNotReadyError, MalformedFrameError, get_logger, to_rgb

logger = get_logger(__name__)

PixelBuffer = Union[np.ndarray, bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def scaled(self, factor: int) -> Region:
        """Multiply every coordinate by ``factor`` (working -> frame resolution)."""
        return Region(self.x * factor, self.y * factor,
                      self.width * factor, self.height * factor)

    def union(self, other: Region) -> Region:
        """Smallest region containing both rectangles."""
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Region(x, y, max(self.right, other.right) - x,
                      max(self.bottom, other.bottom) - y)

    def clipped(self, frame_width: int, frame_height: int) -> Region:
        """Intersect with the frame rectangle; empty results have zero size."""
        x = min(max(self.x, 0), frame_width)
        y = min(max(self.y, 0), frame_height)
        right = min(max(self.right, x), frame_width)
        bottom = min(max(self.bottom, y), frame_height)
        return Region(x, y, right - x, bottom - y)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True, eq=False)
class Frame:
    """
    One RGBA (or RGB) video frame owned by the caller.

    ``pixels`` is either an (H, W, C) uint8 array or a flat buffer of
    ``width * height * channels`` bytes in row-major order.
    """

    pixels: PixelBuffer
    width: int
    height: int
    channels: int = 4

    @classmethod
    def from_buffer(cls, buffer: PixelBuffer, width: int, height: int,
                    channels: int = 4) -> Frame:
        return cls(buffer, width, height, channels)

    @classmethod
    def from_array(cls, image: np.ndarray) -> Frame:
        height, width = image.shape[:2]
        channels = image.shape[2] if image.ndim == 3 else 1
        return cls(image, width, height, channels)

    @property
    def is_ready(self) -> bool:
        if self.pixels is None or self.width <= 0 or self.height <= 0:
            return False
        return len(self.pixels) > 0

    def rgb(self) -> np.ndarray:
        """
        Return the usable part of the frame as an (rows, cols, 3) uint8 array.

        Buffers shorter than the declared size are cropped to the complete
        rows they contain, so missing samples are never read.

        Raises:
            FrameNotReadyError: No dimensions or data yet
            MalformedFrameError: Buffer cannot be interpreted at all
        """
        if not self.is_ready:
            raise FrameNotReadyError(self.width, self.height)

        if isinstance(self.pixels, np.ndarray) and self.pixels.ndim == 3:
            image = self.pixels[:self.height, :self.width]
        else:
            if self.channels not in (3, 4):
                raise MalformedFrameError("Unsupported channel count",
                                          expected="3 or 4", actual=self.channels)
            flat = np.frombuffer(self.pixels, dtype=np.uint8) \
                if not isinstance(self.pixels, np.ndarray) else self.pixels.reshape(-1)
            row_length = self.width * self.channels
            rows = min(self.height, flat.size // row_length)
            if rows == 0:
                raise MalformedFrameError("Buffer holds no complete row",
                                          expected=row_length, actual=flat.size)
            if rows < self.height:
                logger.debug(f"Short frame buffer: using {rows} of {self.height} rows")
            image = flat[:rows * row_length].reshape(rows, self.width, self.channels)

        if image.dtype != np.uint8:
            image = np.clip(np.nan_to_num(image), 0, 255).astype(np.uint8)
        return to_rgb(image)


@dataclass(frozen=True)
class DetectionResult:
    """Faces and hands found in one frame, in frame coordinates."""

    faces: Tuple[Region, ...] = field(default_factory=tuple)
    hands: Tuple[Region, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> DetectionResult:
        return cls()

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def hand_count(self) -> int:
        return len(self.hands)


@dataclass(frozen=True)
class DetectionStats:
    """Last-known counts and frame rate, as shown in a statistics panel."""

    faces: int = 0
    hands: int = 0
    fps: int = 0


@dataclass(frozen=True)
class ActivityStatus:
    """Activity signal emitted on every lifecycle transition."""

    face_detection: bool = False
    hand_detection: bool = False
    camera_active: bool = False

    @property
    def detecting_active(self) -> bool:
        return self.face_detection and self.hand_detection


class DetectorState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    DETECTING = "detecting"
    PAUSED = "paused"
    STOPPED = "stopped"

    @property
    def is_active(self) -> bool:
        return self in (DetectorState.DETECTING, DetectorState.PAUSED)


@dataclass(frozen=True, eq=False)
class WorkingFrame:
    """
    One frame prepared for detection.

    ``rgb`` and ``gray`` are the downsampled working copies; regions found
    in them are multiplied by ``scale`` to reach frame coordinates.
    """

    frame: Frame
    rgb: np.ndarray
    gray: np.ndarray
    scale: int

    @property
    def frame_width(self) -> int:
        return self.frame.width

    @property
    def frame_height(self) -> int:
        return self.frame.height
