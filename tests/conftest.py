"""Shared fixtures for the detection tests."""

import numpy as np
import pytest

from facehand.types import Frame


def _face_gray():
    # 128x96 image with a face laid out for a 64px window at (20, 10):
    # bright background and forehead, dark eye bands with a small margin
    gray = np.full((96, 128), 200, dtype=np.uint8)
    gray[23:45, 26:50] = 30
    gray[23:45, 55:79] = 30
    return gray


@pytest.fixture
def face_gray():
    return _face_gray()


@pytest.fixture
def face_frame():
    """The face image at twice the size, as a full-resolution RGBA frame."""
    gray = np.repeat(np.repeat(_face_gray(), 2, axis=0), 2, axis=1)
    rgba = np.dstack([gray, gray, gray, np.full_like(gray, 255)])
    return Frame.from_array(rgba)


@pytest.fixture
def solid_rgba():
    def make(width, height, rgb, alpha=255):
        image = np.empty((height, width, 4), dtype=np.uint8)
        image[..., :3] = rgb
        image[..., 3] = alpha
        return image
    return make


class FakeClock:
    """Advances a fixed step every time it is read."""

    def __init__(self, step=0.1):
        self.step = step
        self.now = 0.0

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture
def fake_clock():
    return FakeClock()
