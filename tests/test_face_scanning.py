import numpy as np

from facehand.classical import MultiScaleScanner, calculate_overlap, suppress_overlaps
from facehand.types import Region

TARGET = Region(20, 10, 64, 64)


def test_window_sizes_and_positions():
    scanner = MultiScaleScanner()
    windows = list(scanner.windows(128, 96))
    # Largest window is 96 / 1.5 = 64, so only the 60px size is scanned
    assert {size for _, _, size in windows} == {60}
    assert len(windows) == 6 * 4
    assert windows[0] == (0, 0, 60)
    assert windows[1] == (12, 0, 60)
    assert all(x + size <= 128 and y + size <= 96 for x, y, size in windows)


def test_window_sizes_grow_by_step():
    sizes = sorted({size for _, _, size in MultiScaleScanner().windows(300, 300)})
    assert sizes == [60, 85, 110, 135, 160, 185]


def test_frame_smaller_than_min_window_has_no_windows():
    assert list(MultiScaleScanner().windows(64, 48)) == []


def test_synthetic_face_is_found(face_gray):
    candidates = MultiScaleScanner().scan(face_gray)
    faces = suppress_overlaps(candidates, threshold=0.4, max_results=3)

    assert faces
    assert any(calculate_overlap(face, TARGET) > 0.5 for face in faces)
    assert Region(24, 12, 60, 60) in faces


def test_scan_rescales_to_frame_coordinates(face_gray):
    working = MultiScaleScanner().scan(face_gray)
    scaled = MultiScaleScanner().scan(face_gray, scale=2)
    assert scaled == [region.scaled(2) for region in working]


def test_blank_image_has_no_candidates():
    gray = np.full((96, 128), 128, dtype=np.uint8)
    assert MultiScaleScanner().scan(gray) == []
