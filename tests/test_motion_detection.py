import numpy as np

from facehand.classical import MotionDetector
from facehand.types import Region


def test_first_frame_has_no_motion(solid_rgba):
    assert MotionDetector().detect(solid_rgba(64, 48, (0, 0, 0)), None) == []


def test_identical_frames_have_no_motion(solid_rgba):
    frame = solid_rgba(64, 48, (120, 30, 200))
    assert MotionDetector().detect(frame, frame.copy()) == []


def test_black_to_white_moves_everywhere(solid_rgba):
    previous = solid_rgba(64, 48, (0, 0, 0))
    current = solid_rgba(64, 48, (255, 255, 255))
    regions = MotionDetector().detect(current, previous)

    assert len(regions) == (64 // 16) * (48 // 16)
    covered = np.zeros((48, 64), dtype=bool)
    for region in regions:
        covered[region.y:region.bottom, region.x:region.right] = True
    assert covered.all()


def test_regions_are_row_major(solid_rgba):
    regions = MotionDetector().detect(solid_rgba(32, 32, (255, 255, 255)),
                                      solid_rgba(32, 32, (0, 0, 0)))
    assert regions == [Region(0, 0, 16, 16), Region(16, 0, 16, 16),
                       Region(0, 16, 16, 16), Region(16, 16, 16, 16)]


def test_partial_edge_blocks_are_skipped(solid_rgba):
    regions = MotionDetector().detect(solid_rgba(40, 40, (255, 255, 255)),
                                      solid_rgba(40, 40, (0, 0, 0)))
    assert len(regions) == 4
    assert all(region.right <= 32 and region.bottom <= 32 for region in regions)


def test_only_changed_block_is_reported(solid_rgba):
    previous = solid_rgba(64, 64, (50, 50, 50))
    current = previous.copy()
    current[16:32, 32:48, :3] = 200
    assert MotionDetector().detect(current, previous) == [Region(32, 16, 16, 16)]


def test_small_change_is_below_threshold(solid_rgba):
    previous = solid_rgba(32, 32, (100, 100, 100))
    current = solid_rgba(32, 32, (120, 120, 120))
    assert MotionDetector().detect(current, previous) == []


def test_alpha_channel_is_ignored(solid_rgba):
    previous = solid_rgba(32, 32, (100, 100, 100), alpha=0)
    current = solid_rgba(32, 32, (100, 100, 100), alpha=255)
    assert MotionDetector().detect(current, previous) == []


def test_mismatched_previous_frame_is_treated_as_absent(solid_rgba):
    previous = solid_rgba(32, 32, (0, 0, 0))
    current = solid_rgba(64, 64, (255, 255, 255))
    assert MotionDetector().detect(current, previous) == []


def test_threshold_is_configurable(solid_rgba):
    previous = solid_rgba(32, 32, (100, 100, 100))
    current = solid_rgba(32, 32, (120, 120, 120))
    assert len(MotionDetector(threshold=10).detect(current, previous)) == 4
