from facehand.classical import (
    HandCandidateFilter,
    calculate_overlap,
    fuse_motion_and_skin,
    is_hand_like_shape,
)
from facehand.types import Region

MOTION = Region(0, 0, 16, 16)


def test_overlapping_pair_fuses_into_bounding_box():
    skin = Region(6, 6, 12, 12)
    assert calculate_overlap(MOTION, skin) > 0.25
    assert fuse_motion_and_skin([MOTION], [skin]) == [Region(0, 0, 18, 18)]


def test_fused_region_bounds_both_blocks():
    skin = Region(12, 0, 12, 12)
    motion = Region(16, 0, 16, 16)
    fused = fuse_motion_and_skin([motion], [skin])
    assert fused == [Region(12, 0, 20, 16)]


def test_weak_overlap_does_not_fuse():
    # IoU = 64 / 336, under the fusion threshold
    skin = Region(8, 8, 12, 12)
    assert calculate_overlap(MOTION, skin) <= 0.25
    assert fuse_motion_and_skin([MOTION], [skin]) == []


def test_disjoint_blocks_do_not_fuse():
    assert fuse_motion_and_skin([MOTION], [Region(48, 48, 12, 12)]) == []


def test_every_pair_is_considered():
    motions = [Region(0, 0, 16, 16), Region(16, 0, 16, 16)]
    skins = [Region(6, 6, 12, 12), Region(12, 0, 12, 12)]
    fused = fuse_motion_and_skin(motions, skins)
    # Motion-major: first motion block with each skin block, then the second
    assert fused == [Region(0, 0, 18, 18), Region(12, 0, 20, 16)]


def test_hand_like_shapes():
    assert is_hand_like_shape(Region(0, 0, 40, 40))
    assert not is_hand_like_shape(Region(0, 0, 5, 5))
    assert not is_hand_like_shape(Region(0, 0, 200, 10))


def test_shape_limits_are_exclusive():
    assert not is_hand_like_shape(Region(0, 0, 20, 15))   # area 300
    assert not is_hand_like_shape(Region(0, 0, 25, 10))   # aspect 2.5
    assert not is_hand_like_shape(Region(0, 0, 100, 80))  # area 8000
    assert not is_hand_like_shape(Region(0, 0, 0, 10))


def test_find_hands_filters_then_rescales():
    hand_filter = HandCandidateFilter()
    motion = [Region(0, 0, 16, 16)]
    skin = [Region(6, 6, 12, 12)]
    assert hand_filter.find_hands(motion, skin, scale=2) == [Region(0, 0, 36, 36)]


def test_find_hands_drops_small_unions():
    # Skin block inside the motion block: union is 16x16, area 256
    hand_filter = HandCandidateFilter()
    assert hand_filter.find_hands([MOTION], [Region(2, 2, 12, 12)]) == []


def test_shape_is_checked_before_rescaling():
    # 18x18 = 324 at working resolution, 1296 once doubled
    hand_filter = HandCandidateFilter(area_range=(300, 400))
    assert hand_filter.find_hands([MOTION], [Region(6, 6, 12, 12)], scale=2) == [
        Region(0, 0, 36, 36)
    ]
