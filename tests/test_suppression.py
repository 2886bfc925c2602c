import itertools

import pytest

from facehand.classical import calculate_overlap, suppress_overlaps
from facehand.types import Region


def test_overlap_with_itself_is_one():
    region = Region(3, 4, 20, 10)
    assert calculate_overlap(region, region) == 1.0


def test_disjoint_regions_do_not_overlap():
    assert calculate_overlap(Region(0, 0, 10, 10), Region(50, 50, 10, 10)) == 0.0


def test_touching_edges_do_not_overlap():
    assert calculate_overlap(Region(0, 0, 10, 10), Region(10, 0, 10, 10)) == 0.0


def test_partial_overlap():
    # 5x10 shared out of 100 + 100 - 50
    assert calculate_overlap(Region(0, 0, 10, 10), Region(5, 0, 10, 10)) == pytest.approx(50 / 150)


def test_overlap_is_symmetric():
    first, second = Region(0, 0, 16, 16), Region(6, 6, 12, 12)
    assert calculate_overlap(first, second) == calculate_overlap(second, first)


def test_suppression_properties():
    candidates = [
        Region(x, y, size, size)
        for size in (60, 85)
        for y in range(0, 60, 12)
        for x in range(0, 100, 12)
    ]
    kept = suppress_overlaps(candidates, threshold=0.4, max_results=3)

    assert 0 < len(kept) <= 3
    assert all(region in candidates for region in kept)
    for first, second in itertools.combinations(kept, 2):
        assert calculate_overlap(first, second) <= 0.4


def test_suppression_prefers_larger_regions():
    small = Region(0, 0, 10, 10)
    large = Region(0, 0, 12, 12)
    assert suppress_overlaps([small, large]) == [large]


def test_suppression_keeps_scan_order_on_ties():
    first = Region(0, 0, 10, 10)
    second = Region(100, 0, 10, 10)
    third = Region(200, 0, 10, 10)
    assert suppress_overlaps([second, first, third]) == [second, first, third]


def test_suppression_caps_results():
    regions = [Region(i * 20, 0, 10, 10) for i in range(6)]
    assert len(suppress_overlaps(regions)) == 3
    assert len(suppress_overlaps(regions, max_results=None)) == 6


def test_suppression_of_nothing():
    assert suppress_overlaps([]) == []
