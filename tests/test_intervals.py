"""
Tests for interval algebra.
"""

import pytest

from freebusy.domain.intervals import intersect, merge_intervals, subtract_intervals, total_minutes
from freebusy.domain.models import Interval

MIN = 60_000


def _iv(start_min: int, end_min: int) -> Interval:
    return Interval(start_min * MIN, end_min * MIN)


class TestInterval:
    """Tests for the Interval model."""

    def test_interval_rejects_empty_range(self):
        with pytest.raises(ValueError):
            Interval(10, 10)

    def test_duration_minutes(self):
        assert _iv(540, 600).duration_minutes() == 60

    def test_intersect(self):
        assert intersect(_iv(0, 60), _iv(30, 90)) == _iv(30, 60)
        assert intersect(_iv(0, 60), _iv(60, 90)) is None
        assert intersect(_iv(0, 60), _iv(120, 180)) is None


class TestMergeIntervals:
    """Tests for merge_intervals."""

    def test_adjacent_ranges_coalesce(self):
        assert merge_intervals([_iv(540, 600), _iv(600, 660)]) == [_iv(540, 660)]

    def test_unsorted_overlapping_input(self):
        merged = merge_intervals([_iv(720, 780), _iv(540, 620), _iv(600, 610), _iv(900, 960)])

        assert merged == [_iv(540, 620), _iv(720, 780), _iv(900, 960)]

    def test_empty(self):
        assert merge_intervals([]) == []


class TestSubtractIntervals:
    """Tests for subtract_intervals."""

    def test_blocks_split_base(self):
        free = subtract_intervals(_iv(540, 1020), [_iv(600, 660), _iv(840, 900)])

        assert free == [_iv(540, 600), _iv(660, 840), _iv(900, 1020)]

    def test_blocks_overhanging_base(self):
        free = subtract_intervals(_iv(540, 1020), [_iv(480, 570), _iv(1000, 1100)])

        assert free == [_iv(570, 1000)]

    def test_block_covering_base(self):
        assert subtract_intervals(_iv(540, 1020), [_iv(0, 1440)]) == []

    def test_no_blocks(self):
        assert subtract_intervals(_iv(540, 1020), []) == [_iv(540, 1020)]

    def test_subtracting_twice_changes_nothing(self):
        base = _iv(540, 1020)
        blocks = [_iv(600, 660), _iv(650, 700), _iv(990, 1100)]

        once = subtract_intervals(base, blocks)
        for free in once:
            assert subtract_intervals(free, blocks) == [free]


def test_total_minutes():
    assert total_minutes([_iv(540, 600), _iv(660, 690)]) == 90
    assert total_minutes([]) == 0
