"""
Tests for helpers/overlap.py

Pure checks: no database involved.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_interval
from helpers.errors import BlockValidationError
from helpers.overlap import find_conflicts, intervals_overlap, validate_block_times


BASE = datetime(2030, 1, 15, tzinfo=timezone.utc)
GRACE = timedelta(minutes=1)


def at(hour: int, minute: int = 0) -> datetime:
    return BASE.replace(hour=hour, minute=minute)


EXISTING = [make_interval(at(10), at(11), "Deep work")]


class TestIntervalsOverlap:

    def test_back_to_back_is_not_a_conflict(self):
        assert not intervals_overlap(at(10), at(11), at(11), at(12))
        assert not intervals_overlap(at(11), at(12), at(10), at(11))

    def test_disjoint_intervals(self):
        assert not intervals_overlap(at(8), at(9), at(10), at(11))

    @pytest.mark.parametrize(
        "start,end",
        [
            (at(9), at(10, 30)),      # candidate ends inside existing
            (at(10, 30), at(12)),     # candidate starts inside existing
            (at(9), at(12)),          # candidate contains existing
            (at(10, 15), at(10, 45)), # existing contains candidate
            (at(10), at(11)),         # identical
        ],
    )
    def test_every_overlap_shape(self, start, end):
        assert intervals_overlap(start, end, at(10), at(11))
        assert intervals_overlap(at(10), at(11), start, end)


class TestFindConflicts:

    @pytest.mark.parametrize(
        "start,end",
        [
            (at(10, 30), at(10, 45)),
            (at(9), at(10, 30)),
            (at(9), at(12)),
            (at(10, 59), at(11, 30)),
        ],
    )
    def test_rejects_intervals_touching_existing_block(self, start, end):
        conflicts = find_conflicts(start, end, EXISTING)
        assert [c.title for c in conflicts] == ["Deep work"]

    def test_accepts_block_starting_when_existing_ends(self):
        assert find_conflicts(at(11), at(11, 30), EXISTING) == []

    def test_returns_only_offending_blocks(self):
        existing = [
            make_interval(at(8), at(9), "early"),
            make_interval(at(10), at(11), "mid"),
            make_interval(at(12), at(13), "late"),
        ]
        conflicts = find_conflicts(at(8, 30), at(10, 30), existing)
        assert [c.title for c in conflicts] == ["early", "mid"]


class TestValidateBlockTimes:

    def test_start_equal_to_end_is_an_ordering_error(self):
        with pytest.raises(BlockValidationError) as exc:
            validate_block_times(at(12), at(12), [], now=at(6), grace=GRACE)
        assert exc.value.rule == "ordering"
        assert exc.value.status_code == 400

    def test_ordering_wins_over_other_rules(self):
        # also stale and overlapping, but ordering is reported
        with pytest.raises(BlockValidationError) as exc:
            validate_block_times(at(10, 45), at(10, 30), EXISTING, now=at(20), grace=GRACE)
        assert exc.value.rule == "ordering"

    def test_start_older_than_grace_is_stale(self):
        now = at(12)
        with pytest.raises(BlockValidationError) as exc:
            validate_block_times(now - timedelta(minutes=2), now + timedelta(hours=1), [], now=now, grace=GRACE)
        assert exc.value.rule == "staleness"
        assert "1 minute" in exc.value.message

    def test_start_within_grace_is_accepted(self):
        now = at(12)
        validate_block_times(now - timedelta(seconds=30), now + timedelta(hours=1), [], now=now, grace=GRACE)

    def test_overlap_lists_conflicting_blocks(self):
        with pytest.raises(BlockValidationError) as exc:
            validate_block_times(at(10, 30), at(12), EXISTING, now=at(6), grace=GRACE)
        assert exc.value.rule == "overlap"
        assert exc.value.status_code == 409
        assert exc.value.conflicting_blocks == EXISTING
        assert "Deep work" in exc.value.message

    def test_back_to_back_passes_validation(self):
        validate_block_times(at(11), at(11, 30), EXISTING, now=at(6), grace=GRACE)
