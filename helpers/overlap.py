"""
Overlap detection for quiet-hour blocks.

Intervals are half-open, ``[start, end)``, so a block ending at 11:00 and
another starting at 11:00 do not conflict.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from helpers.errors import BlockValidationError


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and start_b < end_a


def find_conflicts(start: datetime, end: datetime, existing: Iterable) -> List:
    """
    Returns the blocks in ``existing`` whose interval intersects ``[start, end)``.

    Covers every overlap shape: the candidate starting inside an existing
    block, ending inside one, containing one, or being contained by one.
    """
    return [
        block for block in existing
        if intervals_overlap(start, end, block.start_time, block.end_time)
    ]


def validate_block_times(
    start: datetime,
    end: datetime,
    existing: Iterable,
    now: datetime,
    grace: timedelta,
) -> None:
    """
    Raises BlockValidationError for the first rule the candidate breaks.

    Rules, in order:
        ordering:  start must come strictly before end
        staleness: start may lag ``now`` by at most ``grace``
        overlap:   no intersection with the owner's existing blocks
    """
    if start >= end:
        raise BlockValidationError("ordering", "End time must be after start time")

    if start < now - grace:
        raise BlockValidationError(
            "staleness",
            f"Cannot create blocks more than {_describe(grace)} in the past",
        )

    conflicts = find_conflicts(start, end, existing)
    if conflicts:
        listed = ", ".join(f'"{block.title}" ({block.start_time.isoformat()} - {block.end_time.isoformat()})' for block in conflicts)
        raise BlockValidationError(
            "overlap",
            f"This time slot overlaps with existing blocks: {listed}",
            conflicting_blocks=conflicts,
        )


def _describe(delta: timedelta) -> str:
    seconds = int(delta.total_seconds())
    if seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute" + ("" if minutes == 1 else "s")
    return f"{seconds} seconds"
