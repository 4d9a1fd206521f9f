from datetime import datetime, timezone
from typing import List, Optional

from models.block import Block


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BlockStore:
    """Storage primitives for quiet-hour blocks.

    Every mutation is a single-row statement. ``claim`` is the only
    compare-and-set the dispatcher relies on.
    """

    async def find_for_owner(self, owner_id: str) -> List[Block]:
        return await Block.filter(owner_id=owner_id).order_by("start_time")

    async def find_overlapping(self, owner_id: str, start: datetime, end: datetime) -> List[Block]:
        # only rows that can possibly intersect [start, end)
        return await Block.filter(
            owner_id=owner_id,
            start_time__lt=as_utc(end),
            end_time__gt=as_utc(start),
        ).order_by("start_time")

    async def insert(self, **fields) -> Block:
        for key in ("start_time", "end_time"):
            fields[key] = as_utc(fields[key])
        return await Block.create(**fields)

    async def delete_owned(self, owner_id: str, block_id: int) -> int:
        return await Block.filter(id=block_id, owner_id=owner_id).delete()

    async def find_due(self, window_start: datetime, window_end: datetime) -> List[Block]:
        return await Block.filter(
            start_time__gte=as_utc(window_start),
            start_time__lt=as_utc(window_end),
            notification_sent=False,
        ).order_by("start_time")

    async def claim(self, block_id: int, now: datetime) -> Optional[Block]:
        """Flip ``notification_sent`` to true iff it is not already true.

        Returns the updated block, or None when another pass got there first.
        """
        now = as_utc(now)
        updated = await Block.filter(id=block_id, notification_sent=False).update(
            notification_sent=True,
            notified_at=now,
            notification_error=None,
            updated_at=now,
        )
        if not updated:
            return None
        return await Block.get_or_none(id=block_id)

    async def mark_failed(self, block_id: int, message: str, now: datetime) -> None:
        now = as_utc(now)
        await Block.filter(id=block_id).update(
            notification_sent=False,
            notification_error=message,
            last_notification_attempt=now,
            updated_at=now,
        )
