import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from helpers.block_store import BlockStore, as_utc
from helpers.errors import BlockValidationError
from helpers.overlap import validate_block_times
from helpers.settings import BLOCK_GRACE
from models.block import Block


logger = logging.getLogger(__name__)

default_store = BlockStore()

# matches Block.title
TITLE_MAX_LENGTH = 255


async def create_block(
    owner_id: str,
    owner_email: str,
    title: str,
    start: datetime,
    end: datetime,
    now: Optional[datetime] = None,
    store: BlockStore = default_store,
) -> Block:
    """Validates the candidate against the owner's blocks and stores it.

    Nothing is written when validation fails. Two requests from the same owner
    racing past validation can both insert.
    """
    title = (title or "").strip()
    if not title:
        raise BlockValidationError("malformed", "Title, start_time, and end_time are required")
    if len(title) > TITLE_MAX_LENGTH:
        raise BlockValidationError("malformed", f"Title must be at most {TITLE_MAX_LENGTH} characters")

    start, end = as_utc(start), as_utc(end)
    now = as_utc(now) if now else datetime.now(timezone.utc)

    existing = await store.find_overlapping(owner_id, start, end)
    validate_block_times(start, end, existing, now, BLOCK_GRACE)

    block = await store.insert(
        owner_id=owner_id,
        owner_email=owner_email,
        title=title,
        start_time=start,
        end_time=end,
        notification_sent=False,
    )
    logger.info(
        "Created block %s %r for %s: %s - %s",
        block.id, title, owner_email, start.isoformat(), end.isoformat(),
    )
    return block


async def list_blocks(owner_id: str, store: BlockStore = default_store) -> List[Block]:
    return await store.find_for_owner(owner_id)


async def delete_block(owner_id: str, block_id: int, store: BlockStore = default_store) -> None:
    deleted = await store.delete_owned(owner_id, block_id)
    if deleted:
        logger.info("Deleted block %s for owner %s", block_id, owner_id)


def serialize_block(block: Block) -> Dict[str, Any]:
    def iso(value):
        return value.isoformat() if value else None

    return {
        "id": block.id,
        "owner_id": block.owner_id,
        "owner_email": block.owner_email,
        "title": block.title,
        "start_time": iso(block.start_time),
        "end_time": iso(block.end_time),
        "notification_sent": block.notification_sent,
        "notified_at": iso(block.notified_at),
        "notification_error": block.notification_error,
        "last_notification_attempt": iso(block.last_notification_attempt),
        "created_at": iso(block.created_at),
        "updated_at": iso(block.updated_at),
    }
