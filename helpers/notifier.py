"""
Reminder dispatch.

One pass selects the blocks starting inside the notification window, claims
each one with a conditional update and sends a single reminder for every
claim it wins. Passes keep no state between runs; whether a block was
notified lives only in the ``notification_sent`` column.

The claim is taken before the email goes out. If the process dies between
the two, the block stays marked as sent without a reminder having been
delivered.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from helpers.block_store import BlockStore, as_utc
from helpers.email import create_quiet_hour_email_template, reminder_subject, send_email
from helpers.errors import TransportError
from helpers.identity import get_user_by_id, resolve_display_name
from helpers.settings import NOTIFY_LOOKAHEAD, NOTIFY_SLACK
from models.block import Block


logger = logging.getLogger(__name__)

default_store = BlockStore()

SendFn = Callable[..., Awaitable[None]]
LookupFn = Callable[[str], Awaitable[Dict]]


class NotificationPassResult(BaseModel):
    success: bool = True
    timestamp: str
    blocks_found: int = 0
    notifications_sent: int = 0
    already_handled: int = 0
    errors: int = 0
    error_details: List[str] = Field(default_factory=list)


def notification_window(
    now: datetime,
    lookahead: timedelta = NOTIFY_LOOKAHEAD,
    slack: timedelta = NOTIFY_SLACK,
) -> Tuple[datetime, datetime]:
    target = as_utc(now) + lookahead
    return target - slack, target + slack


async def select_upcoming_blocks(
    now: datetime,
    store: BlockStore = default_store,
    lookahead: timedelta = NOTIFY_LOOKAHEAD,
    slack: timedelta = NOTIFY_SLACK,
) -> List[Block]:
    window_start, window_end = notification_window(now, lookahead, slack)
    logger.info(
        "Looking for blocks starting between %s and %s",
        window_start.isoformat(), window_end.isoformat(),
    )
    return await store.find_due(window_start, window_end)


async def _record_failure(
    store: BlockStore,
    block_id: int,
    message: str,
    now: datetime,
    label: str,
    result: NotificationPassResult,
) -> None:
    """Reopens a claimed block for the next pass and notes the failure."""
    result.errors += 1
    result.error_details.append(f"{label}: {message}")
    try:
        await store.mark_failed(block_id, message, now)
    except Exception as record_error:
        logger.exception("Could not record failure for block %s", block_id)
        result.error_details.append(f"{label}: failure not recorded: {record_error}")


async def run_notification_pass(
    now: Optional[datetime] = None,
    *,
    store: BlockStore = default_store,
    send: SendFn = send_email,
    lookup: LookupFn = get_user_by_id,
    lookahead: timedelta = NOTIFY_LOOKAHEAD,
    slack: timedelta = NOTIFY_SLACK,
) -> NotificationPassResult:
    now = as_utc(now) if now else datetime.now(timezone.utc)
    lead_minutes = int(lookahead.total_seconds() // 60)

    blocks = await select_upcoming_blocks(now, store, lookahead, slack)
    result = NotificationPassResult(timestamp=now.isoformat(), blocks_found=len(blocks))
    logger.info("Found %d blocks requiring notification", len(blocks))

    for block in blocks:
        label = f'Block "{block.title}" ({block.owner_email})'

        try:
            claimed = await store.claim(block.id, now)
        except Exception as e:
            logger.exception("Could not claim block %s", block.id)
            result.errors += 1
            result.error_details.append(f"{label}: {e}")
            continue

        if claimed is None:
            logger.info("Block %s already processed by another pass", block.id)
            result.already_handled += 1
            continue

        try:
            user_name = await resolve_display_name(claimed.owner_id, claimed.owner_email, lookup)
            text, html = create_quiet_hour_email_template(
                user_name, claimed.title, claimed.start_time, lead_minutes
            )
            await send(claimed.owner_email, reminder_subject(claimed.title), text, html)
        except TransportError as e:
            logger.error("Failed to send notification for block %s: %s", block.id, e)
            await _record_failure(store, block.id, str(e), now, label, result)
            continue
        except Exception as e:
            logger.exception("Unexpected error notifying block %s", block.id)
            await _record_failure(store, block.id, str(e) or type(e).__name__, now, label, result)
            continue

        result.notifications_sent += 1
        logger.info("Notification sent for block %s to %s", block.id, claimed.owner_email)

    logger.info(
        "Notification pass finished: found=%d sent=%d already_handled=%d errors=%d",
        result.blocks_found, result.notifications_sent, result.already_handled, result.errors,
    )
    return result
