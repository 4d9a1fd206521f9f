import asyncio
import logging

from helpers.notifier import run_notification_pass
from helpers.settings import DISPATCH_INTERVAL, LOG_LEVEL
from helpers.tortoise_config import init_db, close_db


logger = logging.getLogger("quiet_hours.schedule")


async def process_due_blocks():
    try:
        result = await run_notification_pass()
    except Exception:
        # storage outage or similar; the next tick retries from scratch
        logger.exception("Notification pass failed")
        return None
    if result.errors:
        for detail in result.error_details:
            logger.warning("Notification failure: %s", detail)
    return result


async def main_loop():
    await init_db()
    try:
        while True:
            await process_due_blocks()
            await asyncio.sleep(DISPATCH_INTERVAL.total_seconds())
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(main_loop())
