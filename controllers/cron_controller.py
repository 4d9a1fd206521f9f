import hmac
import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import JSONResponse

from helpers import settings
from helpers.email import create_quiet_hour_email_template, send_email
from helpers.errors import TransportError
from helpers.identity import resolve_display_name
from helpers.jwt_token import AuthenticatedUser, get_current_user
from helpers.notifier import run_notification_pass


logger = logging.getLogger(__name__)

cron_router = APIRouter()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def verify_cron_key(
    x_cron_key: Annotated[Optional[str], Header()] = None,
    key: Annotated[Optional[str], Query()] = None,
):
    supplied = x_cron_key or key
    expected = settings.CRON_SECRET_KEY
    if not expected or not supplied or not hmac.compare_digest(supplied, expected):
        raise HTTPException(status_code=401, detail="Unauthorized")


@cron_router.post("/cron", dependencies=[Depends(verify_cron_key)])
async def cron():
    logger.info("Starting notification pass at %s", _now_iso())
    try:
        result = await run_notification_pass()
        return result.model_dump()
    except Exception as e:
        logger.exception("Notification pass failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e), "timestamp": _now_iso()},
        )


@cron_router.post("/test-cron")
async def test_cron(user: Annotated[AuthenticatedUser, Depends(get_current_user)]):
    try:
        result = await run_notification_pass()
    except Exception as e:
        logger.exception("Notification pass triggered by %s failed", user.email)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e), "timestamp": _now_iso()},
        )

    logger.info("Notification pass triggered by user %s", user.email)
    return {
        "success": True,
        "message": "CRON job executed successfully",
        "data": result.model_dump(),
        "triggered_by": user.email,
        "timestamp": _now_iso(),
    }


@cron_router.post("/test-email")
async def test_email(user: Annotated[AuthenticatedUser, Depends(get_current_user)]):
    user_name = await resolve_display_name(user.user_id, user.email)
    lead_minutes = int(settings.NOTIFY_LOOKAHEAD.total_seconds() // 60)
    start_time = datetime.now(timezone.utc) + settings.NOTIFY_LOOKAHEAD
    text, html = create_quiet_hour_email_template(user_name, "Test Study Block", start_time, lead_minutes)

    try:
        await send_email(user.email, "🧪 Test Notification: Quiet Study Reminder", text, html)
    except TransportError as e:
        logger.error("Test email to %s failed: %s", user.email, e)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e), "timestamp": _now_iso()},
        )

    return {
        "success": True,
        "message": "Test email sent successfully",
        "recipient": user.email,
        "user_name": user_name,
        "timestamp": _now_iso(),
    }
