import logging
from typing import Awaitable, Callable, Dict

import httpx

from helpers import settings
from helpers.errors import IdentityLookupError


logger = logging.getLogger(__name__)

LOOKUP_TIMEOUT = 10.0


async def get_user_by_id(user_id: str) -> Dict:
    """Fetches a user record from the identity service's admin API."""
    if not settings.AUTH_ADMIN_URL or not settings.AUTH_SERVICE_KEY:
        raise IdentityLookupError("Identity admin API is not configured")

    url = f"{settings.AUTH_ADMIN_URL.rstrip('/')}/admin/users/{user_id}"
    headers = {
        "apikey": settings.AUTH_SERVICE_KEY,
        "Authorization": f"Bearer {settings.AUTH_SERVICE_KEY}",
    }
    try:
        async with httpx.AsyncClient(timeout=LOOKUP_TIMEOUT) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise IdentityLookupError(f"Identity lookup failed for {user_id}: {e}") from e

    if response.status_code != 200:
        raise IdentityLookupError(
            f"Identity lookup for {user_id} returned {response.status_code}: {response.text}"
        )
    try:
        return response.json()
    except ValueError as e:
        raise IdentityLookupError(f"Identity lookup for {user_id} returned a non-JSON body") from e


def _local_part(address: str) -> str:
    return (address or "").split("@")[0]


async def resolve_display_name(
    user_id: str,
    contact: str,
    lookup: Callable[[str], Awaitable[Dict]] = get_user_by_id,
) -> str:
    """Best-effort display name for a reminder greeting. Never raises."""
    try:
        user = await lookup(user_id)
        metadata = user.get("user_metadata") or {}
        name = metadata.get("name") or metadata.get("full_name") or _local_part(user.get("email"))
    except Exception as e:
        logger.warning("Falling back to contact address for %s: %s", user_id, e)
        name = None

    return name or _local_part(contact) or "User"
