"""Background removal of expired refresh token sessions."""

import asyncio
import logging

from studies_api.config.settings import settings
from studies_api.database.client import get_session

from .exceptions import StoreCancelledError
from .store import SessionStore
from .token_codec import utc_now

logger = logging.getLogger(__name__)


async def purge_expired_sessions() -> int:
    """Delete every session whose refresh token has expired.

    Returns:
        Number of removed sessions

    """
    async with get_session() as session:
        store = SessionStore.for_request(session, settings.db_request_timeout_seconds)
        return await store.delete_expired(utc_now())


async def periodic_cleanup(interval: float) -> None:
    """Run ``purge_expired_sessions`` every ``interval`` seconds until cancelled.

    A failed sweep is logged and retried on the next tick; cancellation during
    a sweep stops the loop.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await purge_expired_sessions()
        except StoreCancelledError:
            logger.info("Expired session cleanup stopped")
            return
        except Exception as e:
            logger.error(f"Expired session cleanup failed: {e}")
