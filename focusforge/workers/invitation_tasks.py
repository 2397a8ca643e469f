"""
Invitation maintenance tasks.
Periodically marks pending invitations past their expiry as expired.
"""

from __future__ import annotations

import asyncio
import logging

from focusforge.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    name="focusforge.workers.invitation_tasks.expire_invitations",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def expire_invitations(self) -> dict[str, int]:  # type: ignore[no-untyped-def]
    try:
        # Fresh loop per run, forked workers may inherit a closed one
        from focusforge.core.database import async_engine
        async_engine.sync_engine.dispose()

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(_expire())
        finally:
            loop.close()
    except Exception as exc:
        logger.error("expire_invitations failed: %s", exc)
        raise self.retry(exc=exc)


async def _expire() -> dict[str, int]:
    from focusforge.core.database import AsyncSessionLocal
    from focusforge.services.invitation_service import expire_stale_invitations

    async with AsyncSessionLocal() as session:
        counts = await expire_stale_invitations(session)
        await session.commit()
    return counts
