import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from resume_builder.core.config import settings
from resume_builder.core.session_store import clear_sessions, purge_expired_sessions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    logger.info(
        "resume_builder_start gateway=%s api_base_url=%s session_ttl_minutes=%s",
        settings.resume_gateway,
        settings.resume_api_base_url,
        settings.wizard_session_ttl_minutes,
    )
    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                purge_expired_sessions()
            except Exception as exc:  # pragma: no cover
                logger.warning("wizard_session_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=300)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    clear_sessions()
