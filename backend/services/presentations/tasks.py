"""Background maintenance for presentations."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.image_store.store import ImageStore
from shared.logging_utils import setup_logging

from .repository import PresentationRepository
from .service import PresentationService

logger = setup_logging("presentation-purge")


async def purge_expired_once(session_factory: async_sessionmaker[AsyncSession], image_store: ImageStore) -> int:
    async with session_factory() as session:
        service = PresentationService(PresentationRepository(session), image_store)
        return await service.purge_expired()


async def run_purge_loop(
    session_factory: async_sessionmaker[AsyncSession],
    image_store: ImageStore,
    interval_seconds: float,
) -> None:
    """Purge expired presentations every ``interval_seconds`` until cancelled."""
    logger.info(f"Expired presentation purge running every {interval_seconds} seconds")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await purge_expired_once(session_factory, image_store)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Expired presentation purge failed: {e}")
