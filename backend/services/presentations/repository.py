"""Persistence for presentations and their slides."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import Presentation
from shared.errors import ConflictError
from shared.logging_utils import mask_identifier, setup_logging
from shared.time_utils import utcnow

logger = setup_logging("presentation-repository")


class DuplicateShareIdError(ConflictError):
    """Raised when a share id collides with an existing presentation."""

    error_code = "duplicate_share_id"


class PresentationRepository:
    """Async SQLAlchemy access to the ``presentations`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, presentation: Presentation) -> Presentation:
        """Insert a new presentation with its slides."""
        self.session.add(presentation)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateShareIdError(
                f"Share id {mask_identifier(presentation.share_id)} is already in use"
            ) from exc
        return presentation

    async def get(self, presentation_id: str) -> Presentation | None:
        return await self.session.get(Presentation, presentation_id)

    async def get_by_share_id(self, share_id: str) -> Presentation | None:
        result = await self.session.execute(select(Presentation).where(Presentation.share_id == share_id))
        return result.scalar_one_or_none()

    async def share_id_exists(self, share_id: str) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(Presentation).where(Presentation.share_id == share_id)
        )
        return result.scalar_one() > 0

    async def list_for_owner(self, owner_id: str, skip: int = 0, limit: int | None = None) -> list[Presentation]:
        query = (
            select(Presentation)
            .where(Presentation.owner_id == owner_id)
            .order_by(Presentation.created_at.desc(), Presentation.id)
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_expired(self, now: datetime | None = None) -> list[Presentation]:
        result = await self.session.execute(
            select(Presentation).where(
                Presentation.expires_at.is_not(None),
                Presentation.expires_at < (now or utcnow()),
            )
        )
        return list(result.scalars().all())

    async def record_view(self, presentation: Presentation) -> Presentation:
        """Increment the view counter in a single UPDATE and stamp the view time."""
        await self.session.execute(
            update(Presentation)
            .where(Presentation.id == presentation.id)
            .values(view_count=Presentation.view_count + 1, last_viewed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        await self.session.refresh(presentation, attribute_names=["view_count", "last_viewed_at"])
        return presentation

    async def save(self, presentation: Presentation) -> Presentation:
        """Flush pending changes on an already persisted presentation."""
        await self.session.commit()
        return presentation

    async def change_share_id(self, presentation: Presentation, share_id: str) -> Presentation:
        presentation.share_id = share_id
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await self.session.refresh(presentation)
            raise DuplicateShareIdError(f"Share id {mask_identifier(share_id)} is already in use") from exc
        return presentation

    async def delete(self, presentation: Presentation) -> None:
        await self.session.delete(presentation)
        await self.session.commit()
