"""Owner operations on presentations."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any
from uuid import uuid4

from models.database import Presentation, Slide
from services.image_store.store import ImageStore
from shared.config import config as service_config
from shared.errors import ConflictError, ForbiddenError, NotFoundError
from shared.logging_utils import mask_identifier, setup_logging
from shared.presentation_models import (
    AddSlidesRequest,
    PresentationCreateRequest,
    PresentationDetail,
    PresentationSettings,
    PresentationSummary,
    PresentationUpdateRequest,
    SlideInput,
)
from shared.security import hash_password_async
from shared.time_utils import ensure_utc, utcnow
from shared.upload_models import StoredImage

from .projections import settings_of, to_detail, to_summary
from .repository import DuplicateShareIdError, PresentationRepository
from .share_ids import generate_share_id

logger = setup_logging("presentation-service")

MAX_SHARE_ID_ATTEMPTS = int(service_config.get_file_value("presentations.max_share_id_attempts", 5))


def owner_namespace(owner_id: str) -> str:
    """Image Store folder holding one owner's slide images."""
    return f"presentations/{owner_id}"


class PresentationService:
    """Create, edit, share and delete presentations on behalf of their owner."""

    def __init__(self, repository: PresentationRepository, image_store: ImageStore):
        self.repository = repository
        self.image_store = image_store

    async def _get_owned(self, presentation_id: str, requester_id: str, action: str) -> Presentation:
        presentation = await self.repository.get(presentation_id)
        if presentation is None:
            raise NotFoundError("Presentation not found")
        if str(presentation.owner_id) != str(requester_id):
            logger.warning(f"User {requester_id} tried to {action} presentation {presentation_id} owned by someone else")
            raise ForbiddenError(f"You do not have permission to {action} this presentation")
        return presentation

    async def _upload_slides(self, slides: list[SlideInput], owner_id: str) -> list[dict[str, Any]]:
        """Upload slide images concurrently and return slide fields sorted by order.

        If any upload fails the images already stored are removed and the
        first error is raised.
        """
        namespace = owner_namespace(owner_id)
        results = await asyncio.gather(
            *(self.image_store.store(slide.image_data, namespace) for slide in slides),
            return_exceptions=True,
        )

        errors = [result for result in results if isinstance(result, BaseException)]
        if errors:
            stored = [result.asset_id for result in results if isinstance(result, StoredImage)]
            if stored:
                await self.image_store.delete_many(stored, namespace)
            raise errors[0]

        uploaded = [
            {
                "order": slide.order,
                "title": slide.title,
                "image_url": stored.url,
                "thumbnail_url": stored.thumbnail_url,
                "asset_id": stored.asset_id,
                "slide_metadata": slide.metadata,
            }
            for slide, stored in zip(slides, results)
        ]
        uploaded.sort(key=lambda fields: fields["order"])
        return uploaded

    async def _remove_assets(self, presentation: Presentation) -> None:
        asset_ids = [slide.asset_id for slide in presentation.slides if slide.asset_id]
        if not asset_ids:
            return
        failed = await self.image_store.delete_many(asset_ids, owner_namespace(presentation.owner_id))
        if failed:
            logger.warning(
                f"Failed to remove {len(failed)} of {len(asset_ids)} assets for presentation "
                f"{presentation.id}: {', '.join(failed)}"
            )

    async def create(
        self,
        request: PresentationCreateRequest,
        owner_id: str,
        owner_name: str | None,
    ) -> Presentation:
        """Upload slide images and persist a new presentation with a fresh share id."""
        password_hash = await hash_password_async(request.password) if request.password else None
        slide_fields = await self._upload_slides(request.slides, owner_id)
        settings = (request.settings or PresentationSettings()).model_dump()

        for attempt in range(1, MAX_SHARE_ID_ATTEMPTS + 1):
            share_id = generate_share_id()
            if await self.repository.share_id_exists(share_id):
                logger.warning(f"Share id collision on attempt {attempt}, regenerating")
                continue

            presentation = Presentation(
                id=str(uuid4()),
                share_id=share_id,
                title=request.title,
                description=request.description,
                slides=[Slide(**fields) for fields in slide_fields],
                owner_id=str(owner_id),
                owner_name=owner_name,
                is_public=request.is_public,
                password_hash=password_hash,
                expires_at=ensure_utc(request.expires_at),
                view_count=0,
                client_id=request.client_id,
                client_name=request.client_name,
                settings=settings,
            )
            try:
                presentation = await self.repository.add(presentation)
            except DuplicateShareIdError:
                logger.warning(f"Share id collision on attempt {attempt}, regenerating")
                continue

            logger.info(
                f"Created presentation {presentation.id} ({len(slide_fields)} slides) "
                f"with share id {mask_identifier(share_id)}"
            )
            return presentation

        await self.image_store.delete_many(
            [fields["asset_id"] for fields in slide_fields], owner_namespace(owner_id)
        )
        raise ConflictError("Could not generate a unique share id")

    async def list_for_owner(self, owner_id: str, skip: int = 0, limit: int | None = None) -> list[PresentationSummary]:
        presentations = await self.repository.list_for_owner(str(owner_id), skip=skip, limit=limit)
        return [to_summary(presentation) for presentation in presentations]

    async def get_detail(self, presentation_id: str, requester_id: str) -> PresentationDetail:
        presentation = await self._get_owned(presentation_id, requester_id, action="view")
        return to_detail(presentation)

    async def update(
        self,
        presentation_id: str,
        request: PresentationUpdateRequest,
        requester_id: str,
    ) -> Presentation:
        """Apply the fields present in ``request``.

        An explicit ``password: null`` removes the password, ``expires_at: null``
        removes the expiry, and settings are merged over the stored ones.
        """
        presentation = await self._get_owned(presentation_id, requester_id, action="edit")
        changes = request.model_dump(exclude_unset=True)

        if "password" in changes:
            password = changes.pop("password")
            presentation.password_hash = await hash_password_async(password) if password else None

        if "settings" in changes:
            patch = changes.pop("settings") or {}
            merged = settings_of(presentation).model_dump()
            merged.update({key: value for key, value in patch.items() if value is not None})
            presentation.settings = PresentationSettings.model_validate(merged).model_dump()

        if "expires_at" in changes:
            presentation.expires_at = ensure_utc(changes.pop("expires_at"))

        for field in ("title", "is_public"):
            if changes.get(field) is None:
                changes.pop(field, None)

        for field, value in changes.items():
            setattr(presentation, field, value)

        presentation = await self.repository.save(presentation)
        logger.info(f"Updated presentation {presentation.id}")
        return presentation

    async def add_slides(self, presentation_id: str, request: AddSlidesRequest, requester_id: str) -> Presentation:
        """Upload new slides and store the combined list sorted by order."""
        presentation = await self._get_owned(presentation_id, requester_id, action="edit")
        slide_fields = await self._upload_slides(request.slides, presentation.owner_id)

        combined = [*presentation.slides, *(Slide(**fields) for fields in slide_fields)]
        presentation.slides = sorted(combined, key=lambda slide: slide.order)

        presentation = await self.repository.save(presentation)
        logger.info(f"Added {len(slide_fields)} slides to presentation {presentation.id}")
        return presentation

    async def regenerate_share_link(self, presentation_id: str, requester_id: str) -> Presentation:
        """Assign a new share id that no presentation currently uses."""
        presentation = await self._get_owned(presentation_id, requester_id, action="edit")
        previous = presentation.share_id

        for attempt in range(1, MAX_SHARE_ID_ATTEMPTS + 1):
            candidate = generate_share_id()
            if candidate == previous or await self.repository.share_id_exists(candidate):
                logger.warning(f"Share id collision on attempt {attempt}, regenerating")
                continue
            try:
                presentation = await self.repository.change_share_id(presentation, candidate)
            except DuplicateShareIdError:
                logger.warning(f"Share id collision on attempt {attempt}, regenerating")
                continue
            logger.info(
                f"Regenerated share link for presentation {presentation.id}: "
                f"{mask_identifier(previous)} -> {mask_identifier(candidate)}"
            )
            return presentation

        raise ConflictError("Could not generate a unique share id")

    async def delete(self, presentation_id: str, requester_id: str) -> None:
        """Remove every slide asset, then the presentation itself."""
        presentation = await self._get_owned(presentation_id, requester_id, action="delete")
        await self._remove_assets(presentation)
        await self.repository.delete(presentation)
        logger.info(f"Deleted presentation {presentation_id}")

    async def purge_expired(self, now: datetime | None = None) -> int:
        """Delete every presentation past its expiry along with its assets."""
        expired = await self.repository.list_expired(now or utcnow())
        for presentation in expired:
            await self._remove_assets(presentation)
            await self.repository.delete(presentation)
        if expired:
            logger.info(f"Purged {len(expired)} expired presentations")
        return len(expired)
