"""Anonymous access to shared presentations."""

from __future__ import annotations

from models.database import Presentation
from shared.errors import ForbiddenError, NotFoundError
from shared.logging_utils import mask_identifier, setup_logging
from shared.presentation_models import AccessCheck, PublicPresentationView
from shared.security import verify_password_async
from shared.time_utils import is_past

from .projections import to_public_view
from .repository import PresentationRepository

logger = setup_logging("presentation-access")


class PresentationAccessController:
    """Decide whether a share id may be viewed and record successful views.

    Access is gated by expiry and password only; ``is_public`` is not consulted.
    """

    def __init__(self, repository: PresentationRepository):
        self.repository = repository

    async def _get_unexpired(self, share_id: str) -> Presentation:
        presentation = await self.repository.get_by_share_id(share_id)
        if presentation is None:
            raise NotFoundError("Presentation not found")
        if is_past(presentation.expires_at):
            logger.info(f"Denied access to expired presentation {mask_identifier(share_id)}")
            raise ForbiddenError("This presentation has expired")
        return presentation

    async def check_access(self, share_id: str) -> AccessCheck:
        """Report whether a password is needed, without exposing anything else."""
        presentation = await self._get_unexpired(share_id)
        return AccessCheck(
            requires_password=bool(presentation.password_hash),
            title=presentation.title,
        )

    async def view(self, share_id: str, password: str | None = None) -> PublicPresentationView:
        """Validate access, count the view and return the sanitized presentation."""
        # Expiry is checked before the password
        presentation = await self._get_unexpired(share_id)

        if presentation.password_hash:
            if not password:
                raise ForbiddenError("This presentation requires a password")
            if not await verify_password_async(password, presentation.password_hash):
                logger.info(f"Incorrect password for presentation {mask_identifier(share_id)}")
                raise ForbiddenError("Incorrect password")

        presentation = await self.repository.record_view(presentation)
        return to_public_view(presentation)
