"""Presentation sharing API."""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_db
from services.auth import get_current_user
from services.image_store.store import ImageStore, get_image_store
from services.presentations.access import PresentationAccessController
from services.presentations.projections import to_created, to_share_link, to_slides_added, to_updated
from services.presentations.repository import PresentationRepository
from services.presentations.service import PresentationService
from shared.auth_models import AuthenticatedUser
from shared.presentation_models import (
    AccessPresentationRequest,
    AddSlidesRequest,
    PresentationCreateRequest,
    PresentationUpdateRequest,
)
from shared.response_models import APIResponse

router = APIRouter(prefix="/presentations", tags=["Presentations"])


def get_repository(session: AsyncSession = Depends(get_async_db)) -> PresentationRepository:
    return PresentationRepository(session)


def get_presentation_service(
    repository: PresentationRepository = Depends(get_repository),
    image_store: ImageStore = Depends(get_image_store),
) -> PresentationService:
    return PresentationService(repository, image_store)


def get_access_controller(
    repository: PresentationRepository = Depends(get_repository),
) -> PresentationAccessController:
    return PresentationAccessController(repository)


@router.post("", response_model=APIResponse, status_code=201, summary="Create Presentation")
async def create_presentation(
    request: PresentationCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    """Upload the slide images and create a shareable presentation."""
    presentation = await service.create(request, current_user.user_id, current_user.name)
    return APIResponse(message="Presentation created", data=to_created(presentation))


@router.get("/access/{share_id}", response_model=APIResponse, summary="Check Presentation Access")
async def check_access(
    share_id: str,
    controller: PresentationAccessController = Depends(get_access_controller),
) -> APIResponse:
    """Tell a viewer whether the share id needs a password. Does not count a view."""
    return APIResponse(data=await controller.check_access(share_id))


@router.post("/view/{share_id}", response_model=APIResponse, summary="View Presentation")
async def view_presentation(
    share_id: str,
    request: AccessPresentationRequest | None = Body(default=None),
    controller: PresentationAccessController = Depends(get_access_controller),
) -> APIResponse:
    """Return the public view of a presentation and count the view."""
    password = request.password if request else None
    return APIResponse(data=await controller.view(share_id, password))


@router.get("/my", response_model=APIResponse, summary="List My Presentations")
async def list_my_presentations(
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=500),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    result = await service.list_for_owner(current_user.user_id, skip=skip, limit=limit)
    return APIResponse(data=result)


@router.get("/{presentation_id}", response_model=APIResponse, summary="Get Presentation")
async def get_presentation(
    presentation_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    return APIResponse(data=await service.get_detail(presentation_id, current_user.user_id))


@router.put("/{presentation_id}", response_model=APIResponse, summary="Update Presentation")
async def update_presentation(
    presentation_id: str,
    request: PresentationUpdateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    presentation = await service.update(presentation_id, request, current_user.user_id)
    return APIResponse(message="Presentation updated", data=to_updated(presentation))


@router.post("/{presentation_id}/slides", response_model=APIResponse, summary="Add Slides")
async def add_slides(
    presentation_id: str,
    request: AddSlidesRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    presentation = await service.add_slides(presentation_id, request, current_user.user_id)
    return APIResponse(message="Slides added", data=to_slides_added(presentation))


@router.post("/{presentation_id}/regenerate-link", response_model=APIResponse, summary="Regenerate Share Link")
async def regenerate_link(
    presentation_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    """Invalidate the current share link by assigning a new share id."""
    presentation = await service.regenerate_share_link(presentation_id, current_user.user_id)
    return APIResponse(message="Share link regenerated", data=to_share_link(presentation))


@router.delete("/{presentation_id}", response_model=APIResponse, summary="Delete Presentation")
async def delete_presentation(
    presentation_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service),
) -> APIResponse:
    await service.delete(presentation_id, current_user.user_id)
    return APIResponse(message="Presentation deleted")
