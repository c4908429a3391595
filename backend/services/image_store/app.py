"""Direct image upload API."""

import asyncio

from fastapi import APIRouter, Depends

from services.auth import get_current_user
from services.image_store.store import ImageStore, get_image_store
from shared.auth_models import AuthenticatedUser
from shared.errors import BadRequestError
from shared.logging_utils import setup_logging
from shared.response_models import APIResponse
from shared.upload_models import OrderedStoredImage, UploadBase64Request, UploadMultipleRequest

logger = setup_logging("upload-service")

router = APIRouter(prefix="/upload", tags=["Uploads"])


def user_folder(current_user: AuthenticatedUser, folder: str | None) -> str:
    return folder or f"users/{current_user.user_id}"


@router.post("/base64", response_model=APIResponse, summary="Upload Base64 Image")
async def upload_base64(
    request: UploadBase64Request,
    current_user: AuthenticatedUser = Depends(get_current_user),
    image_store: ImageStore = Depends(get_image_store),
) -> APIResponse:
    """Store a single data URL or bare base64 image."""
    if not request.image:
        raise BadRequestError("No image provided")

    stored = await image_store.store(request.image, user_folder(current_user, request.folder))
    return APIResponse(message="Image uploaded", data=stored)


@router.post("/base64/multiple", response_model=APIResponse, summary="Upload Multiple Base64 Images")
async def upload_multiple(
    request: UploadMultipleRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    image_store: ImageStore = Depends(get_image_store),
) -> APIResponse:
    """Store several images concurrently; results come back sorted by order."""
    if not request.images:
        raise BadRequestError("No images provided")

    folder = user_folder(current_user, request.folder)
    stored = await asyncio.gather(
        *(image_store.store(image.base64, folder) for image in request.images),
        return_exceptions=True,
    )
    errors = [result for result in stored if isinstance(result, BaseException)]
    if errors:
        await image_store.delete_many(
            [result.asset_id for result in stored if not isinstance(result, BaseException)], folder
        )
        raise errors[0]

    results = [
        OrderedStoredImage(order=image.order, **result.model_dump())
        for image, result in zip(request.images, stored)
    ]
    results.sort(key=lambda item: item.order)
    logger.info(f"Uploaded {len(results)} images to {folder}")
    return APIResponse(message="Images uploaded", data=results)
