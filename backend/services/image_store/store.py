"""Filesystem-backed image storage with thumbnail generation."""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import re
from pathlib import Path
from uuid import uuid4

from fastapi import Request
from PIL import Image, ImageOps
from pydantic import BaseModel

from shared.config import ServiceConfig, config as service_config
from shared.errors import BadRequestError
from shared.file_utils import ensure_directory, remove_if_exists, sanitize_filename, sanitize_namespace
from shared.logging_utils import setup_logging
from shared.upload_models import StoredImage

logger = setup_logging("image-store")

DATA_URL_PATTERN = re.compile(r"^data:image/(\w+);base64,(.+)$", re.DOTALL)
SUPPORTED_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "gif")
DEFAULT_EXTENSION = "png"
DEFAULT_DIMENSIONS = (1920, 1080)
THUMBNAIL_DIR = "thumbnails"
PIL_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG", "webp": "WEBP", "gif": "GIF"}


class ImageStoreSettings(BaseModel):
    """Where images live on disk and how they are addressed."""

    root: Path
    base_url: str
    url_prefix: str = "/uploads"
    default_namespace: str = "slides"
    thumbnail_width: int = 300
    thumbnail_height: int = 169

    @classmethod
    def from_config(cls, source: ServiceConfig = service_config) -> "ImageStoreSettings":
        return cls(
            root=Path(source.get("media_root", "./uploads")),
            base_url=source.get("base_url", "http://localhost:8000"),
            thumbnail_width=int(source.get_file_value("image_store.thumbnail_width", 300)),
            thumbnail_height=int(source.get_file_value("image_store.thumbnail_height", 169)),
        )


def decode_image_payload(encoded_image: str) -> tuple[bytes, str]:
    """Split an image payload into raw bytes and a file extension.

    Accepts ``data:image/<format>;base64,<payload>`` or bare base64, which is
    treated as PNG.
    """
    if encoded_image.startswith("data:"):
        match = DATA_URL_PATTERN.match(encoded_image)
        if not match:
            raise BadRequestError("Invalid image format")
        image_format = match.group(1).lower()
        extension = "jpg" if image_format == "jpeg" else image_format
        payload = match.group(2)
    else:
        extension = DEFAULT_EXTENSION
        payload = encoded_image

    if extension not in SUPPORTED_EXTENSIONS:
        raise BadRequestError(f"Unsupported image format: {extension}")

    try:
        data = base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadRequestError("Image payload is not valid base64") from exc
    if not data:
        raise BadRequestError("Image payload is empty")
    return data, extension


class ImageStore:
    """Persist slide images and their thumbnails under generated asset ids."""

    def __init__(self, settings: ImageStoreSettings) -> None:
        self.settings = settings
        self.root = Path(settings.root)

    @classmethod
    def from_config(cls, source: ServiceConfig = service_config) -> "ImageStore":
        return cls(ImageStoreSettings.from_config(source))

    def _namespace(self, namespace: str | None) -> str:
        return sanitize_namespace(namespace or "") or self.settings.default_namespace

    def path_for(self, relative_path: str) -> Path:
        return self.root / relative_path

    def url_for(self, relative_path: str) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}{self.settings.url_prefix}/{relative_path}"

    async def store(self, encoded_image: str, namespace: str | None = None) -> StoredImage:
        """Store an encoded image and a thumbnail derived from it."""
        data, extension = decode_image_payload(encoded_image)
        folder = self._namespace(namespace)
        asset_id = str(uuid4())

        original_relative = f"{folder}/{asset_id}.{extension}"
        thumbnail_relative = f"{THUMBNAIL_DIR}/{asset_id}_thumb.{extension}"

        original_path = self.path_for(original_relative)
        await asyncio.to_thread(self._write_file, original_path, data)
        try:
            width, height = await asyncio.to_thread(
                self._write_thumbnail, data, extension, self.path_for(thumbnail_relative)
            )
        except Exception:
            # No orphaned original when the thumbnail cannot be written
            await asyncio.to_thread(remove_if_exists, original_path)
            raise

        logger.info(f"Stored image {asset_id} in {folder} ({width}x{height})")
        return StoredImage(
            url=self.url_for(original_relative),
            thumbnail_url=self.url_for(thumbnail_relative),
            asset_id=asset_id,
            width=width,
            height=height,
        )

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        ensure_directory(path.parent)
        path.write_bytes(data)

    def _write_thumbnail(self, data: bytes, extension: str, path: Path) -> tuple[int, int]:
        ensure_directory(path.parent)
        width, height = DEFAULT_DIMENSIONS
        try:
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                thumbnail = ImageOps.fit(
                    image,
                    (self.settings.thumbnail_width, self.settings.thumbnail_height),
                    method=Image.Resampling.LANCZOS,
                )
                image_format = PIL_FORMATS[extension]
                if image_format == "JPEG" and thumbnail.mode not in ("RGB", "L"):
                    thumbnail = thumbnail.convert("RGB")
                thumbnail.save(path, format=image_format)
        except Exception as exc:  # Pillow raises many error types for unreadable input
            logger.warning(f"Thumbnail generation failed, storing original instead: {exc}")
            path.write_bytes(data)
        return width, height

    async def delete(self, asset_id: str, namespace: str | None = None) -> bool:
        """Remove an image and its thumbnail. Never raises; returns False on failure."""
        if not asset_id or sanitize_filename(asset_id) != asset_id or asset_id in {".", ".."}:
            logger.warning(f"Refusing to delete invalid asset id {asset_id!r}")
            return False
        try:
            removed = await asyncio.to_thread(self._remove_files, asset_id, self._namespace(namespace))
        except OSError as exc:
            logger.error(f"Error deleting image {asset_id}: {exc}")
            return False
        if not removed:
            logger.debug(f"No stored files found for asset {asset_id}")
        return True

    def _remove_files(self, asset_id: str, folder: str) -> int:
        removed = 0
        for extension in SUPPORTED_EXTENSIONS:
            removed += remove_if_exists(self.path_for(f"{folder}/{asset_id}.{extension}"))
            removed += remove_if_exists(self.path_for(f"{THUMBNAIL_DIR}/{asset_id}_thumb.{extension}"))
        return removed

    async def delete_many(self, asset_ids: list[str], namespace: str | None = None) -> list[str]:
        """Delete assets one after another. Returns the ids that failed."""
        failed: list[str] = []
        for asset_id in asset_ids:
            if not await self.delete(asset_id, namespace):
                failed.append(asset_id)
        return failed


def get_image_store(request: Request) -> ImageStore:
    """FastAPI dependency returning the store created at startup."""
    return request.app.state.image_store
