"""
Image upload models.
"""

from pydantic import BaseModel, Field


class StoredImage(BaseModel):
    """Result of persisting an image in the Image Store."""

    url: str
    thumbnail_url: str
    asset_id: str
    width: int
    height: int


class OrderedStoredImage(StoredImage):
    order: int


class UploadBase64Request(BaseModel):
    image: str = Field(default="", description="Data URL or bare base64 image")
    folder: str | None = None


class OrderedImage(BaseModel):
    base64: str = Field(..., min_length=1)
    order: int


class UploadMultipleRequest(BaseModel):
    images: list[OrderedImage] = []
    folder: str | None = None
