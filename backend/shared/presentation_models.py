"""
Presentation models for slide decks, public share views and owner summaries.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from shared.security import check_password_length


SHARE_URL_PREFIX = "/p/"


def build_share_url(share_id: str) -> str:
    """Client-facing path for a share id, distinct from the API prefix."""
    return f"{SHARE_URL_PREFIX}{share_id}"


class PresentationSettings(BaseModel):
    """Viewer settings stored with a presentation."""

    allow_download: bool = False
    show_watermark: bool = True
    auto_play: bool = False
    auto_play_interval: int = Field(default=5, ge=1, description="Seconds between slides")


class PresentationSettingsPatch(BaseModel):
    """Partial settings update; unset keys keep their stored value."""

    allow_download: bool | None = None
    show_watermark: bool | None = None
    auto_play: bool | None = None
    auto_play_interval: int | None = Field(default=None, ge=1)


class SlideInput(BaseModel):
    """Slide submitted with its raw image payload."""

    order: int
    title: str = Field(..., min_length=1)
    image_data: str = Field(..., min_length=1, description="Data URL or bare base64 image")
    metadata: dict[str, Any] | None = None


class PresentationCreateRequest(BaseModel):
    """Request model for creating a presentation."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    slides: list[SlideInput] = []
    is_public: bool = True
    password: str | None = Field(default=None, min_length=1)
    expires_at: datetime | None = None
    client_id: str | None = None
    client_name: str | None = None
    settings: PresentationSettings | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_length(value)


class PresentationUpdateRequest(BaseModel):
    """Partial update; only fields present in the request are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    is_public: bool | None = None
    password: str | None = Field(default=None, min_length=1)
    expires_at: datetime | None = None
    client_id: str | None = None
    client_name: str | None = None
    settings: PresentationSettingsPatch | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_length(value)


class AddSlidesRequest(BaseModel):
    """Request model for appending slides to a presentation."""

    slides: list[SlideInput] = Field(..., min_length=1)


class AccessPresentationRequest(BaseModel):
    """Body of a public view request."""

    password: str | None = None


class PresentationCreated(BaseModel):
    id: str
    share_id: str
    title: str
    share_url: str
    slide_count: int
    created_at: datetime


class PresentationUpdated(BaseModel):
    id: str
    share_id: str
    title: str
    share_url: str


class SlidesAdded(BaseModel):
    id: str
    slide_count: int


class ShareLink(BaseModel):
    share_id: str
    share_url: str


class AccessCheck(BaseModel):
    """Result of checking a share id before viewing."""

    requires_password: bool
    title: str


class PublicSlide(BaseModel):
    """Slide as seen by anonymous viewers."""

    order: int
    title: str
    image_url: str
    thumbnail_url: str | None = None


class PublicPresentationView(BaseModel):
    """Sanitized presentation returned to anonymous viewers."""

    share_id: str
    title: str
    description: str | None = None
    slides: list[PublicSlide]
    owner_name: str | None = None
    client_name: str | None = None
    settings: PresentationSettings
    view_count: int
    created_at: datetime


class SlideDetail(PublicSlide):
    """Slide as seen by its owner."""

    asset_id: str | None = None
    metadata: dict[str, Any] | None = None


class PresentationSummary(BaseModel):
    """Owner listing entry."""

    id: str
    share_id: str
    title: str
    description: str | None = None
    slide_count: int
    thumbnail: str | None = None
    is_public: bool
    has_password: bool
    expires_at: datetime | None = None
    view_count: int
    last_viewed_at: datetime | None = None
    client_name: str | None = None
    share_url: str
    created_at: datetime
    updated_at: datetime | None = None


class PresentationDetail(BaseModel):
    """Full owner view of a presentation. The password hash is never included."""

    id: str
    share_id: str
    share_url: str
    title: str
    description: str | None = None
    slides: list[SlideDetail]
    owner_id: str
    owner_name: str | None = None
    is_public: bool
    has_password: bool
    expires_at: datetime | None = None
    view_count: int
    last_viewed_at: datetime | None = None
    client_id: str | None = None
    client_name: str | None = None
    settings: PresentationSettings
    created_at: datetime
    updated_at: datetime | None = None
