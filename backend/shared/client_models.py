"""
Client directory models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SocialMedia(BaseModel):
    twitter: str | None = None
    facebook: str | None = None
    instagram: str | None = None
    tiktok: str | None = None


class ClientCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    election_date: str = Field(..., min_length=1)
    campaign_start: str = Field(..., min_length=1)
    image_url: str | None = None
    political_party: str | None = None
    party_logo_url: str | None = None
    color: str | None = None
    social_media: SocialMedia | None = None
    is_active: bool = True


class ClientUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    position: str | None = Field(default=None, min_length=1)
    election_date: str | None = None
    campaign_start: str | None = None
    image_url: str | None = None
    political_party: str | None = None
    party_logo_url: str | None = None
    color: str | None = None
    social_media: SocialMedia | None = None
    is_active: bool | None = None


class ClientResponse(BaseModel):
    id: str
    name: str
    position: str
    election_date: str
    campaign_start: str
    image_url: str | None = None
    political_party: str | None = None
    party_logo_url: str | None = None
    color: str | None = None
    social_media: SocialMedia = SocialMedia()
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ClientPage(BaseModel):
    data: list[ClientResponse]
    pagination: Pagination


class ClientStats(BaseModel):
    total: int
    active: int
    inactive: int
    this_month: int
