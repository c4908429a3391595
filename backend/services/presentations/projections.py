"""Map presentation rows to API models.

Every projection leaves out ``password_hash``; owners only ever see
``has_password``.
"""

from models.database import Presentation, Slide
from shared.presentation_models import (
    PresentationCreated,
    PresentationDetail,
    PresentationSettings,
    PresentationSummary,
    PresentationUpdated,
    PublicPresentationView,
    PublicSlide,
    ShareLink,
    SlideDetail,
    SlidesAdded,
    build_share_url,
)
from shared.time_utils import ensure_utc


def settings_of(presentation: Presentation) -> PresentationSettings:
    return PresentationSettings.model_validate(presentation.settings or {})


def public_slide(slide: Slide) -> PublicSlide:
    return PublicSlide(
        order=slide.order,
        title=slide.title,
        image_url=slide.image_url,
        thumbnail_url=slide.thumbnail_url,
    )


def slide_detail(slide: Slide) -> SlideDetail:
    return SlideDetail(
        order=slide.order,
        title=slide.title,
        image_url=slide.image_url,
        thumbnail_url=slide.thumbnail_url,
        asset_id=slide.asset_id,
        metadata=slide.slide_metadata,
    )


def to_public_view(presentation: Presentation) -> PublicPresentationView:
    return PublicPresentationView(
        share_id=presentation.share_id,
        title=presentation.title,
        description=presentation.description,
        slides=[public_slide(slide) for slide in presentation.slides],
        owner_name=presentation.owner_name,
        client_name=presentation.client_name,
        settings=settings_of(presentation),
        view_count=presentation.view_count,
        created_at=ensure_utc(presentation.created_at),
    )


def to_summary(presentation: Presentation) -> PresentationSummary:
    slides = presentation.slides
    return PresentationSummary(
        id=presentation.id,
        share_id=presentation.share_id,
        title=presentation.title,
        description=presentation.description,
        slide_count=len(slides),
        thumbnail=slides[0].thumbnail_url if slides else None,
        is_public=presentation.is_public,
        has_password=bool(presentation.password_hash),
        expires_at=ensure_utc(presentation.expires_at),
        view_count=presentation.view_count,
        last_viewed_at=ensure_utc(presentation.last_viewed_at),
        client_name=presentation.client_name,
        share_url=build_share_url(presentation.share_id),
        created_at=ensure_utc(presentation.created_at),
        updated_at=ensure_utc(presentation.updated_at),
    )


def to_detail(presentation: Presentation) -> PresentationDetail:
    return PresentationDetail(
        id=presentation.id,
        share_id=presentation.share_id,
        share_url=build_share_url(presentation.share_id),
        title=presentation.title,
        description=presentation.description,
        slides=[slide_detail(slide) for slide in presentation.slides],
        owner_id=presentation.owner_id,
        owner_name=presentation.owner_name,
        is_public=presentation.is_public,
        has_password=bool(presentation.password_hash),
        expires_at=ensure_utc(presentation.expires_at),
        view_count=presentation.view_count,
        last_viewed_at=ensure_utc(presentation.last_viewed_at),
        client_id=presentation.client_id,
        client_name=presentation.client_name,
        settings=settings_of(presentation),
        created_at=ensure_utc(presentation.created_at),
        updated_at=ensure_utc(presentation.updated_at),
    )


def to_created(presentation: Presentation) -> PresentationCreated:
    return PresentationCreated(
        id=presentation.id,
        share_id=presentation.share_id,
        title=presentation.title,
        share_url=build_share_url(presentation.share_id),
        slide_count=len(presentation.slides),
        created_at=ensure_utc(presentation.created_at),
    )


def to_updated(presentation: Presentation) -> PresentationUpdated:
    return PresentationUpdated(
        id=presentation.id,
        share_id=presentation.share_id,
        title=presentation.title,
        share_url=build_share_url(presentation.share_id),
    )


def to_slides_added(presentation: Presentation) -> SlidesAdded:
    return SlidesAdded(id=presentation.id, slide_count=len(presentation.slides))


def to_share_link(presentation: Presentation) -> ShareLink:
    return ShareLink(share_id=presentation.share_id, share_url=build_share_url(presentation.share_id))
