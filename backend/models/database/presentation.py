"""
Presentation model - shareable slide decks
"""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base
from shared.time_utils import utcnow


class Presentation(Base):
    """Presentation shared through a public share id"""

    __tablename__ = "presentations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    share_id = Column(String(32), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Owner name and client name are snapshots taken at write time
    owner_id = Column(String(36), nullable=False, index=True)
    owner_name = Column(String(255), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    password_hash = Column(String(255), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    last_viewed_at = Column(DateTime(timezone=True), nullable=True)
    client_id = Column(String(36), nullable=True)
    client_name = Column(String(255), nullable=True)
    settings = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    slides = relationship(
        "Slide",
        back_populates="presentation",
        cascade="all, delete-orphan",
        order_by="[Slide.order, Slide.id]",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Presentation(id={self.id}, share_id={self.share_id}, title={self.title})>"
