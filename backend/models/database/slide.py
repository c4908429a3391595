"""
Slide model - one ordered image inside a presentation
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base


class Slide(Base):
    """Slide image and its Image Store references"""

    __tablename__ = "presentation_slides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    presentation_id = Column(
        String(36), ForeignKey("presentations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order = Column("order", Integer, nullable=False)
    title = Column(String(500), nullable=False)
    image_url = Column(String(1000), nullable=False)
    thumbnail_url = Column(String(1000), nullable=True)
    asset_id = Column(String(64), nullable=True)
    slide_metadata = Column("metadata", JSON, nullable=True)

    # Relationships
    presentation = relationship("Presentation", back_populates="slides")
