"""
Client model - client directory entries presentations can be linked to
"""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from database import Base
from shared.time_utils import utcnow


class Client(Base):
    """Client directory record"""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False, index=True)
    position = Column(String(255), nullable=False)
    election_date = Column(String(32), nullable=False)
    campaign_start = Column(String(32), nullable=False)
    image_url = Column(String(1000), nullable=True)
    political_party = Column(String(255), nullable=True)
    party_logo_url = Column(String(1000), nullable=True)
    color = Column(String(32), nullable=True)
    social_media = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
