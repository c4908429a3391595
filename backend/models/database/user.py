"""
User model - Authentication and user management
"""

from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from database import Base
from shared.time_utils import utcnow


class User(Base):
    """User account model"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="user")
    permissions = Column(JSON, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    avatar = Column(String(1000), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
