"""
Database models package - SQLAlchemy ORM models
"""

from .client import Client
from .presentation import Presentation
from .slide import Slide
from .user import User

__all__ = [
    "Client",
    "Presentation",
    "Slide",
    "User",
]
