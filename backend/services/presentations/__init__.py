"""Presentation sharing service.

This service handles:
- Creating presentations from uploaded slide images
- Public access by share id with optional password and expiry
- View counting
- Owner edits, share link regeneration and deletion with asset cleanup
"""

__version__ = "1.0.0"
