"""
Timezone helpers.

All timestamps are stored timezone-aware in UTC. SQLite drops tzinfo on the
way back, so values read from it are normalised with ``ensure_utc``.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_past(value: datetime | None, now: datetime | None = None) -> bool:
    """True when ``value`` is set and lies strictly before ``now``."""
    if value is None:
        return False
    return ensure_utc(value) < (now or utcnow())
