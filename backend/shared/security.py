"""
Password hashing helpers backed by bcrypt.

Used for user login passwords and presentation access passwords. The async
variants run bcrypt in a worker thread so the event loop is not blocked.
"""

import asyncio

import bcrypt

from shared.errors import BadRequestError

BCRYPT_ROUNDS = 10
# bcrypt rejects input longer than 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_length(plain_password: str | None) -> str | None:
    """Pydantic validator body: reject passwords bcrypt cannot hash."""
    if plain_password is not None and len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return plain_password


def hash_password(plain_password: str) -> str:
    """Hash a password with a fresh salt."""
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password_async(plain_password: str) -> str:
    return await asyncio.to_thread(hash_password, plain_password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)
