"""Short public identifiers for shared presentations."""

import secrets
import string

SHARE_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
SHARE_ID_LENGTH = 10


def generate_share_id(length: int = SHARE_ID_LENGTH) -> str:
    """Return a random URL-safe identifier.

    No uniqueness guarantee: callers retry on a unique-constraint conflict.
    """
    return "".join(secrets.choice(SHARE_ID_ALPHABET) for _ in range(length))
