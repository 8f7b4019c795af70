"""Admin credential hashing.

``AdminService`` hashes the password on create, update and password change
and checks ``currentPassword`` against the stored hash. Plaintext is never
persisted or logged.
"""

import logging

import bcrypt

from shopcart.core.config import settings

logger = logging.getLogger(__name__)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a submitted admin password against ``User.password_hash``.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError as e:
        logger.warning(f"Stored admin password hash is malformed: {e}")
        return False


def get_password_hash(password: str) -> str:
    """bcrypt hash with the cost from ``settings.password_hash_rounds``."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.password_hash_rounds),
    ).decode("utf-8")
