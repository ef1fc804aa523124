"""
Admin account credentials.

The panel has a single configured administrator; the password is stored as a
bcrypt hash in ADMIN_PASSWORD_HASH.
"""

import hmac
import logging
from dataclasses import dataclass

import bcrypt

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        logger.error(f"Stored admin password hash is invalid: {e}")
        return False


@dataclass(frozen=True)
class AdminAccount:
    """The configured administrator."""

    username: str
    password_hash: str

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password_hash)

    def check(self, username: str, password: str) -> bool:
        """Check submitted credentials."""
        if not self.enabled:
            return False
        same_user = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        # Always run bcrypt so timing does not reveal the username
        password_ok = verify_password(password, self.password_hash)
        return same_user and password_ok
