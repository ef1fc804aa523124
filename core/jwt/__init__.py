"""
JWT credential service.

Issues and validates signed admin tokens from an immutable JwtConfig.
"""

from core.jwt.config import (
    ASYMMETRIC_ALGORITHMS,
    SUPPORTED_ALGORITHMS,
    SYMMETRIC_ALGORITHMS,
    JwtConfig,
    SignerType,
)
from core.jwt.exceptions import (
    ConfigError,
    InvalidClaimError,
    JwtError,
    MalformedTokenError,
    SignatureInvalidError,
    SigningError,
    TokenError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from core.jwt.service import JwtService

__all__ = [
    "ASYMMETRIC_ALGORITHMS",
    "SUPPORTED_ALGORITHMS",
    "SYMMETRIC_ALGORITHMS",
    "JwtConfig",
    "SignerType",
    "JwtService",
    "JwtError",
    "ConfigError",
    "SigningError",
    "TokenError",
    "MalformedTokenError",
    "SignatureInvalidError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "InvalidClaimError",
]
