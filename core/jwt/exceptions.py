"""
JWT Exceptions.

Typed, recoverable errors raised by the JWT credential service.
Callers (the authentication dependency) decide how to answer the request.
"""


class JwtError(Exception):
    """Base exception for all JWT errors."""
    pass


class ConfigError(JwtError):
    """Raised when the JWT configuration is incomplete or invalid."""
    pass


class SigningError(JwtError):
    """Raised when the signing primitive rejects the key material."""
    pass


class TokenError(JwtError):
    """Base exception for tokens that fail validation."""
    pass


class MalformedTokenError(TokenError):
    """Raised when a token cannot be parsed into header.payload.signature."""
    pass


class SignatureInvalidError(TokenError):
    """Raised when the token signature does not verify."""
    pass


class TokenExpiredError(TokenError):
    """Raised when the current time is past the token's exp claim."""
    pass


class TokenNotYetValidError(TokenError):
    """Raised when the current time is before the token's nbf claim."""
    pass


class InvalidClaimError(TokenError):
    """Raised when iss or aud do not match the configured values."""
    pass
