"""
Admin Authentication Middleware.

Route-level dependency that validates the Bearer token of an admin request.
Token failures become AdminAuthError, which the app factory renders as a
401 error envelope.
"""

import hashlib
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import ServicesDep
from core.jwt import ConfigError, TokenError, TokenExpiredError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

REVOKED_TOKEN_PREFIX = "passport:revoked:"


class AdminAuthError(Exception):
    """Raised when an admin request cannot be authenticated."""

    def __init__(self, message: str, status_code: int = status.HTTP_401_UNAUTHORIZED) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def revoked_token_key(token: str) -> str:
    """Cache key marking a token as logged out."""
    return REVOKED_TOKEN_PREFIX + hashlib.sha256(token.encode("utf-8")).hexdigest()


async def authenticate(
    request: Request,
    services: ServicesDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Dict[str, Any]:
    """
    Validate the Bearer token and expose its claims.

    Stores the claims on ``request.state.admin_claims`` and the raw token on
    ``request.state.admin_token``.

    Raises:
        AdminAuthError: 401 for missing, invalid, expired or revoked tokens;
            500 if the JWT configuration is broken.
    """
    if credentials is None or not credentials.credentials:
        raise AdminAuthError("token 不能为空")

    token = credentials.credentials
    if services.cache.has(revoked_token_key(token)):
        raise AdminAuthError("token 已失效")

    try:
        claims = services.jwt.validate(token)
    except TokenExpiredError:
        raise AdminAuthError("token 已过期")
    except TokenError as e:
        logger.warning(f"Rejected admin token on {request.url.path}: {type(e).__name__}: {e}")
        raise AdminAuthError("token 错误")
    except ConfigError as e:
        logger.error(f"JWT configuration error while validating token: {e}")
        raise AdminAuthError("JWT 配置错误", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    request.state.admin_claims = claims
    request.state.admin_token = token
    return claims


AdminClaimsDep = Annotated[Dict[str, Any], Depends(authenticate)]
