"""
Admin Passport API.

Login issues a JWT for the configured administrator, logout revokes it and
profile returns the claims of the current token.
"""

import logging

from fastapi import APIRouter, Request, status

from core.dependencies import ServicesDep
from core.jwt import JwtError
from core.middleware import AdminClaimsDep, middleware, revoked_token_key
from core.schemas.auth import AdminProfile, LoginRequest, TokenData

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/passport", tags=["Admin Passport"])


@router.post("/login")
def login(payload: LoginRequest, services: ServicesDep):
    """
    Authenticate the administrator and issue an access token.

    Wrong credentials answer with an error envelope (code 1) and HTTP 200,
    the same as any other business error of the panel.
    """
    responder = services.responder

    if not services.admin.enabled:
        logger.warning("Login attempted but ADMIN_PASSWORD_HASH is not configured")
        return responder.error("管理员账号未配置")

    if not services.admin.check(payload.username, payload.password):
        logger.info(f"Failed admin login for '{payload.username}'")
        return responder.error("账号或者密码错误")

    try:
        token = services.jwt.issue({"adminid": payload.username})
    except JwtError as e:
        logger.error(f"Token issuance failed: {type(e).__name__}: {e}")
        return responder.error(
            "登录失败", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    services.context.log_event(f"Admin '{payload.username}' logged in", "PASSPORT")
    data = TokenData(access_token=token, expires_in=services.jwt.config.exptime)
    return responder.success("登录成功", data.model_dump())


@router.post("/logout", dependencies=middleware("larke.admin"))
async def logout(request: Request, claims: AdminClaimsDep, services: ServicesDep):
    """Revoke the current token until it would have expired."""
    token = request.state.admin_token
    ttl = max(int(claims["exp"]) - services.jwt.now(), 0) + 1
    services.cache.set(revoked_token_key(token), claims.get("jti", ""), ttl=ttl)

    services.context.log_event(f"Admin '{claims.get('adminid', '-')}' logged out", "PASSPORT")
    return services.responder.success("退出成功")


@router.get("/profile", dependencies=middleware("larke.admin"))
async def profile(claims: AdminClaimsDep, services: ServicesDep):
    """Claims of the authenticated admin."""
    data = AdminProfile(adminid=str(claims.get("adminid", "")), claims=claims)
    return services.responder.success(data=data.model_dump())
