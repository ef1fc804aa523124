"""
Admin Request Log Middleware.

Records which admin called which endpoint, in the application log and the
AppContext event log.
"""

from fastapi import Request

from core.dependencies import ServicesDep


async def log_request(request: Request, services: ServicesDep) -> None:
    """Log the method, path and admin id of an authenticated request."""
    claims = getattr(request.state, "admin_claims", None) or {}
    adminid = claims.get("adminid", "-")
    client = request.client.host if request.client else "-"
    services.context.log_event(
        f"{request.method} {request.url.path} admin={adminid} ip={client}",
        "ADMIN",
    )
