"""
Core middleware package.

Route middleware is expressed as FastAPI dependencies registered under alias
names, plus named groups of aliases, so routers can declare:

    router = APIRouter(dependencies=middleware("larke.admin"))
"""

from typing import Callable, Dict, List

from fastapi import Depends
from fastapi.params import Depends as DependsParam

from core.middleware.admin_log import log_request
from core.middleware.auth import (
    AdminAuthError,
    AdminClaimsDep,
    authenticate,
    revoked_token_key,
)

ROUTE_MIDDLEWARE: Dict[str, Callable] = {
    "larke.admin.auth": authenticate,
    "larke.admin.log": log_request,
}

MIDDLEWARE_GROUPS: Dict[str, List[str]] = {
    "larke.admin": [
        "larke.admin.auth",
        "larke.admin.log",
    ],
}


def middleware(*names: str) -> List[DependsParam]:
    """
    Resolve middleware aliases and groups into router dependencies.

    Raises:
        KeyError: If a name is neither an alias nor a group.
    """
    resolved: List[Callable] = []
    for name in names:
        if name in MIDDLEWARE_GROUPS:
            aliases = MIDDLEWARE_GROUPS[name]
        elif name in ROUTE_MIDDLEWARE:
            aliases = [name]
        else:
            raise KeyError(f"Unknown middleware '{name}'")
        for alias in aliases:
            dependency = ROUTE_MIDDLEWARE[alias]
            if dependency not in resolved:
                resolved.append(dependency)
    return [Depends(dependency) for dependency in resolved]


__all__ = [
    "AdminAuthError",
    "AdminClaimsDep",
    "MIDDLEWARE_GROUPS",
    "ROUTE_MIDDLEWARE",
    "authenticate",
    "log_request",
    "middleware",
    "revoked_token_key",
]
