"""
FastAPI Dependencies - Dependency Injection for API Routers.

Provides `Annotated[Service, Depends(get_service)]` patterns for
route handlers. All services come from the AdminServices bundle stored on
``app.state.services`` by the app factory.

Usage:
    from core.dependencies import JwtDep, ResponderDep

    @router.get("/items")
    async def get_items(jwt: JwtDep, responder: ResponderDep):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from core.app_context import AppContext
from core.http.response import JsonResponder
from core.jwt import JwtService
from core.providers import AdminServices
from core.registry import ExtensionRegistry
from core.services.cache import CacheService


def get_services(request: Request) -> AdminServices:
    """
    FastAPI dependency for the service bundle.

    Raises:
        RuntimeError: If the app was not built by create_base_app.
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("AdminServices not configured on app.state")
    return services


ServicesDep = Annotated[AdminServices, Depends(get_services)]


def get_context(services: ServicesDep) -> AppContext:
    return services.context


def get_jwt(services: ServicesDep) -> JwtService:
    return services.jwt


def get_responder(services: ServicesDep) -> JsonResponder:
    return services.responder


def get_cache(services: ServicesDep) -> CacheService:
    return services.cache


def get_extensions(services: ServicesDep) -> ExtensionRegistry:
    return services.extensions


ContextDep = Annotated[AppContext, Depends(get_context)]
JwtDep = Annotated[JwtService, Depends(get_jwt)]
ResponderDep = Annotated[JsonResponder, Depends(get_responder)]
CacheDep = Annotated[CacheService, Depends(get_cache)]
ExtensionsDep = Annotated[ExtensionRegistry, Depends(get_extensions)]
