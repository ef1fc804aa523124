"""
FastAPI Application Factory.

Creates and configures the FastAPI application with the admin routers,
route middleware error handling, CORS and optional HTTPS enforcement.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware

from core import __version__
from core.middleware import AdminAuthError, middleware
from core.providers import AdminServices

_logger = logging.getLogger(__name__)


def create_base_app(
    services: AdminServices,
    title: str = "Larke Admin API",
    description: str = "Admin panel API with JWT authentication and extensions",
    version: str = __version__,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        services: Service bundle built by ServiceProvider.register().
        title: API title for OpenAPI documentation.
        description: API description for OpenAPI documentation.
        version: API version string.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(title=title, description=description, version=version)

    # Store references in app state for access in route handlers
    app.state.services = services

    config = services.config

    if config.get("app.https", False):
        app.add_middleware(HTTPSRedirectMiddleware)
        _logger.info("HTTPS enforced: plain HTTP requests are redirected")

    response_config = services.responder.config
    if response_config.is_allow_origin:
        origins = [o.strip() for o in response_config.allow_origin.split(",") if o.strip()]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=response_config.allow_credentials,
            allow_methods=[m.strip() for m in response_config.allow_methods.split(",") if m.strip()],
            allow_headers=[h.strip() for h in response_config.allow_headers.split(",") if h.strip()],
            max_age=int(response_config.max_age) if response_config.max_age.isdigit() else 600,
        )
        _logger.info(f"CORS configured with origin(s): {origins}")

    @app.exception_handler(AdminAuthError)
    async def admin_auth_error_handler(request: Request, exc: AdminAuthError):
        return services.responder.error(
            exc.message, code=exc.status_code, status_code=exc.status_code)

    _register_core_routes(app)
    _register_extension_routes(app, services)

    return app


def _register_core_routes(app: FastAPI) -> None:
    """Register health check and the admin routers."""
    from api.extension import router as extension_router
    from api.passport import router as passport_router

    app.include_router(passport_router)
    app.include_router(extension_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "Larke Admin", "version": __version__}


def _register_extension_routes(app: FastAPI, services: AdminServices) -> None:
    """Mount routers exposed by booted extensions behind the admin middleware."""
    registry = services.extensions
    for name in registry.get_extension_names():
        if not registry.is_booted(name):
            continue
        router = registry.get_extension(name).get_api_router()
        if router is None:
            continue
        app.include_router(router, dependencies=middleware("larke.admin"))
        services.context.log_event(f"Registered API router for extension: {name}", "LOADER")
