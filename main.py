"""
Larke Admin - Entry Point.

ASGI application for uvicorn execution.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000 --reload

Or run directly:
    python main.py
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from core.app_context import AppContext
from core.logging_config import setup_logging
from core.providers import AdminServices, ServiceProvider
from core.server import create_base_app


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------


def create_services(context: AppContext) -> AdminServices:
    """Register services and boot extensions."""
    provider = ServiceProvider(context)
    services = provider.register()
    started = provider.boot(services)
    context.log_event(f"Started {len(started)} extension(s): {', '.join(started) or '-'}", "LOADER")
    return services


def create_fastapi_app(services: AdminServices) -> FastAPI:
    """Create the FastAPI application with lifespan management."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger = logging.getLogger(__name__)
        logger.info("Starting Larke Admin...")
        services.context.log_event("Application started successfully", "SUCCESS")

        yield

        logger.info("Shutting down Larke Admin...")
        services.extensions.shutdown_all()
        services.cache.clear()
        logger.info("Cleanup complete")

    app = create_base_app(services)
    app.router.lifespan_context = lifespan
    return app


# -----------------------------------------------------------------------------
# Module-level Application Instance
# -----------------------------------------------------------------------------

_context = AppContext()
setup_logging(_context.config.get("app.log_level", "INFO"))

_services = create_services(_context)

# Export for uvicorn
app = create_fastapi_app(_services)


# -----------------------------------------------------------------------------
# Direct Execution
# -----------------------------------------------------------------------------


def main() -> None:
    """Run the application directly with uvicorn."""
    host = _context.config.get("server.host", "127.0.0.1")
    port = _context.config.get("server.port", 8000)
    debug = _context.config.get("app.debug", False)

    uvicorn_config = {
        "host": host,
        "port": port,
        "reload": debug,
        "log_level": "warning",
        "access_log": False,
    }

    if debug:
        uvicorn_config["reload_excludes"] = [
            "logs/*",
            "**/__pycache__/*",
            "**/*.pyc",
            ".venv/*",
            "*.log",
        ]

    uvicorn.run("main:app", **uvicorn_config)


if __name__ == "__main__":
    main()
