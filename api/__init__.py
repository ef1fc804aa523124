"""Admin API routers."""

from api.extension import router as extension_router
from api.passport import router as passport_router

__all__ = ["extension_router", "passport_router"]
