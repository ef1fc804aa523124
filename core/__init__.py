"""Core module - Admin kernel components."""

__version__ = "1.0.3"

from core.app_context import AppContext, ConfigLoader
from core.interface import ExtensionServiceProvider
from core.logging_config import setup_logging
from core.registry import ExtensionLoader, ExtensionRegistry
from core.providers import AdminServices, ServiceProvider

__all__ = [
    "__version__",
    "AppContext", "ConfigLoader",
    "ExtensionServiceProvider",
    "ExtensionLoader", "ExtensionRegistry",
    "AdminServices", "ServiceProvider",
    "setup_logging",
]
