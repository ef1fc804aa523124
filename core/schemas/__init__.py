"""
Core Schemas Package.

Pydantic models shared across the admin panel.
"""

from core.schemas.auth import AdminProfile, LoginRequest, TokenData
from core.schemas.extension import (
    ConfigField,
    ConfigFieldType,
    ExtensionManifest,
    ManifestError,
    to_specifier_set,
    version_satisfies,
)

__all__ = [
    "AdminProfile",
    "LoginRequest",
    "TokenData",
    "ConfigField",
    "ConfigFieldType",
    "ExtensionManifest",
    "ManifestError",
    "to_specifier_set",
    "version_satisfies",
]
