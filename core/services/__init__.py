"""
Core Services Package.

Framework-level services shared by the admin routers and extensions.
"""

from core.services.admin import AdminAccount, hash_password, verify_password
from core.services.cache import CacheService

__all__ = ["AdminAccount", "CacheService", "hash_password", "verify_password"]
