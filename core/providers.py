"""
Service Provider - Builds and wires the admin services.

Every service is constructed once from configuration by ``register()`` and
handed around explicitly through an AdminServices bundle: the FastAPI app
keeps it on ``app.state.services`` and console commands receive it as an
argument. Nothing here is looked up from module-level globals.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from core.app_context import AppContext, ConfigLoader
from core.console import BUILTIN_COMMANDS, CommandRegistry
from core.http.response import JsonResponder, ResponseConfig
from core.jwt import ConfigError, JwtConfig, JwtService
from core.registry import ExtensionLoader, ExtensionRegistry
from core.services.admin import AdminAccount
from core.services.cache import CacheService

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@dataclass
class AdminServices:
    """Services shared by routers, middleware and console commands."""

    context: AppContext
    jwt: JwtService
    responder: JsonResponder
    cache: CacheService
    admin: AdminAccount
    extensions: ExtensionRegistry
    commands: CommandRegistry

    @property
    def config(self) -> ConfigLoader:
        return self.context.config


class ServiceProvider:
    """
    Registers the admin services and boots extensions.

    Usage:
        provider = ServiceProvider(context)
        services = provider.register()
        provider.boot(services)
    """

    def __init__(self, context: AppContext) -> None:
        self._context = context

    def register(self) -> AdminServices:
        """
        Build every service from configuration.

        Raises:
            ConfigError: If the jwt section cannot be turned into a JwtConfig.
        """
        config = self._context.config

        try:
            jwt_config = JwtConfig.from_mapping(config.get("jwt", {}))
        except ConfigError as e:
            logger.error(f"Invalid JWT configuration: {e}")
            raise
        if not config.is_jwt_configured():
            logger.warning("JWT key material is not configured; token operations will fail.")

        commands = CommandRegistry()
        commands.register_many(BUILTIN_COMMANDS)

        services = AdminServices(
            context=self._context,
            jwt=JwtService(jwt_config),
            responder=JsonResponder(ResponseConfig.from_mapping(config.get("response.json", {}))),
            cache=CacheService(),
            admin=AdminAccount(
                username=config.get("admin.username", ""),
                password_hash=config.get("admin.password_hash", ""),
            ),
            extensions=ExtensionRegistry(),
            commands=commands,
        )
        self._context.log_event(
            f"Services registered (jwt alg={jwt_config.alg}, signer={jwt_config.signer_type})",
            "PROVIDER",
        )
        return services

    def boot(self, services: AdminServices, extension_dir: Optional[str] = None) -> list[str]:
        """
        Load extensions from disk, start them and register their commands.

        Args:
            services: The bundle returned by ``register()``.
            extension_dir: Directory to scan; defaults to ``extension.dir``
                resolved against the project root.

        Returns:
            list[str]: Names of the extensions started.
        """
        if extension_dir is None:
            configured = Path(self._context.config.get("extension.dir", "extensions"))
            extension_dir = str(configured if configured.is_absolute() else PROJECT_ROOT / configured)

        count = ExtensionLoader(services.extensions).load_from_directory(extension_dir)
        self._context.log_event(f"Loaded {count} extension(s) from {extension_dir}", "LOADER")

        started = services.extensions.boot(self._context)
        services.commands.register_many(services.extensions.get_commands())
        return started
