"""
ExtensionServiceProvider - Abstract base class for all admin extensions.

An extension declares a static ``info`` manifest and implements ``start()``,
which runs once when the registry boots it.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from core.schemas.extension import ExtensionManifest

if TYPE_CHECKING:
    from fastapi import APIRouter

    from core.app_context import AppContext
    from core.console import Command


class ExtensionServiceProvider(ABC):
    """
    Abstract interface for pluggable admin extensions.

    Subclasses set ``info`` to the raw manifest dict, for example::

        info = {
            "name": "Demo",
            "title": "示例扩展",
            "version": "1.0.1",
            "adaptation": "1.0.*",
            "config": [...],
        }
    """

    info: Dict[str, Any] = {}

    def __init__(self) -> None:
        self._manifest: Optional[ExtensionManifest] = None
        self._commands: List[Type["Command"]] = []

    def get_manifest(self) -> ExtensionManifest:
        """
        Return the validated manifest.

        Raises:
            ManifestError: If ``info`` is not a valid manifest.
        """
        if self._manifest is None:
            self._manifest = ExtensionManifest.from_info(self.info)
        return self._manifest

    def get_extension_name(self) -> str:
        """Unique identifier used for registry lookup."""
        return str(self.info.get("name", ""))

    @abstractmethod
    def start(self, context: "AppContext") -> None:
        """
        Called once when the extension is booted.

        Args:
            context: The application context
        """
        pass

    def commands(self, commands: List[Type["Command"]]) -> None:
        """Queue console command classes for registration."""
        for command in commands:
            if command not in self._commands:
                self._commands.append(command)

    def get_commands(self) -> List[Type["Command"]]:
        """Console commands queued by ``start()``."""
        return list(self._commands)

    def get_api_router(self) -> Optional["APIRouter"]:
        """Override to expose routes under the admin API."""
        return None

    def on_shutdown(self) -> None:
        """
        Called when the extension is being unloaded.
        Override for cleanup logic.
        """
        pass
