"""
Extension Registry - Registration, dependency resolution and boot of extensions.
"""
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Type
import importlib.util
import logging
import sys

from core import __version__
from core.interface import ExtensionServiceProvider
from core.schemas.extension import ExtensionManifest, ManifestError, version_satisfies

if TYPE_CHECKING:
    from core.app_context import AppContext
    from core.console import Command


class ExtensionRegistry:
    """
    Registry for managing admin extensions.

    Extensions are validated on ``register()`` and started by ``boot()`` in
    dependency order. Extensions whose requirements cannot be met are kept
    registered but never started.
    """

    def __init__(self, host_version: str = __version__) -> None:
        self._host_version = host_version
        self._extensions: Dict[str, ExtensionServiceProvider] = {}
        self._booted: List[str] = []
        self._logger = logging.getLogger(__name__)

    @property
    def host_version(self) -> str:
        return self._host_version

    def register(self, extension: ExtensionServiceProvider) -> bool:
        """
        Register an extension with the registry.

        Args:
            extension: The extension instance to register

        Returns:
            bool: True if registration successful, False otherwise
        """
        try:
            manifest = extension.get_manifest()
        except ManifestError as e:
            self._logger.error(str(e))
            return False

        name = manifest.name
        if name in self._extensions:
            self._logger.warning(f"Extension '{name}' already registered. Skipping.")
            return False

        if not manifest.is_compatible_with(self._host_version):
            self._logger.warning(
                f"Extension '{name}' requires host version '{manifest.adaptation}', "
                f"running {self._host_version}. Skipping."
            )
            return False

        self._extensions[name] = extension
        self._logger.info(f"Extension '{name}' v{manifest.version} registered successfully.")
        return True

    def register_class(self, extension_class: Type[ExtensionServiceProvider]) -> bool:
        """
        Register an extension by its class (instantiates automatically).

        Returns:
            bool: True if registration successful, False otherwise
        """
        try:
            extension = extension_class()
        except Exception as e:
            self._logger.error(f"Failed to instantiate extension class {extension_class.__name__}: {e}")
            return False
        return self.register(extension)

    def unregister(self, name: str) -> bool:
        """
        Unregister an extension, calling its shutdown hook if it was booted.

        Returns:
            bool: True if unregistration successful, False otherwise
        """
        if name not in self._extensions:
            self._logger.warning(f"Extension '{name}' not found in registry.")
            return False

        extension = self._extensions[name]
        if name in self._booted:
            try:
                extension.on_shutdown()
            except Exception as e:
                self._logger.error(f"Error during extension '{name}' shutdown: {e}")
            self._booted.remove(name)

        del self._extensions[name]
        self._logger.info(f"Extension '{name}' unregistered.")
        return True

    # =========================================================================
    # Boot
    # =========================================================================

    def resolve_order(self) -> List[str]:
        """
        Order extensions so that each comes after the extensions it requires.

        Extensions with a missing requirement, a version mismatch or a
        dependency cycle are left out.
        """
        resolved: List[str] = []
        failed: Set[str] = set()

        def visit(name: str, stack: List[str]) -> bool:
            if name in resolved:
                return True
            if name in failed:
                return False
            if name in stack:
                cycle = " -> ".join(stack[stack.index(name):] + [name])
                self._logger.warning(f"Extension dependency cycle: {cycle}")
                return False

            manifest = self._extensions[name].get_manifest()
            stack.append(name)
            ok = True
            for dependency, constraint in manifest.require.items():
                provider = self._extensions.get(dependency)
                if provider is None:
                    self._logger.warning(
                        f"Extension '{name}' requires '{dependency}' which is not registered.")
                    ok = False
                    break
                dep_version = provider.get_manifest().version
                if not version_satisfies(dep_version, constraint):
                    self._logger.warning(
                        f"Extension '{name}' requires '{dependency}' {constraint}, "
                        f"found {dep_version}.")
                    ok = False
                    break
                if not visit(dependency, stack):
                    ok = False
                    break
            stack.pop()

            if ok:
                resolved.append(name)
            else:
                failed.add(name)
            return ok

        for name in list(self._extensions):
            visit(name, [])
        return resolved

    def boot(self, context: "AppContext") -> List[str]:
        """
        Start every resolvable extension that has not been started yet.

        Returns:
            list[str]: Names of the extensions started by this call.
        """
        started: List[str] = []
        for name in self.resolve_order():
            if name in self._booted:
                continue

            extension = self._extensions[name]
            requires = extension.get_manifest().require
            missing = [dep for dep in requires if dep not in self._booted]
            if missing:
                self._logger.warning(
                    f"Extension '{name}' not started: dependencies failed to start: {', '.join(missing)}")
                continue

            try:
                extension.start(context)
            except Exception as e:
                self._logger.error(f"Failed to start extension '{name}': {e}")
                context.log_event(f"Extension '{name}' start failed: {e}", "ERROR")
                continue

            self._booted.append(name)
            started.append(name)
            context.log_event(f"Extension '{name}' started", "SUCCESS")
        return started

    def is_booted(self, name: str) -> bool:
        return name in self._booted

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_extension(self, name: str) -> Optional[ExtensionServiceProvider]:
        return self._extensions.get(name)

    def get_all_extensions(self) -> List[ExtensionServiceProvider]:
        return list(self._extensions.values())

    def get_extension_names(self) -> List[str]:
        return list(self._extensions.keys())

    def get_manifests(self) -> List[ExtensionManifest]:
        return [extension.get_manifest() for extension in self._extensions.values()]

    def get_commands(self) -> List[Type["Command"]]:
        """Console commands registered by booted extensions."""
        commands: List[Type["Command"]] = []
        for name in self._booted:
            for command in self._extensions[name].get_commands():
                if command not in commands:
                    commands.append(command)
        return commands

    def shutdown_all(self) -> None:
        """Shutdown all registered extensions."""
        for name in list(self._extensions.keys()):
            self.unregister(name)
        self._logger.info("All extensions shut down.")


class ExtensionLoader:
    """
    Discovers extension packages on disk and registers them.
    """

    def __init__(self, registry: ExtensionRegistry) -> None:
        self._registry = registry
        self._logger = logging.getLogger(__name__)

    def load_from_directory(self, extensions_path: str) -> int:
        """
        Load extensions from a directory.

        Every subdirectory with an ``__init__.py`` is imported as a package
        and each ExtensionServiceProvider subclass it exposes is registered.

        Args:
            extensions_path: Path to the extensions directory

        Returns:
            int: Number of extensions registered
        """
        path = Path(extensions_path)
        if not path.exists():
            self._logger.warning(f"Extensions directory '{extensions_path}' does not exist.")
            return 0

        loaded_count = 0
        for subdir in sorted(path.iterdir()):
            if not subdir.is_dir() or subdir.name.startswith(("_", ".")):
                continue

            init_file = subdir / "__init__.py"
            if not init_file.exists():
                continue

            try:
                package = self._import_package(path.name, subdir, init_file)
            except Exception as e:
                self._logger.error(f"Error loading extension package '{subdir.name}': {e}")
                continue

            for attr_name in dir(package):
                attr = getattr(package, attr_name)
                if (isinstance(attr, type) and
                        issubclass(attr, ExtensionServiceProvider) and
                        attr is not ExtensionServiceProvider):
                    if self._registry.register_class(attr):
                        loaded_count += 1
                        self._logger.info(f"Loaded extension package: {subdir.name}")

        return loaded_count

    @staticmethod
    def _import_package(parent: str, subdir: Path, init_file: Path):
        package_name = f"{parent}.{subdir.name}"
        if package_name in sys.modules:
            return sys.modules[package_name]

        spec = importlib.util.spec_from_file_location(
            package_name,
            init_file,
            submodule_search_locations=[str(subdir)],
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import '{package_name}' from {init_file}")

        package = importlib.util.module_from_spec(spec)
        sys.modules[package_name] = package
        try:
            spec.loader.exec_module(package)
        except Exception:
            del sys.modules[package_name]
            raise
        return package
