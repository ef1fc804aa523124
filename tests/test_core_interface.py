"""
Unit Tests for core.interface module.

Tests the ExtensionServiceProvider abstract interface.
"""

import pytest
from abc import ABC


class TestExtensionServiceProviderInterface:
    """Tests for ExtensionServiceProvider abstract interface."""

    def test_is_abstract(self):
        """Test ExtensionServiceProvider is an abstract class."""
        from core.interface import ExtensionServiceProvider

        assert issubclass(ExtensionServiceProvider, ABC)

    def test_cannot_instantiate_directly(self):
        from core.interface import ExtensionServiceProvider

        with pytest.raises(TypeError):
            ExtensionServiceProvider()

    def test_abstract_methods_defined(self):
        from core.interface import ExtensionServiceProvider

        assert ExtensionServiceProvider.__abstractmethods__ == frozenset({"start"})

    def test_hooks_have_defaults(self):
        """Test optional hooks are not abstract."""
        from core.interface import ExtensionServiceProvider

        for hook in ("get_api_router", "on_shutdown", "commands", "get_commands"):
            assert hook not in ExtensionServiceProvider.__abstractmethods__


class TestDemoExtension:
    """Test the bundled Demo extension against the interface."""

    def test_manifest_is_cached(self):
        from extensions.demo import DemoService

        extension = DemoService()

        assert extension.get_manifest() is extension.get_manifest()
        assert extension.get_extension_name() == "Demo"

    def test_start_queues_commands(self, app_context):
        """Test start() registers the demo command and logs an event."""
        from extensions.demo import DemoService
        from extensions.demo.commands import TestCommand

        extension = DemoService()
        assert extension.get_commands() == []

        extension.start(app_context)
        extension.start(app_context)

        assert extension.get_commands() == [TestCommand]
        assert any("Demo 扩展已启动" in line for line in app_context.get_event_log())

    def test_api_router(self):
        from extensions.demo import DemoService

        router = DemoService().get_api_router()

        assert router is not None
        assert [route.path for route in router.routes] == ["/admin/demo/settings"]

    def test_default_router_is_none(self):
        from core.interface import ExtensionServiceProvider

        class Minimal(ExtensionServiceProvider):
            info = {"name": "Minimal", "title": "Minimal", "version": "0.1.0"}

            def start(self, context):
                pass

        extension = Minimal()
        assert extension.get_api_router() is None
        assert extension.get_manifest().adaptation == "*"
