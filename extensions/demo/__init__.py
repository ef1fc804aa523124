"""Demo extension package."""

from extensions.demo.demo_service import DemoService

__all__ = ["DemoService"]
