"""Console commands of the Demo extension."""

import argparse

from core.console import Command


class TestCommand(Command):
    name = "demo:test"
    help = "Print the Demo extension's default settings"

    def handle(self, args: argparse.Namespace, services) -> int:
        extension = services.extensions.get_extension("Demo")
        if extension is None:
            print("Demo extension is not registered.")
            return 1
        for key, value in extension.get_manifest().default_config().items():
            print(f"{key}: {value}")
        return 0
