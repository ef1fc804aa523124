"""
Console Commands.

argparse-based command line for the admin panel. Built-in commands cover
token issuance/verification, extension listing and password hashing;
extensions add their own via ``ExtensionServiceProvider.commands()``.

Usage:
    larke-admin jwt:issue --claim uid=42
    larke-admin jwt:verify <token>
    larke-admin extension:list
    larke-admin admin:hash-password <password>
"""

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Type

from core.jwt import JwtError
from core.services.admin import hash_password

if TYPE_CHECKING:
    from core.providers import AdminServices

logger = logging.getLogger(__name__)


class Command:
    """
    Base class for console commands.

    Subclasses set ``name`` (e.g. ``"jwt:issue"``) and ``help`` and
    implement ``handle()``.
    """

    name: str = ""
    help: str = ""

    def configure(self, parser: argparse.ArgumentParser) -> None:
        """Add arguments to the command's sub-parser."""
        pass

    def handle(self, args: argparse.Namespace, services: "AdminServices") -> int:
        """Run the command and return a process exit code."""
        raise NotImplementedError


class CommandRegistry:
    """Named console commands."""

    def __init__(self) -> None:
        self._commands: Dict[str, Type[Command]] = {}

    def register(self, command: Type[Command]) -> bool:
        if not command.name:
            logger.error(f"Command {command.__name__} has no name. Skipping.")
            return False
        if command.name in self._commands:
            if self._commands[command.name] is not command:
                logger.warning(f"Command '{command.name}' already registered. Skipping.")
            return False
        self._commands[command.name] = command
        return True

    def register_many(self, commands: Iterable[Type[Command]]) -> int:
        return sum(1 for command in commands if self.register(command))

    def get(self, name: str) -> Optional[Type[Command]]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return sorted(self._commands)


# =============================================================================
# Built-in commands
# =============================================================================


def _parse_claim(raw: str) -> tuple[str, object]:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"claim must look like key=value, got '{raw}'")
    key, value = raw.split("=", 1)
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = value
    return key.strip(), parsed


class IssueTokenCommand(Command):
    name = "jwt:issue"
    help = "Issue a token with the configured JWT settings"

    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--claim",
            action="append",
            default=[],
            type=_parse_claim,
            metavar="KEY=VALUE",
            help="Custom claim; JSON values are decoded (repeatable)",
        )

    def handle(self, args: argparse.Namespace, services: "AdminServices") -> int:
        try:
            token = services.jwt.issue(dict(args.claim))
        except JwtError as e:
            print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
            return 1
        print(token)
        return 0


class VerifyTokenCommand(Command):
    name = "jwt:verify"
    help = "Validate a token and print its claims"

    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("token", help="Compact JWT")

    def handle(self, args: argparse.Namespace, services: "AdminServices") -> int:
        try:
            claims = services.jwt.validate(args.token)
        except JwtError as e:
            print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
            return 1
        print(json.dumps(claims, ensure_ascii=False, indent=2, sort_keys=True))
        return 0


class ListExtensionsCommand(Command):
    name = "extension:list"
    help = "List registered extensions"

    def handle(self, args: argparse.Namespace, services: "AdminServices") -> int:
        registry = services.extensions
        manifests = registry.get_manifests()
        if not manifests:
            print("No extensions registered.")
            return 0
        for manifest in manifests:
            state = "booted" if registry.is_booted(manifest.name) else "registered"
            print(f"{manifest.name:<20} {manifest.version:<10} {state:<10} {manifest.title}")
        return 0


class HashPasswordCommand(Command):
    name = "admin:hash-password"
    help = "Print a bcrypt hash for ADMIN_PASSWORD_HASH"

    def configure(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("password", help="Plain text password")

    def handle(self, args: argparse.Namespace, services: "AdminServices") -> int:
        print(hash_password(args.password))
        return 0


BUILTIN_COMMANDS: List[Type[Command]] = [
    IssueTokenCommand,
    VerifyTokenCommand,
    ListExtensionsCommand,
    HashPasswordCommand,
]


# =============================================================================
# Application
# =============================================================================


class ConsoleApplication:
    """Dispatches argv to registered commands."""

    def __init__(self, services: "AdminServices") -> None:
        self._services = services

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="larke-admin",
            description="Larke admin console",
        )
        subparsers = parser.add_subparsers(dest="command", metavar="command")
        registry = self._services.commands
        for name in registry.names():
            command = registry.get(name)
            sub = subparsers.add_parser(name, help=command.help, description=command.help)
            command().configure(sub)
        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        parser = self.build_parser()
        args = parser.parse_args(argv)
        if not args.command:
            parser.print_help()
            return 1

        command = self._services.commands.get(args.command)()
        return command.handle(args, self._services)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    from core.app_context import AppContext
    from core.logging_config import setup_logging
    from core.providers import ServiceProvider

    context = AppContext()
    setup_logging(context.config.get("app.log_level", "WARNING"), to_file=False)

    provider = ServiceProvider(context)
    services = provider.register()
    provider.boot(services)

    return ConsoleApplication(services).run(argv)


if __name__ == "__main__":
    sys.exit(main())
