"""Install command implementation."""

from __future__ import annotations

from argparse import Namespace

from zap_launcher.bootstrap.resolver import BinaryResolver
from zap_launcher.cli.commands import Command
from zap_launcher.cli.exit_codes import EXIT_SUCCESS, exit_code_for
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import LauncherError
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)


class InstallCommand(Command):
    """Make sure a server binary is available and print its path."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: LauncherConfig) -> int:
        """Execute the install command.

        Args:
            args: Parsed command-line arguments.
            config: zap-launcher configuration.

        Returns:
            Exit code.
        """
        try:
            resolved = BinaryResolver.from_config(config).resolve()
        except LauncherError as e:
            LOGGER.error(str(e))
            return exit_code_for(e)

        if resolved.version:
            LOGGER.info(f"{config.server.binary_name} {resolved.version} is installed")
        print(resolved.path)
        return EXIT_SUCCESS
