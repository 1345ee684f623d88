"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zap_launcher.config.models import LauncherConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "LauncherConfig") -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded zap-launcher configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from zap_launcher.cli.commands.install import InstallCommand
from zap_launcher.cli.commands.prune import PruneCommand
from zap_launcher.cli.commands.run import RunCommand
from zap_launcher.cli.commands.status import StatusCommand

__all__ = [
    "Command",
    "InstallCommand",
    "PruneCommand",
    "RunCommand",
    "StatusCommand",
]
