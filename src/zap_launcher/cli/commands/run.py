"""Run command implementation.

Starts the language server and supervises it until it exits or the user
interrupts the launcher.
"""

from __future__ import annotations

import asyncio
from argparse import Namespace
from pathlib import Path

from zap_launcher.app import AppContext
from zap_launcher.cli.commands import Command
from zap_launcher.cli.exit_codes import EXIT_SUCCESS, exit_code_for
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import LauncherError
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)


class RunCommand(Command):
    """Run the language server under supervision."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "run"

    def execute(self, args: Namespace, config: LauncherConfig) -> int:
        """Execute the run command.

        Args:
            args: Parsed command-line arguments.
            config: zap-launcher configuration.

        Returns:
            Exit code.
        """
        project_root = Path(getattr(args, "project", ".")).resolve()
        try:
            asyncio.run(self._supervise(config, project_root))
        except LauncherError as e:
            LOGGER.error(str(e))
            return exit_code_for(e)
        except KeyboardInterrupt:
            LOGGER.info("Interrupted, language server stopped")
        return EXIT_SUCCESS

    async def _supervise(self, config: LauncherConfig, project_root: Path) -> None:
        app = AppContext.create(config, root_path=project_root)
        await app.startup()
        try:
            await app.controller.wait_closed()
        finally:
            await app.shutdown()
