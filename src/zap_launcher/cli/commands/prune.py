"""Prune command implementation."""

from __future__ import annotations

from argparse import Namespace

from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.bootstrap.retention import sweep_except
from zap_launcher.bootstrap.state import VersionStore
from zap_launcher.cli.commands import Command
from zap_launcher.cli.exit_codes import EXIT_SUCCESS
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)


class PruneCommand(Command):
    """Remove every installed version except the recorded one."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "prune"

    def execute(self, args: Namespace, config: LauncherConfig) -> int:
        paths = LauncherPaths.default(config.install.root)
        version = VersionStore(paths.state_file).get()
        if version is None:
            print("No installed version recorded; nothing to prune.")
            return EXIT_SUCCESS

        keep = paths.version_dir(config.server.binary_name, version)
        removed = sweep_except(paths.bin_dir, keep)
        for directory in removed:
            print(f"Removed {directory}")
        print(f"Kept {keep}")
        return EXIT_SUCCESS
