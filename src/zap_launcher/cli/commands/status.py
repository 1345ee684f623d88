"""Status command implementation.

Shows platform, install locations and the state of the server binary.
"""

from __future__ import annotations

import shutil
from argparse import Namespace

from zap_launcher import __version__
from zap_launcher.bootstrap.installer import ArtifactInstaller
from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.bootstrap.platform import get_platform_info
from zap_launcher.bootstrap.state import VersionStore
from zap_launcher.bootstrap.validation import validate_binary
from zap_launcher.cli.commands import Command
from zap_launcher.cli.exit_codes import EXIT_SUCCESS, exit_code_for
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import UnsupportedPlatform
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)


class StatusCommand(Command):
    """Print launcher and server binary status."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: LauncherConfig) -> int:
        """Execute the status command.

        Args:
            args: Parsed command-line arguments.
            config: zap-launcher configuration.

        Returns:
            Exit code.
        """
        paths = LauncherPaths.default(config.install.root)
        binary_name = config.server.binary_name

        print(f"zap-launcher version: {__version__}")
        try:
            platform_info = get_platform_info()
        except UnsupportedPlatform as e:
            print(f"Platform: unsupported ({e})")
            return exit_code_for(e)

        print(f"Platform: {platform_info.identifier}")
        print(f"Home: {paths.home}")
        print(f"Install root: {paths.bin_dir}")
        if config.sources:
            print(f"Config: {', '.join(config.sources)}")
        print()

        if config.server.path is not None:
            status = validate_binary(config.server.path, platform_info.is_unix_like)
            print(f"Configured binary: {config.server.path} ({status.value})")

        on_path = shutil.which(binary_name)
        print(f"On PATH: {on_path or 'not found'}")

        store = VersionStore(paths.state_file)
        version = store.get()
        if version is None:
            print("Installed version: none")
        else:
            installer = ArtifactInstaller(paths, store, platform_info, binary_name)
            binary_path = installer.binary_path(version)
            status = validate_binary(binary_path, platform_info.is_unix_like)
            print(f"Installed version: {version}")
            print(f"Installed binary: {binary_path} ({status.value})")

        print()
        print("The server binary is downloaded automatically on first use.")
        return EXIT_SUCCESS
