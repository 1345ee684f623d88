"""CLI runner: parses arguments, loads configuration and dispatches commands."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Dict, Iterable, Optional

from zap_launcher.cli.arguments import build_parser, cli_args_to_config_overrides
from zap_launcher.cli.commands import (
    Command,
    InstallCommand,
    PruneCommand,
    RunCommand,
    StatusCommand,
)
from zap_launcher.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from zap_launcher.config.loader import ConfigError, load_config
from zap_launcher.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("zap-launcher")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from zap_launcher import __version__

        return __version__


class CLIRunner:
    """Runs one CLI invocation."""

    def __init__(self) -> None:
        commands = [InstallCommand(), StatusCommand(), RunCommand(), PruneCommand()]
        self._commands: Dict[str, Command] = {cmd.name: cmd for cmd in commands}

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Parse ``argv`` and execute the selected command.

        Returns:
            Exit code.
        """
        parser = build_parser()
        argv_list = list(argv) if argv is not None else None
        args = parser.parse_args(argv_list)

        # Configure logging as early as possible.
        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        command = self._commands.get(args.command or "")
        if command is None:
            parser.print_help()
            return EXIT_SUCCESS

        project_root = Path(args.project).resolve()
        try:
            config = load_config(
                project_root=project_root,
                cli_config_path=args.config,
                cli_overrides=cli_args_to_config_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        return command.execute(args, config)
