"""Argument parser for the zap-launcher CLI."""

from __future__ import annotations

import argparse
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with one sub-command per Command."""
    parser = argparse.ArgumentParser(
        prog="zap-launcher",
        description="zap-launcher - install and run the Zap language server.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show zap-launcher version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .zap-launcher.yml in the project root).",
    )
    parser.add_argument(
        "--project",
        metavar="PATH",
        type=Path,
        default=Path("."),
        help="Project root (default: current directory).",
    )
    parser.add_argument(
        "--no-path",
        action="store_true",
        help="Ignore a server binary found on PATH and use the managed install.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    subparsers.add_parser(
        "install",
        help="Install the latest language server release (if needed) and print its path.",
    )
    subparsers.add_parser(
        "status",
        help="Show platform, installed version and binary status.",
    )
    subparsers.add_parser(
        "run",
        help="Start the language server and supervise it until interrupted.",
    )
    subparsers.add_parser(
        "prune",
        help="Remove installed versions other than the current one.",
    )

    return parser


def cli_args_to_config_overrides(args: argparse.Namespace) -> dict:
    """Convert CLI arguments to a config override dict.

    Only flags that were explicitly given produce overrides.
    """
    overrides: dict = {}
    if getattr(args, "no_path", False):
        overrides["server"] = {"use_path": False}
    return overrides
