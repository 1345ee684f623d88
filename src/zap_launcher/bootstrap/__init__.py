"""
Bootstrap module for language server binary management.

This module handles:
- Platform detection (OS + architecture)
- Launcher home directory management (~/.zap-launcher/)
- Binary validation utilities

Release lookup, installation and resolution live in the ``releases``,
``installer`` and ``resolver`` submodules.
"""

from zap_launcher.bootstrap.platform import get_platform_info, PlatformInfo
from zap_launcher.bootstrap.paths import get_launcher_home, LauncherPaths
from zap_launcher.bootstrap.validation import validate_binary, ToolStatus

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_launcher_home",
    "LauncherPaths",
    "validate_binary",
    "ToolStatus",
]
