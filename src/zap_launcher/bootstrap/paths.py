"""Path management for the zap-launcher home directory.

Handles the ~/.zap-launcher directory structure and path resolution.
Each server version is installed under its own directory so that a new
version can be written without disturbing the one currently in use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".zap-launcher"

# Environment variable to override home directory
ZAP_LAUNCHER_HOME_ENV = "ZAP_LAUNCHER_HOME"


def get_launcher_home() -> Path:
    """Get the zap-launcher home directory path.

    Resolution order:
    1. ZAP_LAUNCHER_HOME environment variable (if set)
    2. ~/.zap-launcher (default)

    Returns:
        Path to the zap-launcher home directory.
    """
    env_home = os.environ.get(ZAP_LAUNCHER_HOME_ENV)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / DEFAULT_HOME_DIR_NAME


def is_safe_version(version: str) -> bool:
    """Return True if ``version`` can name a single version directory.

    Path separators and parent references are rejected.
    """
    if not version or version != version.strip():
        return False
    return not any(part in version for part in ("/", "\\", "..", "\0"))


@dataclass
class LauncherPaths:
    """Manages paths within the zap-launcher home directory.

    Directory structure:
        ~/.zap-launcher/
            bin/
                zap-language-server-1.2.0/zap-language-server   - Server binary
            state/
                installed.json                                  - Installed version record
            config/
                config.yml                                      - Global configuration
    """

    home: Path
    install_root: Optional[Path] = None

    # Subdirectory names
    _BIN_DIR: ClassVar[str] = "bin"
    _STATE_DIR: ClassVar[str] = "state"
    _CONFIG_DIR: ClassVar[str] = "config"
    _STATE_FILE: ClassVar[str] = "installed.json"

    @classmethod
    def default(cls, install_root: Optional[Path] = None) -> "LauncherPaths":
        """Create paths from the default zap-launcher home."""
        return cls(get_launcher_home(), install_root)

    @property
    def bin_dir(self) -> Path:
        """Root directory holding one sub-directory per installed version."""
        if self.install_root is not None:
            return self.install_root
        return self.home / self._BIN_DIR

    @property
    def state_dir(self) -> Path:
        """Directory for durable launcher state."""
        return self.home / self._STATE_DIR

    @property
    def state_file(self) -> Path:
        """JSON document recording the installed server version."""
        return self.state_dir / self._STATE_FILE

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    def version_dir(self, binary_name: str, version: str) -> Path:
        """Get the directory for a specific server version.

        Args:
            binary_name: Server binary name (e.g., 'zap-language-server').
            version: Version string.

        Returns:
            Path to ``{bin_dir}/{binary_name}-{version}``.
        """
        return self.bin_dir / f"{binary_name}-{version}"

