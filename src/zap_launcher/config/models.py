"""Configuration data models for zap-launcher.

Defines typed configuration classes that represent the .zap-launcher.yml
structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from zap_launcher.bootstrap.download import DEFAULT_TIMEOUT
from zap_launcher.bootstrap.releases import DEFAULT_API_URL, DEFAULT_REPOSITORY

DEFAULT_BINARY_NAME = "zap-language-server"
DEFAULT_SERVER_ARGS = ["serve"]
DEFAULT_STARTUP_TIMEOUT = 30.0


@dataclass
class ServerConfig:
    """How the language server binary is located and launched."""

    binary_name: str = DEFAULT_BINARY_NAME
    args: List[str] = field(default_factory=lambda: list(DEFAULT_SERVER_ARGS))
    use_path: bool = True  # Prefer a binary found on PATH over downloading
    path: Optional[Path] = None  # Explicit binary; skips PATH probe and download


@dataclass
class ReleaseConfig:
    """Where releases are published."""

    repository: str = DEFAULT_REPOSITORY
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT  # Seconds, per network request


@dataclass
class InstallConfig:
    """Where downloaded binaries are installed."""

    root: Optional[Path] = None  # None = <home>/bin


@dataclass
class SessionConfig:
    """Session supervision settings."""

    startup_timeout: float = DEFAULT_STARTUP_TIMEOUT  # Seconds for the handshake


@dataclass
class LauncherConfig:
    """Complete zap-launcher configuration.

    Example .zap-launcher.yml:
        server:
          use_path: false
        release:
          repository: my-fork/zap-language-server
          timeout: 10
    """

    server: ServerConfig = field(default_factory=ServerConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        """Where this configuration was loaded from, lowest precedence first."""
        return list(self._config_sources)
