"""Server binary resolution.

Resolution order:
1. ``server.path`` from configuration, if set.
2. A ``zap-language-server`` found on PATH (when ``server.use_path``).
3. The latest release, downloaded and installed on demand. The release
   index is checked once per resolver; when it cannot be reached the
   recorded install is used.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from zap_launcher.bootstrap.installer import ArtifactInstaller, InstalledVersionRecord
from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.bootstrap.platform import PlatformInfo, get_platform_info
from zap_launcher.bootstrap.releases import ReleaseLocator
from zap_launcher.bootstrap.state import VersionStore
from zap_launcher.config.loader import ConfigError
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import ReleaseQueryFailed
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

SOURCE_CONFIG = "config"
SOURCE_PATH = "path"
SOURCE_INSTALLED = "installed"

# Looks up an executable on PATH without running it
PathProbe = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ResolvedBinary:
    """A server binary ready to be launched."""

    path: Path
    source: str
    version: Optional[str] = None


class BinaryResolver:
    """Resolves the server binary, provisioning it when necessary."""

    def __init__(
        self,
        config: LauncherConfig,
        paths: LauncherPaths,
        platform_info: Optional[PlatformInfo] = None,
        locator: Optional[ReleaseLocator] = None,
        installer: Optional[ArtifactInstaller] = None,
        path_probe: PathProbe = shutil.which,
    ) -> None:
        self._config = config
        self._paths = paths
        self._platform = platform_info or get_platform_info()
        self._locator = locator
        self._installer = installer
        self._which = path_probe
        self._provisioned: Optional[InstalledVersionRecord] = None

    @classmethod
    def from_config(cls, config: LauncherConfig) -> "BinaryResolver":
        return cls(config, LauncherPaths.default(config.install.root))

    @property
    def locator(self) -> ReleaseLocator:
        if self._locator is None:
            release = self._config.release
            self._locator = ReleaseLocator(
                self._platform,
                self._config.server.binary_name,
                repository=release.repository,
                api_url=release.api_url,
                timeout=release.timeout,
            )
        return self._locator

    @property
    def installer(self) -> ArtifactInstaller:
        if self._installer is None:
            self._installer = ArtifactInstaller(
                self._paths,
                VersionStore(self._paths.state_file),
                self._platform,
                self._config.server.binary_name,
                timeout=self._config.release.timeout,
            )
        return self._installer

    def find_existing(self) -> Optional[ResolvedBinary]:
        """Return a binary that can be used without provisioning, if any."""
        server = self._config.server
        if server.path is not None:
            if not server.path.is_file():
                raise ConfigError(f"Configured server binary does not exist: {server.path}")
            LOGGER.debug(f"Using configured server binary {server.path}")
            return ResolvedBinary(path=server.path, source=SOURCE_CONFIG)

        if server.use_path:
            found = self._which(server.binary_name)
            if found:
                LOGGER.info(f"Using {server.binary_name} found on PATH at {found}")
                return ResolvedBinary(path=Path(found), source=SOURCE_PATH)
            LOGGER.debug(f"{server.binary_name} not found on PATH")
        return None

    def provision(self) -> InstalledVersionRecord:
        """Install the latest release (a no-op if it is already installed).

        The release index is queried once per resolver. Later calls reuse the
        provisioned version while its binary is still on disk. If the index
        cannot be queried, a valid existing install is used instead.
        """
        if self._provisioned is not None:
            current = self.installer.installed()
            if current is not None and current.version == self._provisioned.version:
                return current
            self._provisioned = None

        try:
            release = self.locator.find_latest()
        except ReleaseQueryFailed as e:
            current = self.installer.installed()
            if current is None:
                raise
            LOGGER.warning(
                f"Could not check for a newer release ({e}); using installed version {current.version}"
            )
            return current

        self._provisioned = self.installer.install(release)
        return self._provisioned

    def resolve(self) -> ResolvedBinary:
        """Return the binary to launch, downloading it if necessary.

        Raises:
            ConfigError: If the configured binary does not exist.
            LauncherError: Any provisioning failure, unchanged.
        """
        existing = self.find_existing()
        if existing is not None:
            return existing

        record = self.provision()
        return ResolvedBinary(path=record.binary_path, source=SOURCE_INSTALLED, version=record.version)
