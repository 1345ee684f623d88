"""Server binary installation.

Installs a release into its own version directory:

1. Skip everything if the recorded version is already on disk.
2. Download the release archive.
3. Extract the server binary from it.
4. Write the binary next to its final path, then rename it into place.
5. Mark it executable on Unix-like platforms.
6. Record the version as installed.
7. Remove older version directories.

The version record is written only after steps 2-5 succeed, so it never
points at a version whose files are missing or incomplete.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from zap_launcher.bootstrap.archive import extract_binary
from zap_launcher.bootstrap.download import DEFAULT_TIMEOUT, fetch_bytes
from zap_launcher.bootstrap.paths import LauncherPaths, is_safe_version
from zap_launcher.bootstrap.platform import PlatformInfo
from zap_launcher.bootstrap.releases import ReleaseDescriptor
from zap_launcher.bootstrap.retention import sweep_except
from zap_launcher.bootstrap.state import VersionStore
from zap_launcher.bootstrap.validation import ToolStatus, validate_binary
from zap_launcher.core.errors import WriteFailed
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

EXECUTABLE_MODE = 0o755

# Downloads a URL and returns the raw body
Fetcher = Callable[[str, float], bytes]


@dataclass(frozen=True)
class InstalledVersionRecord:
    """A version that is fully present on disk."""

    version: str
    binary_path: Path


class ArtifactInstaller:
    """Installs server releases under the launcher's bin directory."""

    def __init__(
        self,
        paths: LauncherPaths,
        store: VersionStore,
        platform_info: PlatformInfo,
        binary_name: str,
        timeout: float = DEFAULT_TIMEOUT,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self._paths = paths
        self._store = store
        self._platform = platform_info
        self._binary_name = binary_name
        self._timeout = timeout
        self._fetch = fetcher or fetch_bytes

    @property
    def binary_file_name(self) -> str:
        return self._platform.executable_file_name(self._binary_name)

    def version_dir(self, version: str) -> Path:
        return self._paths.version_dir(self._binary_name, version)

    def binary_path(self, version: str) -> Path:
        return self.version_dir(version) / self.binary_file_name

    def installed(self) -> Optional[InstalledVersionRecord]:
        """Return the recorded install if its binary is actually on disk.

        A record whose files are missing (or lost their execute bit) is
        treated as not installed and cleared.
        """
        version = self._store.get()
        if version is None:
            return None

        binary_path = self.binary_path(version)
        status = validate_binary(binary_path, require_executable=self._platform.is_unix_like)
        if status != ToolStatus.PRESENT:
            LOGGER.warning(
                f"Recorded version {version} is not usable ({status.value}) at {binary_path}; "
                "it will be reinstalled"
            )
            self._store.clear()
            return None
        return InstalledVersionRecord(version=version, binary_path=binary_path)

    def install(self, release: ReleaseDescriptor) -> InstalledVersionRecord:
        """Install ``release`` unless it is already installed.

        Raises:
            DownloadFailed: If the archive cannot be downloaded or read.
            BinaryNotFoundInArchive: If the archive lacks the server binary.
            WriteFailed: If the binary cannot be written or made executable, or
                the version cannot name a directory.
        """
        if not is_safe_version(release.version):
            raise WriteFailed(f"Refusing to install unsafe version name '{release.version}'")

        current = self.installed()
        if current is not None and current.version == release.version:
            LOGGER.debug(f"Version {release.version} already installed at {current.binary_path}")
            return current

        LOGGER.info(f"Downloading {self._binary_name} {release.version} from {release.download_url}")
        archive_bytes = self._fetch(release.download_url, self._timeout)
        binary = extract_binary(archive_bytes, self.binary_file_name)

        version_dir = self.version_dir(release.version)
        binary_path = version_dir / self.binary_file_name
        _write_atomically(binary_path, binary, self._platform.is_unix_like)

        self._store.set(release.version)
        LOGGER.info(f"Installed {self._binary_name} {release.version} to {binary_path}")

        sweep_except(self._paths.bin_dir, version_dir)
        return InstalledVersionRecord(version=release.version, binary_path=binary_path)


def _write_atomically(destination: Path, data: bytes, make_executable: bool) -> None:
    """Write ``data`` to a temporary sibling of ``destination`` and rename it.

    Raises:
        WriteFailed: On any filesystem error. The temporary file is removed.
    """
    tmp_path: Optional[Path] = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".partial", dir=destination.parent
        )
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates the file 0600
        if make_executable:
            tmp_path.chmod(EXECUTABLE_MODE)
        os.replace(tmp_path, destination)
        tmp_path = None
    except OSError as e:
        raise WriteFailed(f"Failed to write {destination}: {e}") from e
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
