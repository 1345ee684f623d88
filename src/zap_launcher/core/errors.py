"""Error taxonomy for zap-launcher.

Provisioning errors abort an install without touching committed state.
Session errors are raised by the session controller. All of them derive
from :class:`LauncherError` so callers can report them uniformly.
"""

from __future__ import annotations

from typing import Iterable


class LauncherError(Exception):
    """Base class for all zap-launcher errors."""


class UnsupportedPlatform(LauncherError):
    """The host OS or CPU architecture has no published server build."""

    def __init__(self, os_name: str, arch: str) -> None:
        super().__init__(f"Unsupported platform: {os_name}-{arch}")
        self.os_name = os_name
        self.arch = arch


class ReleaseQueryFailed(LauncherError):
    """The release index could not be queried or parsed."""


class NoMatchingAsset(LauncherError):
    """The latest release has no asset for this platform."""

    def __init__(self, expected: str, version: str, asset_names: Iterable[str]) -> None:
        self.expected = expected
        self.version = version
        self.asset_names = list(asset_names)
        found = ", ".join(self.asset_names) if self.asset_names else "(none)"
        super().__init__(
            f"No release asset matching '{expected}' in release {version}. "
            f"Found release assets: {found}"
        )


class DownloadFailed(LauncherError):
    """The release archive could not be downloaded or opened."""


class BinaryNotFoundInArchive(LauncherError):
    """The release archive does not contain the expected binary."""

    def __init__(self, expected: str) -> None:
        super().__init__(f"Failed to find '{expected}' in the release archive")
        self.expected = expected


class WriteFailed(LauncherError):
    """The extracted binary could not be written to the install directory."""


class AlreadyStarted(LauncherError):
    """A session is already starting or running."""


class SessionLaunchFailed(LauncherError):
    """The server process or its protocol client failed to start."""
