"""Platform detection for server binary selection.

Maps the running host to the ``{os}-{arch}`` identifier used in release
asset names, e.g. ``zap-language-server-1.2.0-linux-x86_64.zip``.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

from zap_launcher.core.errors import UnsupportedPlatform

OS_WINDOWS = "windows"
OS_MACOS = "macos"
OS_LINUX = "linux"

ARCH_X86_64 = "x86_64"
ARCH_AARCH64 = "aarch64"

# platform.system() -> canonical OS name
_OS_ALIASES: Dict[str, str] = {
    "windows": OS_WINDOWS,
    "darwin": OS_MACOS,
    "linux": OS_LINUX,
}

# platform.machine() -> canonical architecture name
_ARCH_ALIASES: Dict[str, str] = {
    "x86_64": ARCH_X86_64,
    "amd64": ARCH_X86_64,
    "x64": ARCH_X86_64,
    "arm64": ARCH_AARCH64,
    "aarch64": ARCH_AARCH64,
}

UNIX_LIKE_OSES = frozenset({OS_MACOS, OS_LINUX})


@dataclass(frozen=True)
class PlatformInfo:
    """Canonical platform identity of the host."""

    os: str
    arch: str

    @property
    def identifier(self) -> str:
        """Platform identifier as used in release asset names."""
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == OS_WINDOWS

    @property
    def is_unix_like(self) -> bool:
        """True when a chmod step is needed after writing a binary."""
        return self.os in UNIX_LIKE_OSES

    def executable_file_name(self, binary_name: str) -> str:
        """Return ``binary_name`` with ``.exe`` appended on Windows."""
        return f"{binary_name}.exe" if self.is_windows else binary_name

    def release_asset_name(self, binary_name: str, version: str, extension: str = "zip") -> str:
        """Return the expected release asset file name for ``version``.

        Example: ``zap-language-server-1.2.0-linux-x86_64.zip``
        """
        return f"{binary_name}-{strip_version_marker(version)}-{self.identifier}.{extension}"


def strip_version_marker(version: str) -> str:
    """Strip surrounding whitespace and a single leading ``v`` from a tag."""
    cleaned = version.strip()
    if cleaned[:1] in ("v", "V"):
        return cleaned[1:]
    return cleaned


def normalize_os(system: str) -> Optional[str]:
    return _OS_ALIASES.get(system.strip().lower())


def normalize_arch(machine: str) -> Optional[str]:
    return _ARCH_ALIASES.get(machine.strip().lower())


def detect_platform(system: str, machine: str) -> PlatformInfo:
    """Build a :class:`PlatformInfo` from raw host strings.

    Args:
        system: Value of ``platform.system()``.
        machine: Value of ``platform.machine()``.

    Raises:
        UnsupportedPlatform: If either axis is not recognized.
    """
    os_name = normalize_os(system)
    arch = normalize_arch(machine)
    if os_name is None or arch is None:
        raise UnsupportedPlatform(system or "unknown", machine or "unknown")
    return PlatformInfo(os=os_name, arch=arch)


@lru_cache(maxsize=1)
def get_platform_info() -> PlatformInfo:
    """Return the platform of the running host (computed once per process)."""
    return detect_platform(platform.system(), platform.machine())
