"""Shared fixtures for zap-launcher tests."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.bootstrap.platform import PlatformInfo
from zap_launcher.bootstrap.state import VersionStore

BINARY_NAME = "zap-language-server"


def build_zip(files: Dict[str, bytes]) -> bytes:
    """Return zip archive bytes containing ``files`` (name -> content)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_zip() -> Callable[[Dict[str, bytes]], bytes]:
    return build_zip


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x86_64")


@pytest.fixture
def windows_platform() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="x86_64")


@pytest.fixture
def launcher_paths(tmp_path: Path) -> LauncherPaths:
    return LauncherPaths(home=tmp_path / "home")


@pytest.fixture
def version_store(launcher_paths: LauncherPaths) -> VersionStore:
    return VersionStore(launcher_paths.state_file)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ZAP_LAUNCHER_HOME at a temp dir so tests never touch ~/.zap-launcher."""
    home = tmp_path / "launcher-home"
    monkeypatch.setenv("ZAP_LAUNCHER_HOME", str(home))
    return home
