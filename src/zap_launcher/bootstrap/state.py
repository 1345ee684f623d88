"""Durable record of the installed server version.

The record lives in a small JSON document under the launcher home, so
removing the home directory resets it. Writes replace the document
atomically; a reader never sees a half-written record.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

INSTALLED_VERSION_KEY = "installed_version"


class VersionStore:
    """Reads and writes the installed version record."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Optional[str]:
        """Return the recorded version, or None if nothing is recorded."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            LOGGER.warning(f"Ignoring unreadable version record {self._path}: {e}")
            return None

        if not isinstance(data, dict):
            LOGGER.warning(f"Ignoring malformed version record {self._path}")
            return None

        version = data.get(INSTALLED_VERSION_KEY)
        if isinstance(version, str) and version:
            return version
        return None

    def set(self, version: str) -> None:
        """Record ``version`` as installed."""
        self._write({INSTALLED_VERSION_KEY: version})
        LOGGER.debug(f"Recorded installed version {version} in {self._path}")

    def clear(self) -> None:
        """Forget the recorded version."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
