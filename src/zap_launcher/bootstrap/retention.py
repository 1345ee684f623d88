"""Removal of superseded server versions."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)


def sweep_except(root: Path, keep: Path) -> List[Path]:
    """Delete every version directory under ``root`` except ``keep``.

    Deletion is permanent. Failures on individual directories are logged
    and do not stop the sweep. A missing ``root`` means nothing to sweep.

    Args:
        root: Directory holding one sub-directory per installed version.
        keep: The version directory to preserve.

    Returns:
        Directories that were removed.
    """
    try:
        entries = list(root.iterdir())
    except FileNotFoundError:
        return []
    except OSError as e:
        LOGGER.warning(f"Could not list version directories in {root}: {e}")
        return []

    keep = keep.resolve()
    removed: List[Path] = []
    for entry in entries:
        if entry.is_symlink() or not entry.is_dir():
            continue
        # Never delete the kept directory or one that contains it
        resolved = entry.resolve()
        if resolved == keep or resolved in keep.parents:
            continue
        try:
            shutil.rmtree(entry)
        except OSError as e:
            LOGGER.warning(f"Failed to remove stale version directory {entry}: {e}")
            continue
        LOGGER.info(f"Removed stale version directory {entry}")
        removed.append(entry)
    return removed
