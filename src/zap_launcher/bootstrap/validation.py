"""Binary validation for installed server versions.

Validates that a server binary is present and executable.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path


class ToolStatus(str, Enum):
    """Status of a server binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def validate_binary(path: Path, require_executable: bool = True) -> ToolStatus:
    """Validate a single binary file.

    Args:
        path: Path to the binary file.
        require_executable: Also check the execute permission. Callers
            pass False on Windows, where the bit is meaningless.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.is_file():
        return ToolStatus.MISSING

    if require_executable and not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT
