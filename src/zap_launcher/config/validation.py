"""Configuration validation for zap-launcher.

Validates configuration keys and value types. Problems are reported as
warnings rather than errors so that a config written for a newer launcher
still loads.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set, Tuple

from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid keys per section; value is the accepted types for each key
SECTION_SCHEMAS: Dict[str, Dict[str, Tuple[type, ...]]] = {
    "server": {
        "binary_name": (str,),
        "args": (list,),
        "use_path": (bool,),
        "path": (str, type(None)),
    },
    "release": {
        "repository": (str,),
        "api_url": (str,),
        "timeout": (int, float),
    },
    "install": {
        "root": (str, type(None)),
    },
    "session": {
        "startup_timeout": (int, float),
    },
}

VALID_TOP_LEVEL_KEYS: Set[str] = set(SECTION_SCHEMAS)


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Does not raise exceptions - returns (and logs) warnings instead.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key, section in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            _add(warnings, ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))
            continue

        if not isinstance(section, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'{key}' must be a mapping, got {type(section).__name__}",
                source=source,
                key=key,
            ))
            continue

        schema = SECTION_SCHEMAS[key]
        for option, value in section.items():
            dotted = f"{key}.{option}"
            if option not in schema:
                _add(warnings, ConfigValidationWarning(
                    message=f"Unknown key '{dotted}'",
                    source=source,
                    key=dotted,
                    suggestion=_suggest_key(option, set(schema)),
                ))
                continue

            expected = schema[option]
            # bool is an int subclass; don't accept it for numeric options
            if isinstance(value, bool) and bool not in expected:
                valid = False
            else:
                valid = isinstance(value, expected)
            if not valid:
                names = " or ".join(t.__name__ for t in expected if t is not type(None))
                _add(warnings, ConfigValidationWarning(
                    message=f"'{dotted}' must be {names}, got {type(value).__name__}",
                    source=source,
                    key=dotted,
                ))

    return warnings


def _add(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
