"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.zap-launcher.yml)
- Global config (~/.zap-launcher/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.config.models import (
    InstallConfig,
    LauncherConfig,
    ReleaseConfig,
    ServerConfig,
    SessionConfig,
)
from zap_launcher.config.validation import validate_config
from zap_launcher.core.errors import LauncherError
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".zap-launcher.yml", ".zap-launcher.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(LauncherError):
    """Configuration loading or parsing error."""


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> LauncherConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.zap-launcher.yml)
    3. Global config (~/.zap-launcher/config/config.yml)
    4. Built-in defaults

    Args:
        project_root: Directory searched for .zap-launcher.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged LauncherConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (OSError, yaml.YAMLError, ConfigError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = _merge_file(merged, cli_config_path)
        sources.append(f"custom:{cli_config_path}")
    else:
        project_path = find_project_config(project_root)
        if project_path:
            merged = _merge_file(merged, project_path)
            sources.append(f"project:{project_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _merge_file(merged: Dict[str, Any], path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    validate_config(data, source=str(path))
    LOGGER.debug(f"Loaded config from {path}")
    return merge_configs(merged, data)


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.zap-launcher/config/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = LauncherPaths.default().config_dir / GLOBAL_CONFIG_NAME
    if config_path.is_file():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> LauncherConfig:
    """Convert a merged dict to a typed LauncherConfig.

    Values of the wrong type fall back to defaults (validation has
    already warned about them).

    Raises:
        ConfigError: If a numeric option is not positive.
    """
    server_data = _section(data, "server")
    release_data = _section(data, "release")
    install_data = _section(data, "install")
    session_data = _section(data, "session")

    defaults = ServerConfig()
    args = server_data.get("args")
    if isinstance(args, list):
        args = [str(a) for a in args]
    else:
        args = defaults.args

    server = ServerConfig(
        binary_name=_str(server_data.get("binary_name"), defaults.binary_name),
        args=args,
        use_path=_bool(server_data.get("use_path"), defaults.use_path),
        path=_path(server_data.get("path")),
    )

    release_defaults = ReleaseConfig()
    release = ReleaseConfig(
        repository=_str(release_data.get("repository"), release_defaults.repository),
        api_url=_str(release_data.get("api_url"), release_defaults.api_url),
        timeout=_positive("release.timeout", release_data.get("timeout"), release_defaults.timeout),
    )

    install = InstallConfig(root=_path(install_data.get("root")))

    session = SessionConfig(
        startup_timeout=_positive(
            "session.startup_timeout",
            session_data.get("startup_timeout"),
            SessionConfig().startup_timeout,
        ),
    )

    return LauncherConfig(server=server, release=release, install=install, session=session)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    return section if isinstance(section, dict) else {}


def _str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _path(value: Any) -> Optional[Path]:
    if isinstance(value, str) and value.strip():
        return Path(value.strip()).expanduser()
    if isinstance(value, Path):
        return value
    return None


def _positive(key: str, value: Any, default: float) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value <= 0:
        raise ConfigError(f"'{key}' must be greater than zero, got {value}")
    return float(value)
