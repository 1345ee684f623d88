"""Configuration module for zap-launcher.

Provides configuration file loading, parsing, and validation with support for:
- Project-level config (.zap-launcher.yml)
- Global config (~/.zap-launcher/config/config.yml)
- Environment variable expansion
"""

from zap_launcher.config.models import (
    InstallConfig,
    LauncherConfig,
    ReleaseConfig,
    ServerConfig,
    SessionConfig,
)
from zap_launcher.config.loader import (
    ConfigError,
    find_global_config,
    find_project_config,
    load_config,
)
from zap_launcher.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "LauncherConfig",
    "ServerConfig",
    "ReleaseConfig",
    "InstallConfig",
    "SessionConfig",
    "ConfigError",
    "load_config",
    "find_project_config",
    "find_global_config",
    "validate_config",
    "ConfigValidationWarning",
]
