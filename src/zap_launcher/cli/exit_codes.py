"""Exit codes for the zap-launcher CLI.

- 0: Success
- 2: Session error (server failed to launch or initialize)
- 3: Invalid usage (bad arguments, bad config)
- 4: Bootstrap failure (release lookup, download or install failed)
"""

from __future__ import annotations

from zap_launcher.config.loader import ConfigError
from zap_launcher.core.errors import AlreadyStarted, SessionLaunchFailed

EXIT_SUCCESS = 0
EXIT_SESSION_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4


def exit_code_for(error: Exception) -> int:
    """Map a launcher error to the exit code reported by the CLI."""
    if isinstance(error, ConfigError):
        return EXIT_INVALID_USAGE
    if isinstance(error, (AlreadyStarted, SessionLaunchFailed)):
        return EXIT_SESSION_ERROR
    return EXIT_BOOTSTRAP_FAILURE
