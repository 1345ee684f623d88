"""Application context.

Owns the session controller for the lifetime of the host process. The
host calls :meth:`AppContext.startup` once when it activates and
:meth:`AppContext.shutdown` once when it exits.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from zap_launcher.bootstrap.resolver import BinaryResolver
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.logging import get_logger
from zap_launcher.session.controller import ClientFactory, Session, SessionController

LOGGER = get_logger(__name__)


class AppContext:
    """Process-wide owner of the language server session."""

    def __init__(self, config: LauncherConfig, controller: SessionController) -> None:
        self.config = config
        self.controller = controller

    @classmethod
    def create(
        cls,
        config: LauncherConfig,
        root_path: Optional[Path] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> "AppContext":
        resolver = BinaryResolver.from_config(config)
        controller = SessionController(
            config,
            resolver,
            client_factory=client_factory,
            root_path=root_path,
        )
        return cls(config, controller)

    async def startup(self) -> Session:
        """Start the language server session."""
        LOGGER.debug("Application startup")
        return await self.controller.start()

    async def shutdown(self) -> bool:
        """Stop the language server session if one is running."""
        LOGGER.debug("Application shutdown")
        return await self.controller.stop()

    async def __aenter__(self) -> "AppContext":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
