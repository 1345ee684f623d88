"""Protocol client used to talk to the language server over stdio."""

from __future__ import annotations

import asyncio

from pygls.lsp.client import LanguageClient

from zap_launcher import __version__
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

CLIENT_NAME = "zap-launcher"


class ZapLanguageClient(LanguageClient):
    """Language client that records when the server process exits."""

    def __init__(self) -> None:
        super().__init__(CLIENT_NAME, __version__)
        self.exited = asyncio.Event()

    async def server_exit(self, server: asyncio.subprocess.Process) -> None:
        LOGGER.info(f"Language server exited with code {server.returncode}")
        self.exited.set()


def create_client() -> ZapLanguageClient:
    """Default client factory for :class:`SessionController`."""
    return ZapLanguageClient()
