"""Language server session lifecycle.

The controller owns at most one running session. A second ``start`` raises
:class:`AlreadyStarted`. ``stop`` is idempotent and reports whether anything
was running. All transitions are serialized by a single lock.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from lsprotocol import types as lsp

from zap_launcher import __version__
from zap_launcher.bootstrap.resolver import BinaryResolver, ResolvedBinary
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import AlreadyStarted, SessionLaunchFailed
from zap_launcher.core.logging import get_logger
from zap_launcher.session.client import ZapLanguageClient, create_client

LOGGER = get_logger(__name__)

# Seconds to wait for the server to answer a shutdown request
SHUTDOWN_TIMEOUT = 5.0

# Returns a new, unstarted protocol client
ClientFactory = Callable[[], ZapLanguageClient]


class SessionState(str, Enum):
    """Lifecycle states of the session controller."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


@dataclass
class Session:
    """A running server process paired with its protocol client."""

    client: ZapLanguageClient
    binary: ResolvedBinary
    args: List[str]

    @property
    def command(self) -> List[str]:
        return [str(self.binary.path), *self.args]


def server_environment() -> dict:
    """Environment for the server process, carrying the caller's PATH."""
    env = dict(os.environ)
    env["PATH"] = os.environ.get("PATH", os.defpath)
    return env


class SessionController:
    """Starts, stops and restarts the single language server session."""

    def __init__(
        self,
        config: LauncherConfig,
        resolver: BinaryResolver,
        client_factory: Optional[ClientFactory] = None,
        root_path: Optional[Path] = None,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._client_factory = client_factory or create_client
        self._root_path = root_path
        self._lock = asyncio.Lock()
        self._state = SessionState.STOPPED
        self._session: Optional[Session] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SessionState.RUNNING

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def binary_path(self) -> Optional[Path]:
        if self._session is None:
            return None
        return self._session.binary.path

    async def start(self) -> Session:
        """Resolve the server binary, launch it and connect the client.

        Raises:
            AlreadyStarted: If a session is starting or running.
            SessionLaunchFailed: If the process or handshake fails.
            LauncherError: Provisioning failures, unchanged.
        """
        async with self._lock:
            if self._state != SessionState.STOPPED:
                raise AlreadyStarted(f"Language server session is already {self._state.value}")

            self._state = SessionState.STARTING
            try:
                self._session = await self._launch()
            except BaseException:
                self._state = SessionState.STOPPED
                raise

            self._state = SessionState.RUNNING
            LOGGER.info(f"Language server running: {' '.join(self._session.command)}")
            return self._session

    async def stop(self) -> bool:
        """Stop the running session.

        Returns:
            True if a session was stopped, False if nothing was running.
        """
        async with self._lock:
            session = self._session
            if session is None:
                self._state = SessionState.STOPPED
                return False

            self._session = None
            try:
                await self._shutdown(session.client)
            finally:
                self._state = SessionState.STOPPED
            LOGGER.info("Language server stopped")
            return True

    async def restart(self) -> Session:
        """Stop the current session (if any) and start a new one.

        If starting fails the controller is left stopped; the previous
        session is not brought back.
        """
        await self.stop()
        return await self.start()

    async def wait_closed(self) -> None:
        """Wait until the server process of the current session exits."""
        session = self._session
        if session is None:
            return
        await session.client.exited.wait()

    async def _launch(self) -> Session:
        binary = await asyncio.to_thread(self._resolver.resolve)
        args = list(self._config.server.args)

        LOGGER.info(f"Starting language server {binary.path} ({binary.source})")
        client = self._client_factory()
        try:
            await client.start_io(str(binary.path), *args, env=server_environment())
        except OSError as e:
            raise SessionLaunchFailed(f"Failed to launch {binary.path}: {e}") from e

        try:
            await asyncio.wait_for(
                self._handshake(client),
                timeout=self._config.session.startup_timeout,
            )
        except asyncio.TimeoutError as e:
            await self._terminate(client)
            raise SessionLaunchFailed(
                f"Language server did not finish initializing within "
                f"{self._config.session.startup_timeout:g}s"
            ) from e
        except Exception as e:
            await self._terminate(client)
            raise SessionLaunchFailed(f"Language server initialization failed: {e}") from e
        except BaseException:
            await self._terminate(client)
            raise

        return Session(client=client, binary=binary, args=args)

    async def _handshake(self, client: ZapLanguageClient) -> None:
        params = lsp.InitializeParams(
            capabilities=lsp.ClientCapabilities(),
            process_id=os.getpid(),
            client_info=lsp.ClientInfo(name="zap-launcher", version=__version__),
            root_uri=self._root_path.resolve().as_uri() if self._root_path else None,
        )
        result = await client.initialize_async(params)
        server_info = getattr(result, "server_info", None)
        if server_info is not None:
            LOGGER.debug(f"Connected to {server_info.name} {server_info.version or ''}".rstrip())
        client.initialized(lsp.InitializedParams())

    async def _shutdown(self, client: ZapLanguageClient) -> None:
        """Ask the server to shut down, then stop the client and process."""
        try:
            await asyncio.wait_for(client.shutdown_async(None), timeout=SHUTDOWN_TIMEOUT)
            client.exit(None)
        except asyncio.TimeoutError:
            LOGGER.warning("Language server did not answer the shutdown request; terminating it")
        except Exception as e:
            LOGGER.warning(f"Graceful shutdown failed, terminating language server: {e}")
        await self._terminate(client)

    async def _terminate(self, client: ZapLanguageClient) -> None:
        try:
            await client.stop()
        except Exception as e:
            LOGGER.warning(f"Error while stopping language client: {e}")
