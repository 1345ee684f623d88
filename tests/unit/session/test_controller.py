"""Tests for zap_launcher.session.controller."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, List, Optional

import pytest
from lsprotocol import types as lsp

from zap_launcher.bootstrap.resolver import SOURCE_INSTALLED, ResolvedBinary
from zap_launcher.config.models import LauncherConfig
from zap_launcher.core.errors import (
    AlreadyStarted,
    DownloadFailed,
    SessionLaunchFailed,
)
from zap_launcher.session.client import create_client
from zap_launcher.session.controller import (
    SessionController,
    SessionState,
    server_environment,
)

BINARY = ResolvedBinary(
    path=Path("/opt/zap/zap-language-server"), source=SOURCE_INSTALLED, version="1.2.0"
)


class FakeClient:
    """Stands in for the pygls language client."""

    def __init__(self, fail_launch: bool = False, fail_initialize: bool = False,
                 hang_initialize: bool = False, fail_shutdown: bool = False) -> None:
        self.fail_launch = fail_launch
        self.fail_initialize = fail_initialize
        self.hang_initialize = hang_initialize
        self.fail_shutdown = fail_shutdown
        self.exited = asyncio.Event()
        self.started_with: Optional[tuple] = None
        self.env: Optional[dict] = None
        self.initialize_params: Optional[lsp.InitializeParams] = None
        self.calls: List[str] = []

    async def start_io(self, cmd: str, *args: str, env: Optional[dict] = None) -> None:
        self.calls.append("start_io")
        if self.fail_launch:
            raise FileNotFoundError(cmd)
        self.started_with = (cmd, *args)
        self.env = env

    async def initialize_async(self, params: lsp.InitializeParams) -> Any:
        self.calls.append("initialize")
        self.initialize_params = params
        if self.fail_initialize:
            raise RuntimeError("server crashed")
        if self.hang_initialize:
            await asyncio.Event().wait()
        return lsp.InitializeResult(
            capabilities=lsp.ServerCapabilities(),
            server_info=lsp.ServerInfo(name="zap", version="1.2.0"),
        )

    def initialized(self, params: lsp.InitializedParams) -> None:
        self.calls.append("initialized")

    async def shutdown_async(self, params: None) -> None:
        self.calls.append("shutdown")
        if self.fail_shutdown:
            raise RuntimeError("broken pipe")

    def exit(self, params: None) -> None:
        self.calls.append("exit")

    async def stop(self) -> None:
        self.calls.append("stop")
        self.exited.set()


class FakeResolver:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls = 0

    def resolve(self) -> ResolvedBinary:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return BINARY


class ClientFactory:
    """Hands out a fresh FakeClient per launch and remembers them."""

    def __init__(self, **client_kwargs: Any) -> None:
        self.client_kwargs = client_kwargs
        self.clients: List[FakeClient] = []

    def __call__(self) -> FakeClient:
        client = FakeClient(**self.client_kwargs)
        self.clients.append(client)
        return client


def _controller(
    factory: Optional[ClientFactory] = None,
    resolver: Optional[FakeResolver] = None,
    config: Optional[LauncherConfig] = None,
    root_path: Optional[Path] = None,
) -> SessionController:
    return SessionController(
        config or LauncherConfig(),
        resolver or FakeResolver(),
        client_factory=factory or ClientFactory(),
        root_path=root_path,
    )


class TestStart:
    """Tests for SessionController.start."""

    @pytest.mark.asyncio
    async def test_start_launches_and_handshakes(self, tmp_path: Path) -> None:
        factory = ClientFactory()
        controller = _controller(factory, root_path=tmp_path)

        session = await controller.start()

        client = factory.clients[0]
        assert controller.state == SessionState.RUNNING
        assert controller.is_running
        assert controller.binary_path == BINARY.path
        assert session.command == [str(BINARY.path), "serve"]
        assert client.started_with == (str(BINARY.path), "serve")
        assert client.calls == ["start_io", "initialize", "initialized"]
        assert client.initialize_params.root_uri == tmp_path.resolve().as_uri()
        assert "PATH" in client.env

    @pytest.mark.asyncio
    async def test_configured_args(self) -> None:
        config = LauncherConfig()
        config.server.args = ["serve", "--stdio"]
        factory = ClientFactory()
        await _controller(factory, config=config).start()
        assert factory.clients[0].started_with == (str(BINARY.path), "serve", "--stdio")

    @pytest.mark.asyncio
    async def test_second_start_raises(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory)
        await controller.start()

        with pytest.raises(AlreadyStarted):
            await controller.start()

        assert len(factory.clients) == 1
        assert controller.is_running

    @pytest.mark.asyncio
    async def test_concurrent_starts_launch_once(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory)

        results = await asyncio.gather(
            controller.start(), controller.start(), return_exceptions=True
        )

        assert sum(isinstance(r, AlreadyStarted) for r in results) == 1
        assert len(factory.clients) == 1

    @pytest.mark.asyncio
    async def test_provisioning_failure_leaves_stopped(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory, resolver=FakeResolver(DownloadFailed("offline")))

        with pytest.raises(DownloadFailed):
            await controller.start()

        assert controller.state == SessionState.STOPPED
        assert controller.session is None
        assert factory.clients == []

    @pytest.mark.asyncio
    async def test_process_launch_failure(self) -> None:
        controller = _controller(ClientFactory(fail_launch=True))

        with pytest.raises(SessionLaunchFailed, match="Failed to launch"):
            await controller.start()

        assert controller.state == SessionState.STOPPED

    @pytest.mark.asyncio
    async def test_handshake_failure_stops_client(self) -> None:
        factory = ClientFactory(fail_initialize=True)
        controller = _controller(factory)

        with pytest.raises(SessionLaunchFailed, match="server crashed"):
            await controller.start()

        assert controller.state == SessionState.STOPPED
        assert factory.clients[0].calls[-1] == "stop"

    @pytest.mark.asyncio
    async def test_handshake_timeout(self) -> None:
        config = LauncherConfig()
        config.session.startup_timeout = 0.05
        factory = ClientFactory(hang_initialize=True)
        controller = _controller(factory, config=config)

        with pytest.raises(SessionLaunchFailed, match="within"):
            await controller.start()

        assert controller.state == SessionState.STOPPED
        assert factory.clients[0].calls[-1] == "stop"

    @pytest.mark.asyncio
    async def test_start_after_failure(self) -> None:
        resolver = FakeResolver(DownloadFailed("offline"))
        controller = _controller(resolver=resolver)
        with pytest.raises(DownloadFailed):
            await controller.start()

        resolver.error = None
        await controller.start()
        assert controller.is_running


class TestStop:
    """Tests for SessionController.stop."""

    @pytest.mark.asyncio
    async def test_stop_without_session(self) -> None:
        controller = _controller()
        assert await controller.stop() is False
        assert controller.state == SessionState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_running_session(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory)
        await controller.start()

        assert await controller.stop() is True

        assert controller.state == SessionState.STOPPED
        assert controller.session is None
        assert controller.binary_path is None
        assert factory.clients[0].calls[-3:] == ["shutdown", "exit", "stop"]

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self) -> None:
        controller = _controller()
        await controller.start()
        assert await controller.stop() is True
        assert await controller.stop() is False

    @pytest.mark.asyncio
    async def test_failed_graceful_shutdown_still_stops(self) -> None:
        factory = ClientFactory(fail_shutdown=True)
        controller = _controller(factory)
        await controller.start()

        assert await controller.stop() is True

        assert controller.state == SessionState.STOPPED
        assert "exit" not in factory.clients[0].calls
        assert factory.clients[0].calls[-1] == "stop"


class TestRestart:
    """Tests for SessionController.restart."""

    @pytest.mark.asyncio
    async def test_restart_launches_new_session(self) -> None:
        factory = ClientFactory()
        resolver = FakeResolver()
        controller = _controller(factory, resolver=resolver)
        first = await controller.start()

        second = await controller.restart()

        assert second is not first
        assert len(factory.clients) == 2
        assert factory.clients[0].calls[-1] == "stop"
        assert controller.session is second
        assert resolver.calls == 2

    @pytest.mark.asyncio
    async def test_restart_when_stopped_starts(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory)
        await controller.restart()
        assert controller.is_running
        assert len(factory.clients) == 1

    @pytest.mark.asyncio
    async def test_restart_failure_leaves_stopped(self) -> None:
        resolver = FakeResolver()
        controller = _controller(resolver=resolver)
        await controller.start()

        resolver.error = DownloadFailed("offline")
        with pytest.raises(DownloadFailed):
            await controller.restart()

        assert controller.state == SessionState.STOPPED
        assert controller.session is None


class TestWaitClosed:
    @pytest.mark.asyncio
    async def test_returns_when_server_exits(self) -> None:
        factory = ClientFactory()
        controller = _controller(factory)
        await controller.start()

        factory.clients[0].exited.set()
        await asyncio.wait_for(controller.wait_closed(), timeout=1)

    @pytest.mark.asyncio
    async def test_returns_immediately_without_session(self) -> None:
        await asyncio.wait_for(_controller().wait_closed(), timeout=1)


class TestServerEnvironment:
    def test_carries_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", "/custom/bin")
        assert server_environment()["PATH"] == "/custom/bin"

    def test_defaults_path_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PATH", raising=False)
        assert server_environment()["PATH"]


class TestDefaultClientFactory:
    def test_uses_zap_language_client(self) -> None:
        controller = SessionController(LauncherConfig(), FakeResolver())
        assert controller._client_factory is create_client
