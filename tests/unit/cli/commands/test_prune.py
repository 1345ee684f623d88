"""Tests for the prune command."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

import pytest

from zap_launcher.bootstrap.paths import LauncherPaths
from zap_launcher.bootstrap.state import VersionStore
from zap_launcher.cli.commands.prune import PruneCommand
from zap_launcher.cli.exit_codes import EXIT_SUCCESS
from zap_launcher.config.models import LauncherConfig


class TestPruneCommand:
    def test_nothing_recorded(
        self, isolated_home: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        stale = LauncherPaths(isolated_home).bin_dir / "zap-language-server-0.9.0"
        stale.mkdir(parents=True)

        assert PruneCommand().execute(Namespace(), LauncherConfig()) == EXIT_SUCCESS

        assert "nothing to prune" in capsys.readouterr().out
        assert stale.exists()

    def test_removes_other_versions(
        self, isolated_home: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        paths = LauncherPaths(isolated_home)
        for version in ("0.9.0", "1.0.0"):
            paths.version_dir("zap-language-server", version).mkdir(parents=True)
        VersionStore(paths.state_file).set("1.0.0")

        assert PruneCommand().execute(Namespace(), LauncherConfig()) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "Removed" in out and "zap-language-server-0.9.0" in out
        assert [p.name for p in paths.bin_dir.iterdir()] == ["zap-language-server-1.0.0"]
