"""
Tests for presence probes and tool version lookup.
"""

from __future__ import annotations

from pathlib import Path

from devboot.core.models.platform import Platform
from devboot.core.models.tool import PresenceCheck, ToolSpec
from devboot.core.services.provision.detection.probes import (
    binary_on_path,
    directory_exists,
    exists,
    file_contains,
    is_present,
    marker_present,
)
from devboot.core.services.provision.detection.tool_version import get_tool_version


class TestPureProbes:
    def test_marker_present(self):
        assert marker_present("# pyenv", "x\n# pyenv\ny")
        assert not marker_present("# pyenv", "x\ny")
        assert not marker_present("", "anything")

    def test_file_contains_missing_file(self, tmp_path: Path):
        assert not file_contains(tmp_path / "nope", "marker")

    def test_file_contains_directory(self, tmp_path: Path):
        assert not file_contains(tmp_path, "marker")

    def test_directory_exists(self, tmp_path: Path):
        assert directory_exists(tmp_path)
        (tmp_path / "file").write_text("x")
        assert not directory_exists(tmp_path / "file")
        assert not directory_exists(tmp_path / "missing")


class TestHostProbes:
    def test_binary_on_path(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN, binaries=("git",))
        ctx = make_ctx(host)
        assert binary_on_path("git", ctx)
        assert not binary_on_path("rg", ctx)

    def test_exists_expands_home(self, make_host, make_ctx, home: Path):
        ctx = make_ctx(make_host(Platform.DEBIAN))
        (home / ".nvm").mkdir()
        (home / ".zshrc").write_text("# nvm\n")

        assert exists(PresenceCheck.directory("~/.nvm"), ctx)
        assert exists(PresenceCheck.file_marker("~/.zshrc", "# nvm"), ctx)
        assert not exists(PresenceCheck.file_marker("~/.zshrc", "# pyenv"), ctx)

    def test_exists_does_not_run_commands(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN)
        exists(PresenceCheck.binary("git"), make_ctx(host))
        assert host.calls == []

    def test_any_check_is_enough(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN, binaries=("batcat",))
        tool = ToolSpec(
            id="bat",
            label="bat",
            checks=[PresenceCheck.binary("bat"), PresenceCheck.binary("batcat")],
        )
        assert is_present(tool, make_ctx(host))


class TestToolVersion:
    def test_first_line(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN, binaries=("git",))
        assert get_tool_version(["git", "--version"], make_ctx(host)) == "git 1.0.0"

    def test_binary_missing(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN)
        assert get_tool_version(["git", "--version"], make_ctx(host)) is None
        assert host.calls == []

    def test_command_fails(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN, binaries=("git",), fail=("--version",))
        assert get_tool_version(["git", "--version"], make_ctx(host)) is None

    def test_empty_command(self, make_host, make_ctx):
        assert get_tool_version([], make_ctx(make_host(Platform.DEBIAN))) is None
