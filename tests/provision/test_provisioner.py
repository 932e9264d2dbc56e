"""
Tests for full provisioning runs against a simulated host.

Covers the run-level guarantees: a second run changes nothing, a
missing required package manager aborts before any side effect, and
per-step failures never stop the run.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from devboot.core.models.outcome import UNCHANGED, EditOutcome, LinkOutcome, Outcome
from devboot.core.models.platform import Platform
from devboot.core.models.report import ProvisionReport
from devboot.core.services.provision.data.edits import BUNDLED_CONFIGS, SHELL_EDITS
from devboot.core.services.provision.data.tools import TOOL_SPECS
from devboot.core.services.provision.execution.backup import BackupRecord
from devboot.core.services.provision.execution.config_edit import (
    PBCOPY_BINDING,
    XCLIP_BINDING,
)
from devboot.core.services.provision.orchestration.provisioner import (
    PackageManagerMissing,
    check_preconditions,
    install_bundled,
    provision,
)


def _tree(root: Path) -> dict[str, str]:
    """Relative path → file content (or link target) for every entry."""
    state = {}
    for p in sorted(root.rglob("*")):
        rel = str(p.relative_to(root))
        if p.is_symlink():
            state[rel] = f"-> {p.readlink()}"
        elif p.is_file():
            state[rel] = p.read_text()
        else:
            state[rel] = "<dir>"
    return state


def _outcomes(report: ProvisionReport, phase: str) -> dict[str, str]:
    return {r.step: r.outcome for r in report.steps if r.phase == phase}


class TestFatalPath:
    def test_macos_without_brew_has_zero_side_effects(self, make_host, make_ctx, home):
        host = make_host(Platform.MACOS)
        ctx = make_ctx(host)
        report = ProvisionReport()

        with pytest.raises(PackageManagerMissing) as exc:
            provision(ctx, report)

        assert "brew" in str(exc.value)
        assert "Homebrew/install" in str(exc.value)
        assert host.calls == []
        assert report.steps == []
        assert list(home.iterdir()) == []
        assert not ctx.backups.created

    def test_precondition_passes_with_brew(self, make_host, make_ctx):
        check_preconditions(make_ctx(make_host(Platform.MACOS, binaries=("brew",))))

    def test_linux_without_manager_is_not_a_precondition(self, make_host, make_ctx):
        check_preconditions(make_ctx(make_host(Platform.LINUX_GENERIC)))
        check_preconditions(make_ctx(make_host(Platform.DEBIAN)))

    def test_missing_apt_aborts_at_first_package(self, make_host, make_ctx):
        host = make_host(Platform.DEBIAN)
        report = ProvisionReport()

        with pytest.raises(PackageManagerMissing):
            provision(make_ctx(host), report)

        assert [(r.step, r.outcome) for r in report.steps] == [("git", "fatal")]
        assert host.calls == []


class TestIdempotence:
    def _run(self, host, make_ctx, tmp_path, second: int = 0):
        ctx = make_ctx(
            host,
            backups=BackupRecord(tmp_path / "backups", now=datetime(2025, 1, 2, 3, 4, second)),
        )
        return provision(ctx, ProvisionReport())

    def test_second_run_changes_nothing(self, make_host, make_ctx, home, tmp_path):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))

        first = self._run(host, make_ctx, tmp_path)
        after_first = _tree(home)
        calls_after_first = len(host.calls)

        second = self._run(host, make_ctx, tmp_path, second=9)

        assert first.changed
        assert not second.changed
        assert all(r.outcome in UNCHANGED for r in second.steps)
        assert set(_outcomes(second, "tools").values()) == {Outcome.ALREADY_PRESENT}
        assert set(_outcomes(second, "shell").values()) == {EditOutcome.NOOP}
        assert set(_outcomes(second, "bundle").values()) == {LinkOutcome.NOOP}
        assert _tree(home) == after_first
        # Only read-only version probes ran the second time.
        assert host.calls[calls_after_first:] == [["nvim", "--version"]]
        assert second.backup_dir is None

    def test_first_run_outcomes(self, make_host, make_ctx, home, tmp_path):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        report = self._run(host, make_ctx, tmp_path)

        tools = _outcomes(report, "tools")
        assert list(tools) == [t.id for t in TOOL_SPECS]
        assert set(tools.values()) == {Outcome.INSTALLED}
        assert set(_outcomes(report, "shell").values()) == {EditOutcome.APPLIED}
        assert _outcomes(report, "bundle") == {
            "nvim-config": LinkOutcome.LINKED,
            "tmux-config": LinkOutcome.COPIED,
        }
        assert len(report.steps) == len(TOOL_SPECS) + len(SHELL_EDITS) + len(BUNDLED_CONFIGS)

        zshrc = (home / ".zshrc").read_text()
        assert 'ZSH_THEME="powerlevel10k/powerlevel10k"' in zshrc
        assert "plugins=(git zsh-syntax-highlighting zsh-autosuggestions)" in zshrc
        assert zshrc.count("# pyenv configuration") == 1
        assert zshrc.count("# Custom aliases") == 1

        tmux_conf = (home / ".tmux.conf").read_text()
        assert f"\n{XCLIP_BINDING}\n" in tmux_conf
        assert f"\n# {PBCOPY_BINDING}\n" in tmux_conf

        assert (home / ".local" / "bin" / "fd").is_symlink()
        assert (home / ".local" / "bin" / "tfenv").is_symlink()
        assert (home / ".config" / "nvim").is_symlink()
        assert host.environ["SHELL"] == "/usr/bin/zsh"

    def test_manual_steps_are_unique_and_ordered(self, make_host, make_ctx, tmp_path):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        report = self._run(host, make_ctx, tmp_path)

        assert report.manual_steps == [
            "Log out and back in for the default shell change to take effect",
            "After tmux is running, press 'prefix + I' (capital i) to install tmux plugins",
            "Open nvim and let Lazy.nvim install plugins (first run may take a few minutes)",
        ]

    def test_macos_run(self, make_host, make_ctx, home, tmp_path):
        host = make_host(Platform.MACOS, binaries=("brew",))
        report = self._run(host, make_ctx, tmp_path)

        assert report.outcome_of("xclip") == Outcome.SKIPPED
        assert report.outcome_of("tfenv") == Outcome.INSTALLED
        assert ["brew", "install", "tfenv"] in host.calls
        assert host.sudo_calls == []
        assert f"\n{PBCOPY_BINDING}\n" in (home / ".tmux.conf").read_text()

    def test_existing_config_backed_up_once(self, make_host, make_ctx, home, tmp_path):
        (home / ".tmux.conf").write_text("# my old config\n")
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))

        first = self._run(host, make_ctx, tmp_path)
        second = self._run(host, make_ctx, tmp_path, second=9)

        assert first.backup_dir == str(tmp_path / "backups" / "20250102-030400")
        assert (Path(first.backup_dir) / ".tmux.conf").read_text() == "# my old config\n"
        assert second.backup_dir is None
        assert [p.name for p in (tmp_path / "backups").iterdir()] == ["20250102-030400"]


class TestPerStepFailures:
    def test_failed_tool_does_not_stop_run(self, make_host, make_ctx, home):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",), fail=("ohmyzsh",))
        report = provision(make_ctx(host), ProvisionReport())

        assert report.outcome_of("oh-my-zsh") == Outcome.FAILED
        assert report.outcome_of("tmux") == Outcome.INSTALLED
        assert any("oh-my-zsh" in w for w in report.warnings)
        # Blocks still land in a fresh rc file; the theme line has nothing to replace.
        assert report.outcome_of("zsh-theme") == EditOutcome.NOOP
        assert report.outcome_of("zsh-aliases") == EditOutcome.APPLIED

    def test_edit_skipped_when_required_tool_failed(self, make_host, make_ctx, home):
        (home / ".zshrc").write_text('ZSH_THEME="robbyrussell"\n')
        host = make_host(Platform.DEBIAN, binaries=("apt-get",), fail=("powerlevel10k",))
        report = provision(make_ctx(host), ProvisionReport())

        assert report.outcome_of("zsh-theme") == EditOutcome.SKIPPED
        assert 'ZSH_THEME="robbyrussell"' in (home / ".zshrc").read_text()

    def test_filesystem_error_in_edit(self, make_host, make_ctx, home):
        (home / ".zshrc").mkdir()
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        report = provision(make_ctx(host), ProvisionReport())

        assert report.outcome_of("zsh-keybindings") == EditOutcome.FAILED
        assert report.outcome_of("tmux-config") == LinkOutcome.COPIED
        assert any("zsh-keybindings" in w for w in report.warnings)

    def test_missing_bundle_source(self, make_host, make_ctx, tmp_path):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        ctx = make_ctx(host, bundle_dir=tmp_path / "empty-bundle")
        report = provision(ctx, ProvisionReport())

        assert report.outcome_of("nvim-config") == LinkOutcome.MISSING_SOURCE
        assert report.outcome_of("tmux-config") == LinkOutcome.MISSING_SOURCE
        assert len([w for w in report.warnings if "bundled config not found" in w]) == 2

    def test_skip_from_config(self, make_host, make_ctx, home):
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        ctx = make_ctx(host, skip=frozenset({"nvm", "zsh-aliases", "tmux-config"}))
        report = provision(ctx, ProvisionReport())

        assert report.outcome_of("nvm") == Outcome.SKIPPED
        assert report.outcome_of("zsh-aliases") == EditOutcome.SKIPPED
        assert report.outcome_of("tmux-config") == LinkOutcome.SKIPPED
        assert not (home / ".nvm").exists()
        assert not (home / ".tmux.conf").exists()


class TestProgress:
    def test_callback_sees_every_step(self, make_host, make_ctx):
        seen = []
        host = make_host(Platform.DEBIAN, binaries=("apt-get",))
        report = provision(
            make_ctx(host),
            ProvisionReport(),
            on_progress=lambda phase, step, outcome: seen.append((phase, step, outcome)),
        )
        assert seen == [(r.phase, r.step, r.outcome) for r in report.steps]
        assert seen[0] == ("tools", "git", "installed")


class TestInstallBundled:
    NVIM = next(b for b in BUNDLED_CONFIGS if b.id == "nvim-config")

    def test_skipped(self, make_host, make_ctx, report, home):
        ctx = make_ctx(make_host(Platform.DEBIAN), skip=frozenset({"nvim-config"}))
        assert install_bundled(self.NVIM, ctx, report) is LinkOutcome.SKIPPED
        assert not (home / ".config").exists()

    def test_filesystem_error_is_failed(self, make_host, make_ctx, report, home):
        (home / ".config").write_text("not a directory")
        ctx = make_ctx(make_host(Platform.DEBIAN))

        assert install_bundled(self.NVIM, ctx, report) is LinkOutcome.FAILED
        assert any(w.startswith("nvim-config:") for w in report.warnings)

    def test_linked_queues_follow_up_once(self, make_host, make_ctx, report):
        ctx = make_ctx(make_host(Platform.DEBIAN))

        assert install_bundled(self.NVIM, ctx, report) is LinkOutcome.LINKED
        steps = list(report.manual_steps)
        assert install_bundled(self.NVIM, ctx, report) is LinkOutcome.NOOP
        assert report.manual_steps == steps
