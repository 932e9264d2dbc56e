"""
Tests for the use-case layer — apply, detect and status end to end.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

from devboot.core.config.loader import ProvisionerConfig
from devboot.core.models.platform import Platform
from devboot.core.use_cases.apply import build_context, run_apply
from devboot.core.use_cases.detect import run_detect
from devboot.core.use_cases.status import get_status
from tests.provision.simulated_host import OS_RELEASE, SimulatedHost


def _os_release(tmp_path: Path, distro: str = "ubuntu") -> Path:
    path = tmp_path / "os-release"
    path.write_text(OS_RELEASE[distro])
    return path


def _host_kwargs(host: SimulatedHost, tmp_path: Path) -> dict:
    return dict(
        which=host.which,
        runner=host.run,
        environ=host.environ,
        system="Linux",
        os_release=_os_release(tmp_path),
    )


class TestRunApply:
    def test_full_run(self, home: Path, tmp_path: Path):
        host = SimulatedHost(home, Platform.DEBIAN, binaries=("apt-get",))
        result = run_apply(**_host_kwargs(host, tmp_path))

        assert result.ok
        assert result.platform is Platform.DEBIAN
        assert result.report.changed
        assert result.recommended_steps
        data = result.to_dict()
        assert data["platform"] == "debian"
        assert data["counts"]["installed"] > 0
        assert "error" not in data

    def test_second_run_unchanged(self, home: Path, tmp_path: Path):
        host = SimulatedHost(home, Platform.DEBIAN, binaries=("apt-get",))
        run_apply(**_host_kwargs(host, tmp_path))
        result = run_apply(**_host_kwargs(host, tmp_path))
        assert result.ok
        assert not result.report.changed

    def test_fatal(self, home: Path, tmp_path: Path):
        host = SimulatedHost(home, Platform.MACOS)
        result = run_apply(
            which=host.which, runner=host.run, environ=host.environ,
            system="Darwin",
        )
        assert result.fatal
        assert "brew" in result.error
        assert result.recommended_steps == ()
        assert host.calls == []
        assert result.to_dict()["fatal"] is True

    def test_config_error(self, tmp_path: Path):
        result = run_apply(config_path=tmp_path / "missing.yml")
        assert not result.ok
        assert not result.fatal
        assert "not found" in result.error
        assert result.report is None

    def test_config_skip_and_backups_dir(self, home: Path, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text(textwrap.dedent(f"""\
            backups_dir: {tmp_path / "bk"}
            skip: [nvm, pyenv]
        """))
        (home / ".tmux.conf").write_text("# old\n")
        host = SimulatedHost(home, Platform.DEBIAN, binaries=("apt-get",))

        result = run_apply(config_path=config, **_host_kwargs(host, tmp_path))

        assert result.report.outcome_of("nvm") == "skipped"
        assert result.report.outcome_of("pyenv-init") == "skipped"
        assert result.report.backup_dir.startswith(str(tmp_path / "bk"))


class TestBuildContext:
    def test_zsh_custom_from_environment(self, home: Path):
        config = ProvisionerConfig(home=home)
        ctx = build_context(config, Platform.ARCH, environ={"ZSH_CUSTOM": "/opt/zsh"})
        assert ctx.zsh_custom == Path("/opt/zsh")
        assert ctx.expand("{zsh_custom}/plugins/x") == Path("/opt/zsh/plugins/x")

    def test_defaults(self, home: Path):
        ctx = build_context(ProvisionerConfig(home=home), Platform.DEBIAN, environ={})
        assert ctx.zsh_custom == home / ".oh-my-zsh" / "custom"
        assert ctx.backups.root == home / ".config-backups"
        assert ctx.expand("~/.zshrc") == home / ".zshrc"
        assert ctx.command_timeout == 1800


class TestDetectAndStatus:
    def test_detect(self, tmp_path: Path):
        result = run_detect(
            which=lambda name: "/usr/bin/dnf" if name == "dnf" else None,
            system="Linux",
            os_release=_os_release(tmp_path, "fedora"),
        )
        assert result.to_dict() == {
            "platform": "fedora",
            "package_manager": "dnf",
            "package_manager_found": True,
            "package_manager_required": False,
        }

    def test_detect_generic_linux(self, tmp_path: Path):
        result = run_detect(which=lambda name: None, system="Linux", os_release=tmp_path / "none")
        assert result.platform is Platform.LINUX_GENERIC
        assert result.package_manager is None

    def test_status_is_read_only(self, home: Path, tmp_path: Path):
        host = SimulatedHost(home, Platform.DEBIAN, binaries=("apt-get", "git", "tmux"))
        (home / ".nvm").mkdir()

        result = get_status(
            which=host.which, environ=host.environ,
            system="Linux", os_release=_os_release(tmp_path),
        )

        by_id = {t.id: t for t in result.tools}
        assert by_id["git"].present
        assert by_id["nvm"].present
        assert not by_id["fd"].present
        assert by_id["fd"].strategy == "apt install fd-find"
        assert by_id["tpm"].strategy.startswith("git ")
        assert host.calls == []
        assert result.to_dict()["missing"] == len(result.missing)

    def test_status_on_macos_marks_xclip_not_applicable(self, home: Path):
        host = SimulatedHost(home, Platform.MACOS, binaries=("brew",))
        result = get_status(which=host.which, environ=host.environ, system="Darwin")
        xclip = next(t for t in result.tools if t.id == "xclip")
        assert not xclip.applies
        assert xclip not in result.missing
