"""
Simulated-host fixtures for provisioning tests.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from devboot.core.models.platform import Platform
from devboot.core.models.report import ProvisionReport
from devboot.core.services.provision.context import ProvisionContext
from devboot.core.services.provision.execution.backup import BackupRecord
from tests.provision.simulated_host import SimulatedHost

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5)


@pytest.fixture
def report() -> ProvisionReport:
    return ProvisionReport()


@pytest.fixture
def make_host(home: Path):
    """Factory: ``make_host(Platform.DEBIAN, binaries=("apt-get",))``."""

    def _make(platform: Platform, **kwargs) -> SimulatedHost:
        return SimulatedHost(home, platform, **kwargs)

    return _make


@pytest.fixture
def make_ctx(home: Path, tmp_path: Path, bundle_dir: Path):
    """Factory: a ProvisionContext wired to a SimulatedHost."""

    def _make(host: SimulatedHost, **overrides) -> ProvisionContext:
        kwargs = dict(
            platform=host.platform,
            home=home,
            zsh_custom=home / ".oh-my-zsh" / "custom",
            bundle_dir=bundle_dir,
            backups=BackupRecord(tmp_path / "backups", now=FIXED_NOW),
            run=host.run,
            which=host.which,
            environ=host.environ,
        )
        kwargs.update(overrides)
        return ProvisionContext(**kwargs)

    return _make
