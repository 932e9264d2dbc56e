"""
Provisioning context — the host as seen by one run.

Bundles the detected platform, the resolved paths and the two host
primitives every layer needs: ``which`` (PATH lookup) and ``run``
(the subprocess runner).  Tests swap both for a simulated host.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from devboot.core.models.platform import Platform
from devboot.core.services.provision.execution.backup import BackupRecord
from devboot.core.services.provision.execution.subprocess_runner import run_subprocess


class Runner(Protocol):
    def __call__(
        self,
        cmd: list[str],
        *,
        needs_sudo: bool = False,
        timeout: int = 1800,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
        interactive: bool = False,
    ) -> dict[str, Any]:
        ...


@dataclass
class ProvisionContext:
    """Everything a step needs to know about the host."""

    platform: Platform
    home: Path
    zsh_custom: Path
    bundle_dir: Path
    backups: BackupRecord
    run: Runner = run_subprocess
    which: Callable[[str], str | None] = shutil.which
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    skip: frozenset[str] = frozenset()
    command_timeout: int = 1800
    # Package managers whose index was refreshed during this run.
    refreshed: set[str] = field(default_factory=set)

    def expand(self, path: str) -> Path:
        """Resolve ``~`` and ``{zsh_custom}`` against this host."""
        path = path.replace("{zsh_custom}", str(self.zsh_custom))
        if path == "~":
            return self.home
        if path.startswith("~/"):
            return self.home / path[2:]
        return Path(path)

    def execute(
        self,
        cmd: list[str],
        *,
        needs_sudo: bool = False,
        env_overrides: dict[str, str] | None = None,
        interactive: bool = False,
    ) -> dict[str, Any]:
        """Run a command with this run's timeout."""
        return self.run(
            cmd,
            needs_sudo=needs_sudo,
            timeout=self.command_timeout,
            env_overrides=env_overrides,
            interactive=interactive,
        )
