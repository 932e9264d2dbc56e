"""
L2 Resolver — Install strategy selection.

Decides how a tool gets installed on a platform and turns that
decision into concrete commands.  Selection is an exhaustive dispatch
over :class:`Platform`; the manual-step branch is the explicit
fall-through when no automated path exists.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from devboot.core.models.platform import Platform
from devboot.core.models.tool import GitClone, RemoteScript, ToolSpec
from devboot.core.services.provision.data.package_managers import (
    PACKAGE_MANAGERS,
    PackageManager,
)

logger = logging.getLogger(__name__)


class StrategyKind(StrEnum):
    PACKAGE = "package"
    ALTERNATE = "alternate"
    MANUAL = "manual"


@dataclass(frozen=True)
class Strategy:
    """The selected way to install one tool."""

    kind: StrategyKind
    package: str | None = None
    manager: PackageManager | None = None
    action: GitClone | RemoteScript | None = None

    def describe(self) -> str:
        if self.kind is StrategyKind.PACKAGE and self.manager:
            return f"{self.manager.id} install {self.package}"
        if self.kind is StrategyKind.ALTERNATE and self.action:
            return f"{self.action.kind} {self.action.url}"
        return "manual"


def select_strategy(tool: ToolSpec, platform: Platform) -> Strategy:
    """Pick the installation strategy for ``tool`` on ``platform``.

    Resolution order:
      1. The platform's package manager, when the tool has a package
         name for it.
      2. The tool's alternate action (git clone / remote script), when
         it applies to the platform.
      3. A manual step.
    """
    if platform in (Platform.MACOS, Platform.DEBIAN, Platform.FEDORA, Platform.ARCH):
        package = tool.package_for(platform)
        if package:
            return Strategy(
                kind=StrategyKind.PACKAGE,
                package=package,
                manager=PACKAGE_MANAGERS[platform],
            )
    elif platform in (Platform.LINUX_GENERIC, Platform.UNKNOWN):
        pass  # no package manager to drive
    else:
        raise ValueError(f"Unhandled platform: {platform}")

    action = tool.alternate_for(platform)
    if action is not None:
        return Strategy(kind=StrategyKind.ALTERNATE, action=action)

    return Strategy(kind=StrategyKind.MANUAL)


def build_pkg_install_cmd(manager: PackageManager, package: str) -> list[str]:
    """e.g. ``["apt-get", "install", "-y", "fd-find"]``."""
    return [*manager.install, package]


def build_alternate_cmd(action: GitClone | RemoteScript, target: Path) -> list[str]:
    """Command for a git clone or a remote install script.

    Args:
        action: The alternate action.
        target: ``action.target`` already expanded for this host.
    """
    if isinstance(action, GitClone):
        cmd = ["git", "clone"]
        if action.depth:
            cmd.append(f"--depth={action.depth}")
        return cmd + [action.url, str(target)]

    # pipefail: a failed download must fail the step, not feed an empty script
    return [
        "bash", "-c",
        f"set -o pipefail; curl -fsSL {shlex.quote(action.url)} | {action.interpreter}",
    ]
