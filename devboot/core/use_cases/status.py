"""
Status use case — read-only presence table of every tool.

Only the side-effect-free presence checks run here; nothing is
installed, queried through a package manager, or written.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from devboot.core.config.loader import ConfigError, load_config
from devboot.core.models.platform import Platform
from devboot.core.services.provision.data.tools import TOOL_SPECS
from devboot.core.services.provision.detection.platform import OS_RELEASE, detect_platform
from devboot.core.services.provision.detection.probes import is_present
from devboot.core.services.provision.resolver.strategy import select_strategy
from devboot.core.use_cases.apply import build_context


@dataclass
class ToolStatus:
    id: str
    label: str
    applies: bool
    present: bool
    strategy: str = ""


@dataclass
class StatusResult:
    """Presence of every tool on this host."""

    platform: Platform | None = None
    tools: list[ToolStatus] = field(default_factory=list)
    error: str | None = None

    @property
    def missing(self) -> list[ToolStatus]:
        return [t for t in self.tools if t.applies and not t.present]

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["platform"] = str(self.platform)
        result["tools"] = [
            {
                "id": t.id,
                "label": t.label,
                "applies": t.applies,
                "present": t.present,
                "strategy": t.strategy,
            }
            for t in self.tools
        ]
        result["missing"] = len(self.missing)
        return result


def get_status(
    config_path: Path | None = None,
    *,
    which: Callable[[str], str | None] | None = None,
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
    os_release: Path | None = None,
) -> StatusResult:
    """Evaluate every tool's presence checks without changing anything."""
    result = StatusResult()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    platform = detect_platform(system=system, os_release=os_release or OS_RELEASE)
    result.platform = platform
    ctx = build_context(config, platform, which=which, environ=environ)

    for tool in TOOL_SPECS:
        applies = tool.applies_to(platform) and tool.id not in ctx.skip
        present = applies and is_present(tool, ctx)
        strategy = ""
        if applies and not present:
            strategy = select_strategy(tool, platform).describe()
        result.tools.append(ToolStatus(
            id=tool.id,
            label=tool.label,
            applies=applies,
            present=present,
            strategy=strategy,
        ))

    return result
