"""
Apply use case — provision this machine.

The full vertical slice: load config, detect the platform, build the
host context, run every phase and hand back the report.  Exceptions
from below are turned into ``error`` / ``fatal`` fields so the CLI can
map them to exit codes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from devboot.core.config.loader import ConfigError, ProvisionerConfig, load_config
from devboot.core.models.platform import Platform
from devboot.core.models.report import ProvisionReport
from devboot.core.services.provision.context import ProvisionContext, Runner
from devboot.core.services.provision.data.edits import RECOMMENDED_STEPS
from devboot.core.services.provision.detection.platform import OS_RELEASE, detect_platform
from devboot.core.services.provision.execution.backup import BackupRecord
from devboot.core.services.provision.orchestration.provisioner import (
    ProgressFn,
    ProvisionAborted,
    provision,
)

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Result of a provisioning run."""

    report: ProvisionReport | None = None
    platform: Platform | None = None
    recommended_steps: tuple[str, ...] = ()
    error: str | None = None
    fatal: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            result["fatal"] = self.fatal
        if self.platform is not None:
            result["platform"] = str(self.platform)
        if self.report is not None:
            result["report"] = self.report.model_dump()
            result["counts"] = self.report.counts()
            result["changed"] = self.report.changed
        if self.recommended_steps:
            result["recommended_steps"] = list(self.recommended_steps)
        return result


def build_context(
    config: ProvisionerConfig,
    platform: Platform,
    *,
    which: Callable[[str], str | None] | None = None,
    runner: Runner | None = None,
    environ: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> ProvisionContext:
    """Build the host context for one run from validated config."""
    kwargs: dict = {}
    if which is not None:
        kwargs["which"] = which
    if runner is not None:
        kwargs["run"] = runner
    if environ is not None:
        kwargs["environ"] = dict(environ)

    return ProvisionContext(
        platform=platform,
        home=config.home,
        zsh_custom=config.resolved_zsh_custom(
            dict(environ) if environ is not None else None,
        ),
        bundle_dir=config.bundle_dir,
        backups=BackupRecord(config.resolved_backups_dir(), now=now),
        skip=frozenset(config.skip),
        command_timeout=config.command_timeout,
        **kwargs,
    )


def run_apply(
    config_path: Path | None = None,
    *,
    on_progress: ProgressFn | None = None,
    which: Callable[[str], str | None] | None = None,
    runner: Runner | None = None,
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
    os_release: Path | None = None,
) -> ApplyResult:
    """Provision the current machine.

    Args:
        config_path: Optional explicit path to the config file.
        on_progress: ``(phase, step_id, outcome)`` callback per step.
        which / runner / environ: Host primitives; the real host when None.
        system / os_release: Platform detection overrides.

    Returns:
        ApplyResult; ``fatal`` is set when the run was aborted before
        or during the tool phase.
    """
    result = ApplyResult()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    platform = detect_platform(system=system, os_release=os_release or OS_RELEASE)
    result.platform = platform

    ctx = build_context(config, platform, which=which, runner=runner, environ=environ)
    report = ProvisionReport(platform=str(platform))
    result.report = report

    try:
        provision(ctx, report, on_progress=on_progress)
    except ProvisionAborted as e:
        logger.error("Provisioning aborted: %s", e)
        result.error = str(e)
        result.fatal = True
        return result

    result.recommended_steps = tuple(RECOMMENDED_STEPS)
    return result
