"""
L5 Orchestration — Action dispatcher.

``ensure_installed`` takes one tool from "maybe missing" to either
present, queued as a manual step, or failed.  It never retries: a
failed step is reported and the run moves on.  Re-running the whole
provisioner is the recovery path.
"""

from __future__ import annotations

import logging

from devboot.core.models.outcome import Outcome
from devboot.core.models.report import ProvisionReport
from devboot.core.models.tool import RemoteScript, ToolSpec
from devboot.core.services.provision.context import ProvisionContext
from devboot.core.services.provision.detection.probes import is_present
from devboot.core.services.provision.detection.system_packages import is_pkg_installed
from devboot.core.services.provision.detection.tool_version import get_tool_version
from devboot.core.services.provision.execution.hooks import run_hook
from devboot.core.services.provision.resolver.strategy import (
    Strategy,
    StrategyKind,
    build_alternate_cmd,
    build_pkg_install_cmd,
    select_strategy,
)

logger = logging.getLogger(__name__)


def ensure_installed(
    tool: ToolSpec,
    ctx: ProvisionContext,
    report: ProvisionReport,
) -> Outcome:
    """Make sure ``tool`` is installed on this host.

    Returns:
        ``ALREADY_PRESENT`` when a presence check (or the package
        manager) says the tool is there, ``INSTALLED`` after a
        successful install, ``MANUAL_STEP_QUEUED`` when no automated
        path exists (one instruction appended to the report),
        ``FAILED`` when the install command failed, ``SKIPPED`` when
        the tool does not apply to this platform, and ``FATAL`` when
        the platform's package manager itself is missing.
    """
    if not tool.applies_to(ctx.platform):
        logger.info("%s is not needed on %s", tool.label, ctx.platform)
        return Outcome.SKIPPED

    if is_present(tool, ctx):
        version = get_tool_version(tool.version_command, ctx) if tool.version_command else None
        if version:
            logger.info("%s is already installed: %s", tool.label, version)
        else:
            logger.info("%s is already installed", tool.label)
        return Outcome.ALREADY_PRESENT

    strategy = select_strategy(tool, ctx.platform)
    logger.debug("Strategy for %s on %s: %s", tool.id, ctx.platform, strategy.describe())

    if strategy.kind is StrategyKind.PACKAGE:
        return _install_package(tool, strategy, ctx, report)
    if strategy.kind is StrategyKind.ALTERNATE:
        return _run_alternate(tool, strategy, ctx, report)

    instruction = tool.manual_instruction()
    logger.warning("No automated install for %s on %s: %s", tool.label, ctx.platform, instruction)
    report.add_manual_step(instruction)
    return Outcome.MANUAL_STEP_QUEUED


def _install_package(
    tool: ToolSpec,
    strategy: Strategy,
    ctx: ProvisionContext,
    report: ProvisionReport,
) -> Outcome:
    manager = strategy.manager
    package = strategy.package
    assert manager is not None and package is not None

    if ctx.which(manager.binary) is None:
        logger.error("Package manager %s is not installed", manager.id)
        return Outcome.FATAL

    if is_pkg_installed(package, manager, ctx):
        logger.info("%s is already installed (%s)", package, manager.id)
        _after_install(tool, ctx, report, fresh=False)
        return Outcome.ALREADY_PRESENT

    if manager.refresh and manager.id not in ctx.refreshed:
        refresh = ctx.execute(list(manager.refresh), needs_sudo=manager.needs_sudo)
        ctx.refreshed.add(manager.id)
        if not refresh["ok"]:
            logger.warning("%s index refresh failed: %s", manager.id, refresh["error"])

    logger.info("Installing %s via %s...", package, manager.id)
    result = ctx.execute(build_pkg_install_cmd(manager, package), needs_sudo=manager.needs_sudo)
    if not result["ok"]:
        return _failed(tool, result, report)

    _after_install(tool, ctx, report, fresh=True)
    return Outcome.INSTALLED


def _run_alternate(
    tool: ToolSpec,
    strategy: Strategy,
    ctx: ProvisionContext,
    report: ProvisionReport,
) -> Outcome:
    action = strategy.action
    assert action is not None

    target = ctx.expand(action.target)
    if target.is_dir():
        logger.info("%s is already installed at %s", tool.label, target)
        return Outcome.ALREADY_PRESENT

    env = action.env if isinstance(action, RemoteScript) else {}
    if action.kind == "git":
        target.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Installing %s (%s %s)...", tool.label, action.kind, action.url)
    result = ctx.execute(build_alternate_cmd(action, target), env_overrides=env or None)
    if not result["ok"]:
        return _failed(tool, result, report)

    _after_install(tool, ctx, report, fresh=True)
    return Outcome.INSTALLED


def _after_install(
    tool: ToolSpec,
    ctx: ProvisionContext,
    report: ProvisionReport,
    *,
    fresh: bool,
) -> None:
    if tool.after_install:
        try:
            run_hook(tool.after_install, ctx, report)
        except OSError as e:
            logger.error("Post-install step for %s failed: %s", tool.label, e)
            report.warn(f"{tool.label}: post-install step failed: {e}")
    if fresh and tool.follow_up:
        report.add_manual_step(tool.follow_up)


def _failed(tool: ToolSpec, result: dict, report: ProvisionReport) -> Outcome:
    stderr = (result.get("stderr") or "").strip()
    logger.error("Failed to install %s: %s", tool.label, result["error"])
    if stderr:
        logger.error("  %s", stderr.splitlines()[-1])
    report.warn(f"{tool.label}: {result['error']}")
    return Outcome.FAILED
