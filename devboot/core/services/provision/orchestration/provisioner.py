"""
L5 Orchestration — Full provisioning run.

Runs the three phases in order against one ``ProvisionContext``:

    tools   → ensure_installed() per ToolSpec (plus post-install hooks)
    shell   → one idempotent edit per ConfigEdit
    bundle  → symlink / copy of every BundledConfig

Every step appends to the ``ProvisionReport``.  The only condition
that stops a run is a missing required package manager; everything
else is recorded and the run moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial

from devboot.core.models.edit import BundledConfig, ConfigEdit
from devboot.core.models.outcome import EditOutcome, LinkOutcome, Outcome
from devboot.core.models.report import ProvisionReport
from devboot.core.models.tool import ToolSpec
from devboot.core.services.provision.context import ProvisionContext
from devboot.core.services.provision.data.edits import BUNDLED_CONFIGS, SHELL_EDITS
from devboot.core.services.provision.data.package_managers import (
    PACKAGE_MANAGERS,
    PackageManager,
)
from devboot.core.services.provision.data.tools import TOOL_SPECS
from devboot.core.services.provision.execution.config_edit import (
    add_to_plugin_list,
    append_if_absent,
    install_symlink_or_copy,
    replace_line_if_matched,
    set_clipboard_binding,
)
from devboot.core.services.provision.orchestration.dispatcher import ensure_installed

logger = logging.getLogger(__name__)

# (phase, step id, outcome)
ProgressFn = Callable[[str, str, str], None]


class ProvisionAborted(Exception):
    """The run cannot continue on this host."""


class PackageManagerMissing(ProvisionAborted):
    """The platform's required package manager is not installed."""

    def __init__(self, manager: PackageManager) -> None:
        self.manager = manager
        message = f"{manager.id} is required but not installed."
        if manager.install_hint:
            message += f" Install it first: {manager.install_hint}"
        super().__init__(message)


def check_preconditions(ctx: ProvisionContext) -> None:
    """Fail before any step when the required package manager is absent.

    Raises:
        PackageManagerMissing: e.g. macOS without Homebrew.
    """
    manager = PACKAGE_MANAGERS.get(ctx.platform)
    if manager is None or not manager.required:
        return
    if ctx.which(manager.binary) is None:
        raise PackageManagerMissing(manager)


# ── Shell-config phase ──────────────────────────────────────────


def _tool_available(tool_id: str, report: ProvisionReport) -> bool:
    return report.outcome_of(tool_id) in (Outcome.ALREADY_PRESENT, Outcome.INSTALLED)


def apply_edit(
    edit: ConfigEdit,
    ctx: ProvisionContext,
    report: ProvisionReport,
) -> EditOutcome:
    """Apply one ConfigEdit; re-applying it never duplicates content."""
    if edit.id in ctx.skip:
        return EditOutcome.SKIPPED
    if edit.requires_tool and not _tool_available(edit.requires_tool, report):
        logger.info("Skipping %s: %s is not installed", edit.id, edit.requires_tool)
        return EditOutcome.SKIPPED

    path = ctx.expand(edit.target)
    try:
        if edit.kind == "block":
            changed = append_if_absent(edit.marker, edit.content, path)
        elif edit.kind == "line":
            changed = replace_line_if_matched(edit.pattern, edit.content, path)
        else:
            changed = add_to_plugin_list(edit.content, path)
    except OSError as e:
        logger.error("Failed to update %s (%s): %s", path, edit.id, e)
        report.warn(f"{edit.id}: {e}")
        return EditOutcome.FAILED

    return EditOutcome.APPLIED if changed else EditOutcome.NOOP


# ── Bundled-config phase ────────────────────────────────────────


def _transforms(ctx: ProvisionContext) -> dict[str, Callable[[str], str]]:
    return {
        "tmux_clipboard": partial(set_clipboard_binding, platform=ctx.platform),
    }


def install_bundled(
    bundled: BundledConfig,
    ctx: ProvisionContext,
    report: ProvisionReport,
) -> LinkOutcome:
    """Link or copy one bundled config into place."""
    if bundled.id in ctx.skip:
        return LinkOutcome.SKIPPED

    transform = None
    if bundled.transform:
        transform = _transforms(ctx).get(bundled.transform)
        if transform is None:
            report.warn(f"{bundled.id}: unknown transform {bundled.transform}")

    source = ctx.bundle_dir / bundled.source
    target = ctx.expand(bundled.target)
    try:
        outcome = install_symlink_or_copy(source, target, bundled.mode, ctx.backups, transform)
    except OSError as e:
        logger.error("Failed to install %s at %s: %s", bundled.id, target, e)
        report.warn(f"{bundled.id}: {e}")
        return LinkOutcome.FAILED

    if outcome is LinkOutcome.MISSING_SOURCE:
        report.warn(f"{bundled.id}: bundled config not found at {source}")
    elif outcome in (LinkOutcome.LINKED, LinkOutcome.COPIED) and bundled.follow_up:
        report.add_manual_step(bundled.follow_up)
    return outcome


# ── Full run ────────────────────────────────────────────────────


def provision(
    ctx: ProvisionContext,
    report: ProvisionReport,
    *,
    tools: Sequence[ToolSpec] = TOOL_SPECS,
    edits: Sequence[ConfigEdit] = SHELL_EDITS,
    bundled: Sequence[BundledConfig] = BUNDLED_CONFIGS,
    on_progress: ProgressFn | None = None,
) -> ProvisionReport:
    """Run every phase against the host described by ``ctx``.

    Args:
        ctx: Host context (platform, paths, runner).
        report: Report to fill in; returned for convenience.
        tools: Tool specs, installed in order.
        edits: Shell-config edits, applied in order.
        bundled: Bundled configs, installed in order.
        on_progress: Optional ``(phase, step_id, outcome)`` callback
            invoked after each step.

    Returns:
        The filled-in report.

    Raises:
        PackageManagerMissing: Before any step, or when a package
            install finds the manager gone.
    """
    report.platform = str(ctx.platform)
    check_preconditions(ctx)

    def _record(phase: str, step: str, outcome: str, detail: str = "") -> None:
        report.record(step, phase, outcome, detail)
        if on_progress is not None:
            on_progress(phase, step, str(outcome))

    logger.info("Provisioning %s (home=%s)", ctx.platform, ctx.home)

    for tool in tools:
        if tool.id in ctx.skip:
            _record("tools", tool.id, Outcome.SKIPPED, "disabled in config")
            continue
        try:
            outcome = ensure_installed(tool, ctx, report)
        except OSError as e:
            logger.error("Failed to install %s: %s", tool.label, e)
            report.warn(f"{tool.label}: {e}")
            outcome = Outcome.FAILED
        _record("tools", tool.id, outcome)
        if outcome is Outcome.FATAL:
            manager = PACKAGE_MANAGERS[ctx.platform]
            raise PackageManagerMissing(manager)

    for edit in edits:
        _record("shell", edit.id, apply_edit(edit, ctx, report))

    for item in bundled:
        _record("bundle", item.id, install_bundled(item, ctx, report))

    if ctx.backups.path is not None:
        report.backup_dir = str(ctx.backups.path)
        logger.info("Backups saved to %s", ctx.backups.path)

    return report
