"""
Step outcomes — what happened to a single provisioning step.
"""

from __future__ import annotations

from enum import StrEnum


class Outcome(StrEnum):
    """Result of ensuring one tool is installed."""

    ALREADY_PRESENT = "already-present"
    INSTALLED = "installed"
    MANUAL_STEP_QUEUED = "manual-step-queued"
    FATAL = "fatal"
    FAILED = "failed"
    SKIPPED = "skipped"


class EditOutcome(StrEnum):
    """Result of applying one shell-config edit."""

    APPLIED = "applied"
    NOOP = "noop"
    SKIPPED = "skipped"
    FAILED = "failed"


class LinkOutcome(StrEnum):
    """Result of installing one bundled config by symlink or copy."""

    NOOP = "noop"
    LINKED = "linked"
    COPIED = "copied"
    MISSING_SOURCE = "missing-source"
    SKIPPED = "skipped"
    FAILED = "failed"


# Outcomes that leave the host unchanged.
UNCHANGED = frozenset({
    Outcome.ALREADY_PRESENT.value,
    Outcome.SKIPPED.value,
    EditOutcome.NOOP.value,
    LinkOutcome.NOOP.value,
})
