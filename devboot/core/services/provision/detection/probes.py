"""
L3 Detection — Presence probes.

Read-only predicates behind every "already applied?" guard.  None of
them mutate anything, so they are safe to call any number of times.
A missing or unreadable file is never an error here: it simply does
not contain the marker.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from devboot.core.models.tool import PresenceCheck, ToolSpec

if TYPE_CHECKING:
    from devboot.core.services.provision.context import ProvisionContext

logger = logging.getLogger(__name__)


def marker_present(marker: str, text: str) -> bool:
    """Whether the literal ``marker`` occurs in ``text``."""
    return bool(marker) and marker in text


def read_text(path: Path) -> str | None:
    """File contents, or None if the file is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None


def file_contains(path: Path, marker: str) -> bool:
    text = read_text(path)
    return text is not None and marker_present(marker, text)


def binary_on_path(name: str, ctx: ProvisionContext) -> bool:
    return ctx.which(name) is not None


def directory_exists(path: Path) -> bool:
    return path.is_dir()


def exists(check: PresenceCheck, ctx: ProvisionContext) -> bool:
    """Evaluate one presence check against the host."""
    if check.kind == "binary":
        return binary_on_path(check.target, ctx)
    if check.kind == "directory":
        return directory_exists(ctx.expand(check.target))
    if check.kind == "marker":
        return file_contains(ctx.expand(check.target), check.marker)
    return False


def is_present(tool: ToolSpec, ctx: ProvisionContext) -> bool:
    """A tool is present when any of its checks passes."""
    return any(exists(c, ctx) for c in tool.checks)
