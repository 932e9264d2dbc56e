"""
L3 Detection — Installed tool versions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devboot.core.services.provision.context import ProvisionContext


def get_tool_version(command: list[str], ctx: ProvisionContext) -> str | None:
    """First line of a tool's version output, or None if it cannot run."""
    if not command or ctx.which(command[0]) is None:
        return None
    result = ctx.execute(command)
    if not result["ok"]:
        return None
    lines = result.get("stdout", "").strip().splitlines()
    return lines[0] if lines else None
