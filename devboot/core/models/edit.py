"""
Config edit models — idempotent changes to text configuration files.

``ConfigEdit`` describes a marker-guarded change to a shell rc file.
``BundledConfig`` describes a file or directory shipped with devboot
that is linked or copied into its live location.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, model_validator


class ConfigEdit(BaseModel):
    """A single idempotent edit to a text file.

    Kinds:
        ``block``  — append ``content`` unless ``marker`` is present.
        ``line``   — replace the first line matching ``pattern`` with
                     ``content`` unless that line is already there.
        ``plugin`` — add ``content`` to the shell ``plugins=( ... )`` list.
    """

    id: str
    kind: Literal["block", "line", "plugin"]
    target: str
    content: str
    marker: str = ""
    pattern: str = ""
    requires_tool: str | None = None

    @model_validator(mode="after")
    def _guard_present(self) -> ConfigEdit:
        # Without its guard an edit cannot tell it was already applied.
        if self.kind == "block" and not self.marker:
            raise ValueError(f"block edit {self.id!r} needs a marker")
        if self.kind == "line" and not self.pattern:
            raise ValueError(f"line edit {self.id!r} needs a pattern")
        return self


class BundledConfig(BaseModel):
    """Bundled configuration installed by symlink or copy."""

    id: str
    source: str  # relative to the bundle directory
    target: str
    mode: Literal["link", "copy"] = "link"
    transform: str | None = None  # name of a platform-specific text transform
    follow_up: str | None = None
