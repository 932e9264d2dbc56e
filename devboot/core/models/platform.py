"""
Platform model — the detected OS / distribution family.

Computed once per run by the environment prober and read everywhere
else. The set is closed: anything unrecognised maps to ``UNKNOWN``
(or ``LINUX_GENERIC`` for an unrecognised Linux distribution).
"""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    """OS / distribution family driving installation strategy selection."""

    MACOS = "macos"
    DEBIAN = "debian"
    FEDORA = "fedora"
    ARCH = "arch"
    LINUX_GENERIC = "linux-generic"
    UNKNOWN = "unknown"

    @property
    def is_linux(self) -> bool:
        return self in (
            Platform.DEBIAN,
            Platform.FEDORA,
            Platform.ARCH,
            Platform.LINUX_GENERIC,
        )
