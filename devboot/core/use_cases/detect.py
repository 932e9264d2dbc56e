"""
Detect use case — report the platform and its package manager.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from devboot.core.models.platform import Platform
from devboot.core.services.provision.data.package_managers import PACKAGE_MANAGERS
from devboot.core.services.provision.detection.platform import OS_RELEASE, detect_platform


@dataclass
class DetectResult:
    """Detected platform facts."""

    platform: Platform
    package_manager: str | None = None
    package_manager_found: bool = False
    package_manager_required: bool = False

    def to_dict(self) -> dict:
        return {
            "platform": str(self.platform),
            "package_manager": self.package_manager,
            "package_manager_found": self.package_manager_found,
            "package_manager_required": self.package_manager_required,
        }


def run_detect(
    *,
    which: Callable[[str], str | None] | None = None,
    system: str | None = None,
    os_release: Path | None = None,
) -> DetectResult:
    which = which or shutil.which
    platform = detect_platform(system=system, os_release=os_release or OS_RELEASE)
    result = DetectResult(platform=platform)

    manager = PACKAGE_MANAGERS.get(platform)
    if manager is not None:
        result.package_manager = manager.id
        result.package_manager_found = which(manager.binary) is not None
        result.package_manager_required = manager.required
    return result
