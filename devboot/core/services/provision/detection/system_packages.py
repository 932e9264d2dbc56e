"""
L3 Detection — System package status.

Asks the package manager itself whether a package is installed.
This catches tools whose binary is not where the presence check
looked (``fd-find`` installs ``fdfind`` on Debian, for example).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from devboot.core.services.provision.data.package_managers import PackageManager

if TYPE_CHECKING:
    from devboot.core.services.provision.context import ProvisionContext


def is_pkg_installed(package: str, manager: PackageManager, ctx: ProvisionContext) -> bool:
    """Check if a single system package is installed.

    Uses the query command of the given manager:
      apt    → dpkg-query -W -f='${Status}' PKG
      dnf    → rpm -q PKG
      pacman → pacman -Q PKG
      brew   → brew list --versions PKG

    Returns:
        True if installed, False if not installed or the check failed.
    """
    result = ctx.execute([*manager.query, package])
    if not result["ok"]:
        return False
    if manager.id == "apt":
        return "install ok installed" in result.get("stdout", "")
    if manager.id == "brew":
        # brew exits 0 with empty output for some unknown names
        return bool(result.get("stdout", "").strip())
    return True
