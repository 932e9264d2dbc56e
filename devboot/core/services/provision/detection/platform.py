"""
L3 Detection — Platform detection.

Maps the kernel name and ``/etc/os-release`` to exactly one
:class:`Platform`.  Never raises: anything unrecognised becomes
``LINUX_GENERIC`` (unknown Linux distribution) or ``UNKNOWN``.
"""

from __future__ import annotations

import logging
import platform as _platform
from pathlib import Path

from devboot.core.models.platform import Platform

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

_DISTRO_FAMILIES: dict[str, Platform] = {
    "ubuntu": Platform.DEBIAN,
    "debian": Platform.DEBIAN,
    "fedora": Platform.FEDORA,
    "rhel": Platform.FEDORA,
    "centos": Platform.FEDORA,
    "arch": Platform.ARCH,
    "manjaro": Platform.ARCH,
}


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release ``KEY=value`` lines (quotes stripped)."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        fields[key.strip()] = value.strip().strip('"').strip("'")
    return fields


def _linux_family(os_release: Path) -> Platform:
    try:
        fields = parse_os_release(os_release.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        logger.debug("No readable %s", os_release)
        return Platform.LINUX_GENERIC

    distro_id = fields.get("ID", "").lower()
    if distro_id in _DISTRO_FAMILIES:
        return _DISTRO_FAMILIES[distro_id]

    # Derivatives (Linux Mint, Pop!_OS, EndeavourOS...) name their parent.
    for parent in fields.get("ID_LIKE", "").lower().split():
        if parent in _DISTRO_FAMILIES:
            return _DISTRO_FAMILIES[parent]

    return Platform.LINUX_GENERIC


def detect_platform(
    system: str | None = None,
    os_release: Path = OS_RELEASE,
) -> Platform:
    """Detect the host platform.

    Args:
        system: Kernel name as reported by ``platform.system()``
            (``Darwin``, ``Linux``...).  Auto-detected when None.
        os_release: Distribution identification file.

    Returns:
        Exactly one Platform value.
    """
    system = _platform.system() if system is None else system

    if system == "Darwin":
        result = Platform.MACOS
    elif system == "Linux":
        result = _linux_family(os_release)
    else:
        result = Platform.UNKNOWN

    logger.info("Detected platform: %s (kernel %s)", result, system or "?")
    return result
