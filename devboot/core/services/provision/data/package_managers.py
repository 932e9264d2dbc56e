"""
L0 Data — Package manager table.

One entry per platform that has a package manager.  Pure data, no
logic: the resolver turns these into concrete commands.
"""

from __future__ import annotations

from dataclasses import dataclass

from devboot.core.models.platform import Platform


@dataclass(frozen=True)
class PackageManager:
    """How to drive one system package manager."""

    id: str
    binary: str
    install: tuple[str, ...]
    query: tuple[str, ...]
    needs_sudo: bool = False
    refresh: tuple[str, ...] | None = None
    # A required manager aborts the whole run when it is missing.
    required: bool = False
    install_hint: str = ""


PACKAGE_MANAGERS: dict[Platform, PackageManager] = {
    Platform.MACOS: PackageManager(
        id="brew",
        binary="brew",
        install=("brew", "install"),
        query=("brew", "list", "--versions"),
        required=True,
        install_hint=(
            '/bin/bash -c "$(curl -fsSL '
            'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
        ),
    ),
    Platform.DEBIAN: PackageManager(
        id="apt",
        binary="apt-get",
        install=("apt-get", "install", "-y"),
        query=("dpkg-query", "-W", "-f=${Status}"),
        needs_sudo=True,
        refresh=("apt-get", "update", "-qq"),
    ),
    Platform.FEDORA: PackageManager(
        id="dnf",
        binary="dnf",
        install=("dnf", "install", "-y"),
        query=("rpm", "-q"),
        needs_sudo=True,
    ),
    Platform.ARCH: PackageManager(
        id="pacman",
        binary="pacman",
        install=("pacman", "-S", "--noconfirm"),
        query=("pacman", "-Q"),
        needs_sudo=True,
    ),
}

# Homebrew installation roots (Intel, Apple Silicon).
BREW_PREFIXES: tuple[str, ...] = ("/usr/local", "/opt/homebrew")
