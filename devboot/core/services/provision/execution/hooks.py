"""
L4 Execution — Post-install hooks.

Small follow-up actions named by ``ToolSpec.after_install``.  Each
hook is guarded by its own existence check, so running it again after
a partial run changes nothing that is already in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from devboot.core.models.platform import Platform
from devboot.core.models.report import ProvisionReport
from devboot.core.services.provision.data.package_managers import BREW_PREFIXES

if TYPE_CHECKING:
    from devboot.core.services.provision.context import ProvisionContext

logger = logging.getLogger(__name__)

HookFn = Callable[["ProvisionContext", ProvisionReport], None]


def set_default_shell(ctx: ProvisionContext, report: ProvisionReport) -> None:
    """Make zsh the login shell unless it already is."""
    zsh = ctx.which("zsh")
    if zsh is None:
        report.warn("zsh is not on PATH; default shell left unchanged")
        return
    if ctx.environ.get("SHELL") == zsh:
        return

    logger.info("Setting zsh as default shell...")
    # chsh prompts for the account password.
    result = ctx.execute(["chsh", "-s", zsh], interactive=True)
    if result["ok"]:
        report.add_manual_step("Log out and back in for the default shell change to take effect")
    else:
        report.warn(f"Could not change default shell to {zsh}: {result['error']}")


def _fzf_install_scripts(ctx: ProvisionContext) -> list[Path]:
    candidates = [ctx.home / ".fzf" / "install"]
    candidates += [Path(prefix) / "opt" / "fzf" / "install" for prefix in BREW_PREFIXES]
    return candidates


def fzf_shell_integration(ctx: ProvisionContext, report: ProvisionReport) -> None:
    """Install fzf key bindings and completion without touching rc files."""
    for script in _fzf_install_scripts(ctx):
        if script.is_file():
            result = ctx.execute(
                [str(script), "--key-bindings", "--completion", "--no-update-rc"],
            )
            if not result["ok"]:
                report.warn(f"fzf shell integration failed: {result['error']}")
            return
    logger.debug("No fzf install script found; skipping shell integration")


def link_fd(ctx: ProvisionContext, report: ProvisionReport) -> None:
    """Debian ships fd as ``fdfind``; expose it as ``fd`` in ~/.local/bin."""
    if ctx.platform is not Platform.DEBIAN:
        return
    link = ctx.home / ".local" / "bin" / "fd"
    if link.exists() or link.is_symlink():
        return
    fdfind = ctx.which("fdfind")
    if fdfind is None:
        report.warn("fdfind not found on PATH; cannot create the fd symlink")
        return
    link.parent.mkdir(parents=True, exist_ok=True)
    link.symlink_to(fdfind)
    logger.info("Linked %s -> %s", link, fdfind)


def link_tfenv(ctx: ProvisionContext, report: ProvisionReport) -> None:
    """Expose every tfenv executable in ~/.local/bin."""
    bin_dir = ctx.home / ".tfenv" / "bin"
    if not bin_dir.is_dir():
        return
    local_bin = ctx.home / ".local" / "bin"
    local_bin.mkdir(parents=True, exist_ok=True)
    for executable in sorted(bin_dir.iterdir()):
        link = local_bin / executable.name
        if link.exists() or link.is_symlink():
            continue
        link.symlink_to(executable)
        logger.info("Linked %s -> %s", link, executable)


def neovim_version_hint(ctx: ProvisionContext, report: ProvisionReport) -> None:
    if ctx.platform is Platform.DEBIAN:
        logger.warning(
            "Debian/Ubuntu packages of neovim can be outdated; if plugins complain, "
            "install a newer release from https://github.com/neovim/neovim/releases"
        )


POST_INSTALL_HOOKS: dict[str, HookFn] = {
    "set_default_shell": set_default_shell,
    "fzf_shell_integration": fzf_shell_integration,
    "link_fd": link_fd,
    "link_tfenv": link_tfenv,
    "neovim_version_hint": neovim_version_hint,
}


def run_hook(name: str, ctx: ProvisionContext, report: ProvisionReport) -> None:
    """Run a named hook.  Filesystem errors propagate to the caller."""
    hook = POST_INSTALL_HOOKS.get(name)
    if hook is None:
        report.warn(f"Unknown post-install hook: {name}")
        return
    hook(ctx, report)
