"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for provisioning
operations.  Logging, privilege escalation and error handling are
centralised here; callers get a result dict, never an exception.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def run_subprocess(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int = 1800,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
    interactive: bool = False,
) -> dict[str, Any]:
    """Run a command and report the result as a dict.

    ``sudo`` is prepended when the command needs root and we are not
    root already; sudo prompts on the controlling terminal, so no
    password ever passes through this process.

    ``interactive`` commands (chsh asking for a password through PAM)
    keep the terminal: nothing is captured, so their prompts stay
    visible and the result carries no output.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Whether the command requires root.
        timeout: Seconds before ``TimeoutExpired``.
        env_overrides: Extra env vars for the child process.
        cwd: Working directory for the command.
        interactive: Leave stdin/stdout/stderr attached to the terminal.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    if needs_sudo and not _is_root():
        cmd = ["sudo"] + cmd

    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    logger.info("CMD %s%s", " ".join(shlex.quote(c) for c in cmd), " (interactive)" if interactive else "")

    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=not interactive,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result.stdout:
        logger.debug("STDOUT %s", result.stdout.strip())
    if result.stderr:
        logger.debug("STDERR %s", result.stderr.strip())

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": result.stdout[-2000:] if result.stdout else "",
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": result.stderr[-2000:] if result.stderr else "",
        "stdout": result.stdout[-2000:] if result.stdout else "",
        "elapsed_ms": elapsed_ms,
    }
