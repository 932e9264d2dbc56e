"""
Logging configuration — one call from the CLI before any step runs.

Only the ``devboot`` logger hierarchy is configured; every module's
``logging.getLogger(__name__)`` inherits from it.  Console output goes
to stderr so ``--json`` reports on stdout stay parseable.

Console level, highest precedence first:
    --debug > --verbose > --quiet > DEVBOOT_LOG_LEVEL > WARNING

DEVBOOT_LOG_FILE adds a file handler, at DEVBOOT_LOG_FILE_LEVEL
(default DEBUG) so a quiet console run still leaves a full trace.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

PACKAGE_LOGGER = "devboot"

# Layer modules log under long dotted names; the console shows them
# relative to the provisioning service.
_SERVICE_PREFIX = "devboot.core.services.provision."

_FMT_CONSOLE = "%(levelname)s: %(message)s"
_FMT_CONSOLE_DETAIL = "%(asctime)s %(levelname)-7s [%(shortname)s] %(message)s"
_FMT_FILE = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"


class _ShortNameFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.shortname = record.name.removeprefix(_SERVICE_PREFIX)
        return super().format(record)


def resolve_console_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Console level from CLI flags, falling back to DEVBOOT_LOG_LEVEL."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return _parse_level((environ or {}).get("DEVBOOT_LOG_LEVEL"))


def setup_logging(
    level: int,
    *,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the devboot logger.

    Calling it again replaces the handlers, so repeated CLI invocations
    in one process (tests) never duplicate output.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    if level <= logging.INFO:
        console.setFormatter(_ShortNameFormatter(_FMT_CONSOLE_DETAIL, datefmt="%H:%M:%S"))
    else:
        console.setFormatter(logging.Formatter(_FMT_CONSOLE))
    logger.addHandler(console)

    effective = level
    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)
        effective = min(effective, file_level)

    logger.setLevel(effective)
    return logger


def setup_from_environment(level: int, environ: Mapping[str, str]) -> logging.Logger:
    return setup_logging(
        level,
        log_file=environ.get("DEVBOOT_LOG_FILE") or None,
        log_file_level=environ.get("DEVBOOT_LOG_FILE_LEVEL"),
    )


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    if not level:
        return default
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else default
