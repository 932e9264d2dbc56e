"""
L4 Execution — Idempotent config-file mutation.

Every function here checks whether its change is already in place
before touching the filesystem, so applying the same edit any number
of times leaves the file exactly as one application would.

Marker checks are pure functions over text (``marker_present``,
``plugin_listed``) so they can be tested without any file I/O.
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Callable
from pathlib import Path

from devboot.core.models.outcome import LinkOutcome
from devboot.core.models.platform import Platform
from devboot.core.services.provision.detection.probes import marker_present, read_text
from devboot.core.services.provision.execution.backup import BackupRecord

logger = logging.getLogger(__name__)


# ── Blocks ──────────────────────────────────────────────────────


def append_if_absent(marker: str, block: str, path: Path) -> bool:
    """Append ``block`` to ``path`` unless ``marker`` is already in it.

    The block is preceded by a blank line and followed by a newline.
    A missing file is created.

    Returns:
        True if the file was changed.

    Raises:
        ValueError: If ``marker`` is empty; without one the block could
            never be recognised and would be appended on every run.
    """
    if not marker:
        raise ValueError(f"append_if_absent needs a non-empty marker for {path}")

    existing = read_text(path)
    if existing is not None and marker_present(marker, existing):
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(f"\n{block}\n")
    logger.info("Appended block '%s' to %s", marker, path)
    return True


# ── Single-line settings ────────────────────────────────────────


def replace_line_if_matched(pattern: str, replacement: str, path: Path) -> bool:
    """Replace the first line matching ``pattern`` with ``replacement``.

    No-op when a line equal to ``replacement`` already exists, when
    the file is missing, or when nothing matches.

    Returns:
        True if the file was changed.
    """
    text = read_text(path)
    if text is None:
        return False

    if re.search(rf"^{re.escape(replacement)}$", text, re.MULTILINE):
        return False

    m = re.compile(pattern, re.MULTILINE).search(text)
    if m is None:
        logger.debug("No line matching %r in %s", pattern, path)
        return False

    # The whole line is replaced, including anything after the match.
    start = text.rfind("\n", 0, m.start()) + 1
    end = text.find("\n", m.end())
    if end == -1:
        end = len(text)
    path.write_text(f"{text[:start]}{replacement}{text[end:]}", encoding="utf-8")
    logger.info("Set %s in %s", replacement, path)
    return True


# ── Shell plugin list ───────────────────────────────────────────

_PLUGIN_LIST_START_RE = re.compile(r"^plugins=\(", re.MULTILINE)


def _find_plugin_list(text: str) -> tuple[int, int] | None:
    """Offsets of the body of the first ``plugins=( ... )`` list.

    The closing parenthesis is searched line by line, ignoring anything
    after a ``#``, so parentheses inside comments never end the list.
    """
    m = _PLUGIN_LIST_START_RE.search(text)
    if m is None:
        return None
    start = pos = m.end()
    while pos < len(text):
        eol = text.find("\n", pos)
        if eol == -1:
            eol = len(text)
        code = text[pos:eol].split("#", 1)[0]
        close = code.find(")")
        if close != -1:
            return start, pos + close
        pos = eol + 1
    return None


def _plugin_tokens(body: str) -> list[str]:
    tokens: list[str] = []
    for line in body.splitlines():
        tokens.extend(line.split("#", 1)[0].split())
    return tokens


def plugin_listed(plugin: str, text: str) -> bool:
    """Whether ``plugin`` appears in the ``plugins=( ... )`` list of ``text``."""
    span = _find_plugin_list(text)
    return span is not None and plugin in _plugin_tokens(text[span[0]:span[1]])


def _insert_plugin(body: str, plugin: str) -> str:
    if "\n" not in body:
        stripped = body.strip()
        return f"{stripped} {plugin}" if stripped else plugin

    lines = body.split("\n")
    items = [ln for ln in lines if ln.split("#", 1)[0].strip()]
    indent = "  "
    if items:
        last = items[-1]
        indent = last[: len(last) - len(last.lstrip())]

    if lines[-1].strip():
        # Closing paren shares a line with the last item.
        lines.append(f"{indent}{plugin}")
    else:
        lines.insert(len(lines) - 1, f"{indent}{plugin}")
    return "\n".join(lines)


def add_to_plugin_list(plugin: str, path: Path) -> bool:
    """Add ``plugin`` to the ``plugins=( ... )`` list in ``path``.

    Handles single-line lists (``plugins=(git docker)``) and
    multi-line lists with one or more plugins per line.  No-op when
    the file or the list is missing, or the plugin is already listed.

    Returns:
        True if the file was changed.
    """
    text = read_text(path)
    if text is None:
        return False

    span = _find_plugin_list(text)
    if span is None:
        logger.warning("No plugins=( ... ) list in %s, not adding %s", path, plugin)
        return False
    start, end = span
    if plugin in _plugin_tokens(text[start:end]):
        return False

    body = _insert_plugin(text[start:end], plugin)
    new_text = f"{text[:start]}{body}{text[end:]}"
    path.write_text(new_text, encoding="utf-8")
    logger.info("Added %s to plugins in %s", plugin, path)
    return True


# ── tmux clipboard binding ──────────────────────────────────────

_COPY_BINDING = "bind-key -T copy-mode-vi MouseDragEnd1Pane send-keys -X copy-pipe-and-cancel"
PBCOPY_BINDING = f'{_COPY_BINDING} "pbcopy"'
XCLIP_BINDING = f'{_COPY_BINDING} "xclip -in -selection clipboard"'


def _set_commented(text: str, line: str, commented: bool) -> str:
    pattern = re.compile(rf"^(?:#\s*)?{re.escape(line)}$", re.MULTILINE)
    target = f"# {line}" if commented else line
    return pattern.sub(lambda _m: target, text)


def set_clipboard_binding(text: str, platform: Platform) -> str:
    """Activate the clipboard binding that works on ``platform``.

    macOS copies through ``pbcopy``; every other platform uses
    ``xclip``.  The inactive binding stays in the file, commented out.
    """
    use_pbcopy = platform is Platform.MACOS
    text = _set_commented(text, PBCOPY_BINDING, commented=not use_pbcopy)
    return _set_commented(text, XCLIP_BINDING, commented=use_pbcopy)


# ── Bundled configs: symlink or copy ────────────────────────────


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def _points_at(link: Path, source: Path) -> bool:
    if not link.is_symlink():
        return False
    return link.readlink() == source or link.resolve() == source.resolve()


def install_symlink_or_copy(
    source: Path,
    target: Path,
    mode: str,
    backups: BackupRecord,
    transform: Callable[[str], str] | None = None,
) -> LinkOutcome:
    """Install a bundled config at ``target``.

    ``link`` mode: a symlink already pointing at ``source`` is left
    alone with zero mutations; anything else at ``target`` is backed
    up, removed and replaced by the link.

    ``copy`` mode: the (optionally transformed) contents of the
    ``source`` file are written to ``target`` unless ``target`` already
    holds exactly that text; a differing target is backed up first.

    Returns:
        The LinkOutcome; ``MISSING_SOURCE`` when ``source`` does not
        exist (nothing is touched).

    Raises:
        OSError: On any filesystem failure during backup or mutation.
        ValueError: For an unknown ``mode``.
    """
    if mode not in ("link", "copy"):
        raise ValueError(f"Unknown install mode: {mode}")

    if not source.exists():
        logger.error("Bundled config not found: %s", source)
        return LinkOutcome.MISSING_SOURCE

    if mode == "link":
        if _points_at(target, source):
            logger.info("%s is already symlinked to %s", target, source)
            return LinkOutcome.NOOP

        if target.exists() or target.is_symlink():
            backups.backup_if_exists(target)
            _remove(target)

        target.parent.mkdir(parents=True, exist_ok=True)
        target.symlink_to(source, target_is_directory=source.is_dir())
        logger.info("Created symlink %s -> %s", target, source)
        return LinkOutcome.LINKED

    rendered = source.read_text(encoding="utf-8")
    if transform is not None:
        rendered = transform(rendered)

    if target.is_file() and not target.is_symlink():
        if read_text(target) == rendered:
            logger.info("%s is already up to date", target)
            return LinkOutcome.NOOP

    if target.exists() or target.is_symlink():
        backups.backup_if_exists(target)
        _remove(target)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(rendered, encoding="utf-8")
    shutil.copymode(source, target)
    logger.info("Copied %s to %s", source, target)
    return LinkOutcome.COPIED
