"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from devboot.core.observability.logging_config import PACKAGE_LOGGER


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def bundle_dir(project_root: Path) -> Path:
    """Return the bundled configuration shipped with devboot."""
    return project_root / "devboot" / "bundle"


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Return an empty fake home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, home: Path):
    """Keep the developer's real config and zsh setup out of tests."""
    monkeypatch.delenv("DEVBOOT_CONFIG", raising=False)
    monkeypatch.delenv("ZSH_CUSTOM", raising=False)
    monkeypatch.delenv("DEVBOOT_LOG_FILE", raising=False)
    monkeypatch.setenv("HOME", str(home))


@pytest.fixture(autouse=True)
def _reset_devboot_logger():
    """Undo CLI logging setup so caplog sees devboot records again."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
