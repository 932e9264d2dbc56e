"""
Configuration loader — reads the optional devboot config file.

Every setting has a default, so running without a config file is the
normal case.  When a file is found it is parsed as YAML and validated
against the ``ProvisionerConfig`` Pydantic schema.

Lookup order:
    explicit path (``--config``)  >  DEVBOOT_CONFIG  >  ~/.config/devboot/config.yml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVBOOT_CONFIG"
DEFAULT_CONFIG_RELPATH = Path(".config") / "devboot" / "config.yml"

# Bundled editor / multiplexer configuration shipped with the package.
BUNDLE_DIR = Path(__file__).resolve().parents[2] / "bundle"


class ConfigError(Exception):
    """Raised when the devboot configuration is invalid or unreadable."""


class ProvisionerConfig(BaseModel):
    """Runtime settings for one provisioning run."""

    home: Path = Field(default_factory=Path.home)
    backups_dir: Path | None = None  # default: <home>/.config-backups
    bundle_dir: Path = BUNDLE_DIR
    zsh_custom: Path | None = None  # default: $ZSH_CUSTOM or <home>/.oh-my-zsh/custom
    skip: list[str] = Field(default_factory=list)
    command_timeout: int = Field(default=1800, gt=0)

    def resolved_backups_dir(self) -> Path:
        return (self.backups_dir or self.home / ".config-backups").expanduser()

    def resolved_zsh_custom(self, environ: dict[str, str] | None = None) -> Path:
        if self.zsh_custom is not None:
            return self.zsh_custom.expanduser()
        env = os.environ if environ is None else environ
        if env.get("ZSH_CUSTOM"):
            return Path(env["ZSH_CUSTOM"]).expanduser()
        return self.home / ".oh-my-zsh" / "custom"


def find_config_file(home: Path | None = None) -> Path | None:
    """Locate the config file from the environment or the default location.

    Returns:
        Path to the config file, or None if there is none.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    candidate = (home or Path.home()) / DEFAULT_CONFIG_RELPATH
    if candidate.is_file():
        return candidate
    return None


def load_config(path: Path | None = None) -> ProvisionerConfig:
    """Load and validate the provisioner configuration.

    Args:
        path: Explicit config path. If None, searches the default locations
            and falls back to built-in defaults.

    Returns:
        Validated ProvisionerConfig.

    Raises:
        ConfigError: If an explicitly located file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No config file found, using defaults")
        return ProvisionerConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow the settings to sit under a top-level "devboot" key
    settings = data.get("devboot", data)

    try:
        config = ProvisionerConfig.model_validate(settings)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    config.home = config.home.expanduser()
    logger.info("Loaded config from %s (home=%s)", path, config.home)
    return config
