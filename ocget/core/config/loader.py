"""
Settings loader — reads the optional ocget settings file.

The file is YAML, validated against a Pydantic schema::

    install_dir: ~/bin
    timeout: 120
    mirrors:
      client: https://mirror.example.com/ocp
      crc: https://mirror.example.com/crc

Every key is optional. Command-line flags always win over the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from ocget.core.errors import ConfigError
from ocget.core.models.product import Product

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "OCGET_CONFIG"


def default_config_path() -> Path:
    """``~/.config/ocget/config.yml`` (honours ``XDG_CONFIG_HOME``)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "ocget" / "config.yml"


class Settings(BaseModel):
    """Contents of the settings file."""

    install_dir: Path | None = None
    timeout: int | None = Field(default=None, gt=0)
    mirrors: dict[str, str] = Field(default_factory=dict)

    @field_validator("install_dir")
    @classmethod
    def _expand_install_dir(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("mirrors")
    @classmethod
    def _known_products(cls, value: dict[str, str]) -> dict[str, str]:
        known = {p.value for p in Product}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValueError(
                f"unknown product(s) in mirrors: {', '.join(unknown)} "
                f"(expected one of: {', '.join(sorted(known))})"
            )
        return value


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate the settings file.

    Args:
        path: Explicit settings path. If None, the default location is
            used, and a missing default file simply yields defaults.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = default_config_path()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s (%d mirror override(s))", path, len(settings.mirrors))
    return settings
