"""Settings I/O (YAML)."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import pydantic
import yaml

from ..exceptions import ConfigurationError, ValidationError
from ..utils.result import Err, Ok, Result
from .models import DetectionSettings, validate_settings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DISC_SNIFFER_CONFIG"


def get_config_path() -> Optional[Path]:
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(override) if override else None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file: {exc}", file_path=str(path)) from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in settings file: {exc}", file_path=str(path)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file root must be a mapping", file_path=str(path))
    return data


def load_settings(config_path: Optional[str | Path] = None) -> DetectionSettings:
    """Load detection settings from YAML.

    Args:
        config_path: Settings file. Defaults to $DISC_SNIFFER_CONFIG.

    Returns:
        DetectionSettings; defaults when no file is configured or it does not exist.

    Raises:
        ConfigurationError: unreadable or malformed YAML.
        ValidationError: values outside their allowed range.
    """
    path = Path(config_path) if config_path is not None else get_config_path()
    if path is None:
        return DetectionSettings()
    if not path.exists():
        logger.info("Settings file %s not found, using defaults", path)
        return DetectionSettings()

    data = _read_yaml(path)
    try:
        settings = validate_settings(data)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"Invalid settings: {first.get('msg', exc)}",
                              field_name=field or None, file_path=str(path)) from exc
    logger.debug("Loaded settings from %s: %s", path, settings.model_dump())
    return settings


def save_settings(settings: DetectionSettings, config_path: str | Path) -> None:
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings.model_dump(), f, sort_keys=True)


@lru_cache(maxsize=1)
def get_settings() -> DetectionSettings:
    """Process-wide settings, loaded once from $DISC_SNIFFER_CONFIG."""
    return load_settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()


def resolve_settings(settings: Optional[DetectionSettings] = None) -> Result[DetectionSettings]:
    """Caller-supplied settings, or the process-wide ones loaded on demand.

    The settings file is only read when ``settings`` is None. A broken file
    comes back as Err instead of raising.
    """
    if settings is not None:
        return Ok(settings)
    try:
        return Ok(get_settings())
    except (ConfigurationError, ValidationError) as exc:
        logger.warning("Settings unusable: %s", exc)
        return Err(exc)
