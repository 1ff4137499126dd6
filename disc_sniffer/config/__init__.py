"""Disc Sniffer configuration package."""

from .io import (
    CONFIG_ENV_VAR,
    get_config_path,
    get_settings,
    load_settings,
    reset_settings_cache,
    resolve_settings,
    save_settings,
)
from .models import (
    DEFAULT_ASCII_SCAN_LIMIT,
    DEFAULT_MAX_TOKEN_LEN,
    DEFAULT_PSP_SCAN_LIMIT,
    PSP_SERIAL_PREFIXES,
    DetectionSettings,
    validate_settings,
)

__all__ = [
    'CONFIG_ENV_VAR',
    'DEFAULT_ASCII_SCAN_LIMIT',
    'DEFAULT_MAX_TOKEN_LEN',
    'DEFAULT_PSP_SCAN_LIMIT',
    'DetectionSettings',
    'PSP_SERIAL_PREFIXES',
    'get_config_path',
    'get_settings',
    'load_settings',
    'reset_settings_cache',
    'resolve_settings',
    'save_settings',
    'validate_settings',
]
