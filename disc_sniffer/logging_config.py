#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Logging setup for Disc Sniffer

Library modules only ever do ``logging.getLogger(__name__)``; nothing is
printed until an application calls ``setup_logging``.

Features:
- Level-dependent plain formatter
- Colored console output via colorlog when attached to a TTY
- Optional rotating log file
- Structured JSON output (``structured_json`` or DISC_SNIFFER_LOG_JSON=1)
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import colorlog

ROOT_LOGGER_NAME = "disc_sniffer"

# =====================================================================================================
# Formatters
# =====================================================================================================

_LEVEL_FORMATS = {
    logging.ERROR: "[{asctime}] ERROR   [{name}] {message}",
    logging.WARNING: "[{asctime}] WARNING [{name}] {message}",
    logging.INFO: "[{asctime}] INFO    {message}",
    logging.DEBUG: "[{asctime}] DEBUG   {name}:{lineno} - {message}",
}

_LOG_COLORS = {
    'DEBUG': 'blue',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


class FastFormatter(logging.Formatter):
    """Plain formatter that picks its layout from the record level."""

    def __init__(self):
        super().__init__()
        self._formatters = {
            level: logging.Formatter(fmt, style='{', datefmt='%H:%M:%S')
            for level, fmt in _LEVEL_FORMATS.items()
        }

    def format(self, record):
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        return formatter.format(record)


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter (optional)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "thread": record.threadName,
            "process": record.process,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _colored_formatter() -> logging.Formatter:
    return colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(name)s - %(message)s",
        datefmt='%H:%M:%S',
        log_colors=_LOG_COLORS,
    )


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _stream_supports_color(stream) -> bool:
    return (hasattr(stream, 'isatty') and stream.isatty()
            and os.environ.get('TERM') != 'dumb')


# =====================================================================================================
# Main Setup Function
# =====================================================================================================

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console_logging: bool = True,
    max_log_size: str = "10MB",
    backup_count: int = 3,
    structured_json: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Configure the ``disc_sniffer`` logger hierarchy.

    Existing handlers on the package logger are replaced, so calling this
    twice does not duplicate output.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(numeric_level)

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    handlers = {}
    use_json = structured_json if structured_json is not None else _env_bool("DISC_SNIFFER_LOG_JSON")

    # Console Handler
    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        if use_json:
            console_handler.setFormatter(JsonFormatter())
        elif _stream_supports_color(sys.stderr):
            console_handler.setFormatter(_colored_formatter())
        else:
            console_handler.setFormatter(FastFormatter())
        package_logger.addHandler(console_handler)
        handlers['console'] = console_handler

    # File Handler
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=_parse_size_string(max_log_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        package_logger.addHandler(file_handler)
        handlers['file'] = file_handler

    package_logger.debug("Logging initialized (level=%s, file=%s, json=%s)",
                         log_level, log_file, use_json)

    return {
        'logger': package_logger,
        'handlers': handlers,
    }


# =====================================================================================================
# Utility functions
# =====================================================================================================

def _parse_size_string(size_str: str) -> int:
    """Parse size string into bytes."""
    size_str = size_str.upper().strip()

    multipliers = {
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                number = float(size_str[:-len(suffix)].strip())
                return int(number * multiplier)
            except ValueError:
                continue

    try:
        return int(float(size_str))
    except ValueError:
        pass

    return 10 * 1024 * 1024  # Default 10MB


@lru_cache(maxsize=32)
def get_logger(name: str) -> logging.Logger:
    """Get cached logger instance."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def cleanup_logging():
    """Detach and close every handler installed by ``setup_logging``."""
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
