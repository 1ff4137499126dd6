#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Disc Sniffer - Consolidated Exception Classes

This module contains all exception classes used in the project,
centralized in one place to avoid duplication and improve consistency.

Two families matter to callers:
- DiscReadError: the image could not be read (open/seek/read failure)
- DiscFormatError: the image was readable but its content did not match
"""

import errno as errno_codes
from datetime import datetime
from typing import Dict, Any, Optional


class BaseError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(BaseError):
    """Base class for configuration errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = str(file_path)
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


class ValidationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        validation_details = details or {}
        if field_name:
            validation_details['field_name'] = field_name
        super().__init__(message, "VALIDATION_ERROR", file_path, validation_details)


# =====================================================================================================
# I/O errors
# =====================================================================================================

class DiscReadError(BaseError):
    """Raised when the underlying stream cannot be opened, seeked or read."""

    def __init__(self, message: str, errno: Optional[int] = None,
                 path: Optional[str] = None,
                 offset: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        read_details = details or {}
        self.errno = errno or errno_codes.EIO
        self.path = str(path) if path is not None else None
        self.offset = offset
        read_details['errno'] = self.errno
        if self.path:
            read_details['path'] = self.path
        if offset is not None:
            read_details['offset'] = offset
        super().__init__(message, "DISC_READ_ERROR", read_details)

    @property
    def code(self) -> int:
        """Negated OS error code, the value the C-style API returned."""
        return -self.errno

    @classmethod
    def from_os_error(cls, exc: OSError, path: Optional[str] = None,
                      offset: Optional[int] = None) -> "DiscReadError":
        message = exc.strerror or str(exc) or "I/O error"
        return cls(message, errno=exc.errno, path=path or exc.filename, offset=offset)


# =====================================================================================================
# Format errors
# =====================================================================================================

class DiscFormatError(BaseError):
    """Base class for readable content that does not match an expected structure."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "FORMAT_ERROR", details)


class CueParseError(DiscFormatError):
    """Raised when a CUE sheet has no usable data track."""

    def __init__(self, message: str, cue_path: Optional[str] = None,
                 token: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        cue_details = details or {}
        if cue_path:
            cue_details['cue_path'] = str(cue_path)
        if token is not None:
            cue_details['token'] = token
        super().__init__(message, "CUE_PARSE_ERROR", cue_details)


class UnrecognizedSystemError(DiscFormatError):
    """Raised when no known signature matches the image."""

    def __init__(self, message: str = "system not recognized",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "SYSTEM_NOT_RECOGNIZED", details)


class SerialNotFoundError(DiscFormatError):
    """Raised when a serial extractor finds no serial."""

    def __init__(self, message: str, system: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        serial_details = details or {}
        if system:
            serial_details['system'] = system
        super().__init__(message, "SERIAL_NOT_FOUND", serial_details)
