"""Disc Sniffer utils package."""

from .result import Err, Ok, Result, error_message, is_err, is_ok, map_ok, unwrap, unwrap_or

__all__ = [
    "Err",
    "Ok",
    "Result",
    "error_message",
    "is_err",
    "is_ok",
    "map_ok",
    "unwrap",
    "unwrap_or",
]
