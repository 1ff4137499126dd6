"""CUE sheet tokenizer and first-data-track lookup.

A CUE sheet is read one byte at a time through a ``ByteStream``; tokens are
separated by whitespace, and a token that starts with a double quote may
contain whitespace up to the closing quote.

Only what is needed to find the first non-audio track is understood:
``FILE``, ``TRACK``, ``AUDIO`` and ``INDEX``.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..config import DEFAULT_MAX_TOKEN_LEN, DetectionSettings, resolve_settings
from ..exceptions import CueParseError, DiscReadError
from ..utils.result import Err, Ok, Result
from .streams import ByteStream, open_stream

logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n"
_QUOTE = ord('"')

# sscanf("%02d:%02d:%02d") equivalent; trailing text is ignored
_TIMESTAMP_RE = re.compile(r"\s*(\d{1,2}):\s*(\d{1,2}):\s*(\d{1,2})")


@dataclass(frozen=True)
class CueTrack:
    """First data track of a CUE sheet."""

    offset: int
    track_path: str


def _read_byte(stream: ByteStream) -> bytes:
    while True:
        try:
            data = stream.read(1)
        except (InterruptedError, BlockingIOError):
            continue
        except OSError as exc:
            raise DiscReadError.from_os_error(exc) from exc
        if data is None:
            # non-blocking stream with nothing available yet
            continue
        return data


def read_token(stream: ByteStream, max_len: int = DEFAULT_MAX_TOKEN_LEN) -> str:
    """Read the next whitespace or quote delimited token.

    Leading whitespace is skipped. A double quote in first position starts a
    quoted token, in which whitespace no longer terminates it. Any later
    double quote, or whitespace outside quotes, ends the token and is
    consumed. Tokens longer than ``max_len`` are cut; the rest of the token
    is returned by the next call.

    Returns:
        The token, or ``""`` once the stream is exhausted with nothing read.

    Raises:
        DiscReadError: the stream failed with a non-transient error.
    """
    token = bytearray()
    in_string = False

    while len(token) < max_len:
        char = _read_byte(stream)
        if not char:
            break
        byte = char[0]

        if byte in _WHITESPACE:
            if not token:
                continue
            if not in_string:
                break
        elif byte == _QUOTE:
            if not token:
                in_string = True
                continue
            break

        token.append(byte)

    return os.fsdecode(bytes(token))


def find_token(stream: ByteStream, target: str) -> bool:
    """Skip tokens until one starts with ``target``.

    Returns:
        True when found, False when the stream ran out first.
    """
    width = len(target)
    while True:
        token = read_token(stream, width)
        if not token:
            return False
        if token[:width] == target:
            return True


def parse_timestamp(text: str) -> Optional[Tuple[int, int, int]]:
    """Parse an ``MM:SS:FF`` index timestamp; None when a field is missing."""
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        return None
    minutes, seconds, frames = (int(group) for group in match.groups())
    return minutes, seconds, frames


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def data_track_offset(minutes: int, seconds: int, frames: int) -> int:
    """Byte offset reported for a data track's INDEX timestamp.

    Downstream consumers rely on this exact value, which is not the usual
    ``((m * 60 + s) * 75 + f) * sector_size`` address. The product wraps
    like a signed 32-bit integer.
    """
    return _to_int32(((minutes * 60) * (seconds * 75) * frames) * 25)


def _locate_data_track(fd: ByteStream, cue_path: str, max_len: int) -> Result[CueTrack]:
    cue_dir = os.path.dirname(cue_path)
    track_path: Optional[str] = None

    while True:
        token = read_token(fd, max_len)
        if not token:
            break

        if token == "FILE":
            name = read_token(fd, max_len)
            if not name:
                break
            track_path = os.path.join(cue_dir, name)
            logger.debug("CUE FILE entry resolved to '%s'", track_path)

        elif token == "TRACK":
            read_token(fd, max_len)  # track number
            track_type = read_token(fd, max_len)
            if track_type == "AUDIO":
                continue

            if not find_token(fd, "INDEX"):
                return Err(CueParseError("INDEX not found for data track", cue_path=cue_path))

            read_token(fd, max_len)  # index number
            stamp = read_token(fd, max_len)
            parsed = parse_timestamp(stamp)
            if parsed is None:
                logger.info("Error parsing time stamp '%s'", stamp)
                return Err(CueParseError(f"Error parsing time stamp '{stamp}'",
                                         cue_path=cue_path, token=stamp))

            if track_path is None:
                return Err(CueParseError("Data track has no preceding FILE entry",
                                         cue_path=cue_path))

            offset = data_track_offset(*parsed)
            logger.debug("First data track (%s) at offset %d in '%s'",
                         track_type, offset, track_path)
            return Ok(CueTrack(offset=offset, track_path=track_path))

    return Err(CueParseError("No data track found", cue_path=cue_path))


def find_first_data_track(cue_path: str | Path,
                          settings: Optional[DetectionSettings] = None) -> Result[CueTrack]:
    """Find the file and offset of the first non-audio track of a CUE sheet.

    Args:
        cue_path: Path to the .cue file. FILE entries are resolved against
            its directory.
        settings: Detection settings (token capacity); defaults to the
            process-wide settings.

    Returns:
        Ok(CueTrack), Err(DiscReadError) when the sheet cannot be read, or
        Err(CueParseError) when it has no usable data track. Unusable
        process-wide settings come back as their ConfigurationError or
        ValidationError.
    """
    settings_result = resolve_settings(settings)
    if isinstance(settings_result, Err):
        return settings_result
    settings = settings_result.value
    cue_path = os.fspath(cue_path)
    logger.info("Parsing CUE file '%s'...", cue_path)

    try:
        with open_stream(cue_path) as fd:
            return _locate_data_track(fd, cue_path, settings.max_token_len)
    except DiscReadError as exc:
        return Err(exc)
