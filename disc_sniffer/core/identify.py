"""One-call identification of a disc image: system name plus game serial."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import DetectionSettings, resolve_settings
from ..exceptions import DiscReadError, UnrecognizedSystemError
from ..utils.result import Err, Ok, Result
from .cue_parser import find_first_data_track
from .magic_detection import detect_system
from .serial_detection import detect_ascii_serial, detect_ps1_serial, detect_psp_serial
from .streams import ByteStream, open_stream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscIdentity:
    system: Optional[str] = None
    serial: Optional[str] = None
    track_path: Optional[str] = None
    track_offset: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _serial_for_system(stream: ByteStream, system: str,
                       settings: DetectionSettings) -> Result[Optional[str]]:
    if system == "ps1":
        return detect_ps1_serial(stream)
    if system == "psp":
        return detect_psp_serial(stream, settings=settings)
    return Ok(None)


def identify_stream(stream: ByteStream,
                    settings: Optional[DetectionSettings] = None) -> Result[DiscIdentity]:
    """Detect the system of an open image and extract its serial.

    A recognised system whose serial cannot be found still yields an identity
    with ``serial=None``. Unrecognised images fall back to the ASCII serial
    scan and report ``system=None`` on success.
    """
    settings_result = resolve_settings(settings)
    if isinstance(settings_result, Err):
        return settings_result
    settings = settings_result.value

    system_result = detect_system(stream)
    if isinstance(system_result, Ok):
        system = system_result.value
        serial_result = _serial_for_system(stream, system, settings)
        if isinstance(serial_result, Err):
            if serial_result.is_a(DiscReadError):
                return serial_result
            logger.info("No serial found for %s image: %s", system, serial_result.error)
            return Ok(DiscIdentity(system=system))
        return Ok(DiscIdentity(system=system, serial=serial_result.value))

    if system_result.is_a(DiscReadError):
        return system_result

    ascii_result = detect_ascii_serial(stream, settings=settings)
    if isinstance(ascii_result, Ok):
        return Ok(DiscIdentity(serial=ascii_result.value))
    if ascii_result.is_a(DiscReadError):
        return ascii_result
    return Err(UnrecognizedSystemError())


def identify_image(path: str | Path,
                   settings: Optional[DetectionSettings] = None) -> Result[DiscIdentity]:
    try:
        with open_stream(path) as stream:
            return identify_stream(stream, settings)
    except DiscReadError as exc:
        return Err(exc)


def identify_cue(cue_path: str | Path,
                 settings: Optional[DetectionSettings] = None) -> Result[DiscIdentity]:
    """Identify the image behind a CUE sheet's first data track."""
    settings_result = resolve_settings(settings)
    if isinstance(settings_result, Err):
        return settings_result
    settings = settings_result.value

    track_result = find_first_data_track(cue_path, settings)
    if isinstance(track_result, Err):
        return track_result
    track = track_result.value

    identity_result = identify_image(track.track_path, settings)
    if isinstance(identity_result, Err):
        return identity_result
    return Ok(replace(identity_result.value,
                      track_path=track.track_path,
                      track_offset=track.offset))
