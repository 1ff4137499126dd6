"""Disc Sniffer - console detection and game serial extraction for disc images.

Typical use::

    from disc_sniffer import identify_cue, is_ok

    result = identify_cue("/roms/game.cue")
    if is_ok(result):
        print(result.value.system, result.value.serial)
"""

from .core import (
    CueTrack,
    DiscIdentity,
    detect_ascii_serial,
    detect_ps1_serial,
    detect_psp_serial,
    detect_system,
    find_first_data_track,
    identify_cue,
    identify_image,
    identify_stream,
)
from .exceptions import (
    CueParseError,
    DiscFormatError,
    DiscReadError,
    SerialNotFoundError,
    UnrecognizedSystemError,
)
from .utils.result import Err, Ok, is_err, is_ok, unwrap, unwrap_or
from .version import load_version

__version__ = load_version()

__all__ = [
    "CueParseError",
    "CueTrack",
    "DiscFormatError",
    "DiscIdentity",
    "DiscReadError",
    "Err",
    "Ok",
    "SerialNotFoundError",
    "UnrecognizedSystemError",
    "detect_ascii_serial",
    "detect_ps1_serial",
    "detect_psp_serial",
    "detect_system",
    "find_first_data_track",
    "identify_cue",
    "identify_image",
    "identify_stream",
    "is_err",
    "is_ok",
    "unwrap",
    "unwrap_or",
]
