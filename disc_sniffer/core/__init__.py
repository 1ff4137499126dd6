"""Disc image detection core."""

from .cue_parser import CueTrack, data_track_offset, find_first_data_track, find_token, read_token
from .identify import DiscIdentity, identify_cue, identify_image, identify_stream
from .magic_detection import MAGIC_NUMBERS, MagicEntry, detect_system
from .serial_detection import (
    PSP_SERIAL_PREFIXES,
    DiscFrameGeometry,
    detect_ascii_serial,
    detect_ps1_serial,
    detect_psp_serial,
    frame_geometry,
)
from .streams import ByteStream, open_stream

__all__ = [
    "ByteStream",
    "CueTrack",
    "DiscFrameGeometry",
    "DiscIdentity",
    "MAGIC_NUMBERS",
    "MagicEntry",
    "PSP_SERIAL_PREFIXES",
    "data_track_offset",
    "detect_ascii_serial",
    "detect_ps1_serial",
    "detect_psp_serial",
    "detect_system",
    "find_first_data_track",
    "find_token",
    "frame_geometry",
    "identify_cue",
    "identify_image",
    "identify_stream",
    "open_stream",
    "read_token",
]
