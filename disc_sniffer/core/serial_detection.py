"""Game serial extraction from disc images.

PS1: the ISO9660 root directory is walked for SYSTEM.CNF, whose BOOT line
names the executable (``cdrom:\\SCES_123.45;1`` -> ``SCES-12345``). Raw
images are tried with and without interleaved sub-channel data.

PSP and ASCII (Wii-style) serials are found by brute force: every byte
position inside a bounded window is tested, one seek/read pair each.

Frame layouts:
- 2048 bytes: mode 1 user data only, no header to skip
- 2352 bytes: raw sector, user data after 24 bytes of sync/header/subheader
- 2448 bytes: raw sector followed by 96 bytes of sub-channel data
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import DetectionSettings, resolve_settings
from ..config.models import PSP_SERIAL_PREFIXES
from ..exceptions import DiscReadError, SerialNotFoundError
from ..utils.result import Err, Ok, Result
from .streams import ByteStream, read_at, stream_length

logger = logging.getLogger(__name__)

SECTOR_2048 = 2048
SECTOR_2352 = 2352
SECTOR_2448 = 2448
RAW_HEADER_SKIP = 24

# First bytes of the raw CD sync pattern; mode 1 images do not start with it
MODE_TEST = b"\x00\xff\xff\xff"

PVD_SECTOR = 16
ROOT_RECORD_OFFSET = 156
ROOT_RECORD_READ = 6
DIRECTORY_READ_SIZE = SECTOR_2048 * 2
DIR_NAME_OFFSET = 33
SYSTEM_CNF_NAME = b"SYSTEM.CNF;1"
SYSTEM_CNF_READ_SIZE = 256

# Caller-visible serial buffer holds 16 bytes including the terminator
MAX_SERIAL_LEN = 15

PSP_PREFIX_LEN = 5
PSP_SERIAL_LEN = 10

ASCII_SERIAL_WINDOW = 15
ASCII_SERIAL_MIN_EXCLUSIVE = 3
ASCII_SERIAL_MAX_EXCLUSIVE = 9
_ASCII_SERIAL_CHARS = frozenset(b"-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")


@dataclass(frozen=True)
class DiscFrameGeometry:
    skip: int
    frame_size: int

    def sector_offset(self, sector: int) -> int:
        return self.skip + sector * self.frame_size


def frame_geometry(stream: ByteStream, sub_channel_mixed: bool) -> DiscFrameGeometry:
    """Work out how logical sectors are laid out in the image."""
    is_mode1 = False
    if not sub_channel_mixed and stream_length(stream) % SECTOR_2048 == 0:
        is_mode1 = read_at(stream, 0, len(MODE_TEST)) != MODE_TEST

    skip = 0 if is_mode1 else RAW_HEADER_SKIP
    if sub_channel_mixed:
        frame_size = SECTOR_2448
    elif is_mode1:
        frame_size = SECTOR_2048
    else:
        frame_size = SECTOR_2352
    return DiscFrameGeometry(skip=skip, frame_size=frame_size)


def _le24(data: bytes, pos: int) -> int:
    return data[pos] | (data[pos + 1] << 8) | (data[pos + 2] << 16)


def _is_alnum(byte: int) -> bool:
    return (48 <= byte <= 57) or (65 <= byte <= 90) or (97 <= byte <= 122)


# =============================================================================
# PS1
# =============================================================================

def _find_system_cnf(directory: bytes) -> Optional[int]:
    """Return the SYSTEM.CNF extent sector from a directory buffer."""
    end = len(directory)
    pos = 0
    while pos < end:
        record_len = directory[pos]
        if record_len == 0:
            return None

        name_end = pos + DIR_NAME_OFFSET + len(SYSTEM_CNF_NAME)
        if name_end > end:
            return None
        if directory[pos + DIR_NAME_OFFSET:name_end].upper() == SYSTEM_CNF_NAME:
            return _le24(directory, pos + 2)

        pos += record_len
    return None


def _boot_filename(system_cnf: bytes) -> Optional[bytes]:
    """Text following the last path separator on the BOOT line."""
    text = system_cnf.split(b"\x00", 1)[0]
    start = text.lower().find(b"boot")
    if start < 0:
        return None

    line_end = text.find(b"\n", start)
    if line_end < 0:
        line_end = len(text)

    boot_file = start
    for pos in range(start, line_end):
        if text[pos] in b"\\:":
            boot_file = pos + 1
    return text[boot_file:]


def _build_ps1_serial(boot_file: bytes) -> Optional[str]:
    if len(boot_file) < 4:
        return None

    serial = bytearray(boot_file[:4].upper())
    serial.append(ord("-"))

    pos = 4
    end = len(boot_file)
    if pos < end and not _is_alnum(boot_file[pos]):
        pos += 1

    while pos < end and _is_alnum(boot_file[pos]):
        serial.append(boot_file[pos])
        pos += 1
        if pos < end and boot_file[pos] == ord("."):
            pos += 1

    return bytes(serial[:MAX_SERIAL_LEN]).decode("ascii", errors="replace")


def _detect_ps1_serial_sub(stream: ByteStream, sub_channel_mixed: bool) -> Optional[str]:
    geometry = frame_geometry(stream, sub_channel_mixed)

    root_record = read_at(stream,
                          ROOT_RECORD_OFFSET + geometry.sector_offset(PVD_SECTOR),
                          ROOT_RECORD_READ)
    if len(root_record) < ROOT_RECORD_READ:
        return None

    directory = read_at(stream, geometry.sector_offset(_le24(root_record, 2)),
                        DIRECTORY_READ_SIZE)
    cnf_sector = _find_system_cnf(directory)
    if cnf_sector is None:
        return None

    system_cnf = read_at(stream, geometry.sector_offset(cnf_sector), SYSTEM_CNF_READ_SIZE)
    boot_file = _boot_filename(system_cnf)
    if boot_file is None:
        return None
    return _build_ps1_serial(boot_file)


def detect_ps1_serial(stream: ByteStream) -> Result[str]:
    """Extract a PS1 serial such as ``SLUS-01234`` from SYSTEM.CNF.

    Returns:
        Ok(serial), Err(SerialNotFoundError) or Err(DiscReadError).
    """
    try:
        for sub_channel_mixed in (False, True):
            serial = _detect_ps1_serial_sub(stream, sub_channel_mixed)
            if serial:
                logger.debug("PS1 serial %s (sub-channel mixed: %s)", serial, sub_channel_mixed)
                return Ok(serial)
    except DiscReadError as exc:
        return Err(exc)
    return Err(SerialNotFoundError("No SYSTEM.CNF boot entry found", system="ps1"))


# =============================================================================
# Brute-force scanners
# =============================================================================

def detect_psp_serial(stream: ByteStream, scan_limit: Optional[int] = None,
                      prefixes: Optional[Iterable[str]] = None,
                      settings: Optional[DetectionSettings] = None) -> Result[str]:
    """Find a PSP serial (``ULUS-10041``) by its publisher/region prefix.

    The serial ends at the first NUL byte; a prefix with nothing after it is
    skipped and the scan goes on.

    Args:
        stream: Image stream.
        scan_limit: Number of byte positions to test; defaults to settings.
        prefixes: Allowed prefixes; defaults to the built-in list plus any
            configured extras.
        settings: Source of the defaults above. The process-wide settings
            are only loaded when a default is actually needed.
    """
    if scan_limit is None or prefixes is None:
        settings_result = resolve_settings(settings)
        if isinstance(settings_result, Err):
            return settings_result
        settings = settings_result.value
        if scan_limit is None:
            scan_limit = settings.psp_scan_limit
        if prefixes is None:
            prefixes = settings.psp_prefixes()
    limit = scan_limit
    allowed = frozenset(prefix.encode("ascii") for prefix in prefixes)

    try:
        for pos in range(limit):
            candidate = read_at(stream, pos, PSP_PREFIX_LEN)
            if not candidate:
                break
            if candidate not in allowed:
                continue

            serial = read_at(stream, pos, PSP_SERIAL_LEN)
            if len(serial) < PSP_SERIAL_LEN:
                break
            serial = serial.split(b"\x00", 1)[0]
            if len(serial) <= PSP_PREFIX_LEN:
                continue
            logger.debug("PSP serial found at offset %d", pos)
            return Ok(serial.decode("ascii", errors="replace"))
    except DiscReadError as exc:
        return Err(exc)

    return Err(SerialNotFoundError(f"No PSP serial in the first {limit} bytes", system="psp"))


def serial_run_length(window: bytes) -> int:
    """Length of the leading run of ``-``, ``0-9`` and ``A-Z`` characters."""
    count = 0
    for byte in window[:ASCII_SERIAL_WINDOW]:
        if byte not in _ASCII_SERIAL_CHARS:
            break
        count += 1
    return count


def is_serial_length(length: int) -> bool:
    return ASCII_SERIAL_MIN_EXCLUSIVE < length < ASCII_SERIAL_MAX_EXCLUSIVE


def detect_ascii_serial(stream: ByteStream, scan_limit: Optional[int] = None,
                        settings: Optional[DetectionSettings] = None) -> Result[str]:
    """Find an upper-case ASCII serial near the start of the image (Wii)."""
    if scan_limit is None:
        settings_result = resolve_settings(settings)
        if isinstance(settings_result, Err):
            return settings_result
        scan_limit = settings_result.value.ascii_scan_limit
    limit = scan_limit

    try:
        for pos in range(limit):
            window = read_at(stream, pos, ASCII_SERIAL_WINDOW)
            if not window:
                break
            run = serial_run_length(window)
            if is_serial_length(run):
                logger.debug("ASCII serial found at offset %d", pos)
                return Ok(window[:run].decode("ascii"))
    except DiscReadError as exc:
        return Err(exc)

    return Err(SerialNotFoundError(f"No ASCII serial in the first {limit} bytes"))
