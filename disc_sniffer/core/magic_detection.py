"""System detection via fixed-offset magic numbers.

Each known system is identified by 17 raw bytes at a fixed offset. The table
is checked in order and the first exact match wins. When nothing matches,
the ISO9660 volume descriptor is probed for the PSP system identifier.

References:
- PS1 / Sega CD: raw CD sync pattern followed by the sector header at 0x00
- PC Engine CD: Shift-JIS boot text at 0x838840
- PSP UMD: "PSP GAME" system identifier in the PVD at 0x8008
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..exceptions import DiscReadError, UnrecognizedSystemError
from ..utils.result import Err, Ok, Result
from .streams import ByteStream, read_at

logger = logging.getLogger(__name__)

MAGIC_LEN = 17

PSP_MAGIC_OFFSET = 0x8008
PSP_MAGIC = b"PSP GAME"


@dataclass(frozen=True)
class MagicEntry:
    """Signature of one system: ``signature`` found at byte ``offset``."""

    offset: int
    system_name: str
    signature: bytes

    def __post_init__(self):
        if len(self.signature) != MAGIC_LEN:
            raise ValueError(f"{self.system_name}: signature must be {MAGIC_LEN} bytes")


# Order is match priority.
MAGIC_NUMBERS: Tuple[MagicEntry, ...] = (
    MagicEntry(0, "ps1",
               b"\x00\xff\xff\xff\xff\xff\xff\xff\xff\xff\xff\x00\x00\x02\x00\x02\x00"),
    MagicEntry(0x838840, "pcecd",
               b"\x82\xb1\x82\xcc\x83\x76\x83\x8d\x83\x4f\x83\x89\x83\x80\x82\xcc\x92"),
    MagicEntry(0, "scd",
               b"\x00\xff\xff\xff\xff\xff\xff\xff\xff\xff\xff\x00\x00\x02\x00\x01\x53"),
)


def _match_table(stream: ByteStream) -> str | None:
    for entry in MAGIC_NUMBERS:
        magic = read_at(stream, entry.offset, MAGIC_LEN)
        if len(magic) < MAGIC_LEN:
            logger.info("Could not read data at offset %d: got %d of %d bytes",
                        entry.offset, len(magic), MAGIC_LEN)
            raise DiscReadError(f"Short read at offset {entry.offset}", offset=entry.offset)
        if magic == entry.signature:
            return entry.system_name
    return None


def detect_system(stream: ByteStream) -> Result[str]:
    """Identify the console an image belongs to.

    Returns:
        Ok(system_name), Err(DiscReadError) when a signature offset cannot be
        read in full, or Err(UnrecognizedSystemError).
    """
    logger.debug("Comparing with known magic numbers...")
    try:
        system_name = _match_table(stream)
        if system_name is not None:
            return Ok(system_name)

        if read_at(stream, PSP_MAGIC_OFFSET, len(PSP_MAGIC)) == PSP_MAGIC:
            return Ok("psp")
    except DiscReadError as exc:
        return Err(exc)

    logger.debug("Could not find compatible system")
    return Err(UnrecognizedSystemError())
