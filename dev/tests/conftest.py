from __future__ import annotations

from typing import Callable

import pytest

from disc_sniffer.config import CONFIG_ENV_VAR, reset_settings_cache

RAW_SYNC = b"\x00" + b"\xff" * 10 + b"\x00"
PCECD_OFFSET = 0x838840


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from default settings, whatever the environment says."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


def _directory_record(name: bytes, extent: int, is_dir: bool = False) -> bytes:
    length = 33 + len(name)
    length += length % 2
    record = bytearray(length)
    record[0] = length
    record[2:5] = extent.to_bytes(3, "little")
    record[25] = 2 if is_dir else 0
    record[32] = len(name)
    record[33:33 + len(name)] = name
    return bytes(record)


def build_ps1_image(
    system_cnf: bytes = b"BOOT = cdrom:\\SCES_123.45;1\r\nTCB = 4\r\nEVENT = 10\r\nSTACK = 801FFFF0\r\n",
    frame_size: int = 2048,
    root_sector: int = 22,
    cnf_sector: int = 24,
    total_sectors: int = 30,
    include_system_cnf: bool = True,
) -> bytes:
    """Minimal ISO9660 image with a root directory holding SYSTEM.CNF.

    ``frame_size`` 2048 builds a mode 1 image; 2352 and 2448 build raw images
    whose sectors start with the CD sync pattern and a mode 2 header.
    """
    raw = frame_size != 2048
    skip = 24 if raw else 0
    image = bytearray(frame_size * total_sectors)

    if raw:
        for sector in range(total_sectors):
            start = sector * frame_size
            image[start:start + 12] = RAW_SYNC
            image[start + 12:start + 16] = b"\x00\x02\x00\x02"

    def put(sector: int, data: bytes) -> None:
        start = skip + sector * frame_size
        image[start:start + len(data)] = data

    pvd = bytearray(2048)
    pvd[0] = 1
    pvd[1:6] = b"CD001"
    pvd[8:40] = b"PLAYSTATION".ljust(32)
    pvd[156:156 + 34] = _directory_record(b"\x00", root_sector, is_dir=True)
    put(16, bytes(pvd))

    entries = _directory_record(b"\x00", root_sector, is_dir=True)
    entries += _directory_record(b"\x01", root_sector, is_dir=True)
    entries += _directory_record(b"SCES_123.45;1", 26)
    if include_system_cnf:
        entries += _directory_record(b"SYSTEM.CNF;1", cnf_sector)
    put(root_sector, entries)

    put(cnf_sector, system_cnf)
    return bytes(image)


def build_large_image(size: int = PCECD_OFFSET + 4096) -> bytearray:
    """Zero-filled image large enough for every magic-number offset."""
    return bytearray(size)


@pytest.fixture
def ps1_image() -> Callable[..., bytes]:
    return build_ps1_image


@pytest.fixture
def large_image() -> Callable[..., bytearray]:
    return build_large_image
