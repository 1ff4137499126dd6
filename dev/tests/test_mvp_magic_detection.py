"""Tests for fixed-offset magic number system detection."""

from __future__ import annotations

import errno
import io

import pytest

from disc_sniffer.core.magic_detection import (
    MAGIC_LEN,
    MAGIC_NUMBERS,
    PSP_MAGIC_OFFSET,
    MagicEntry,
    detect_system,
)
from disc_sniffer.exceptions import DiscReadError, UnrecognizedSystemError
from disc_sniffer.utils.result import Err, Ok

PS1_SIGNATURE = b"\x00\xff\xff\xff\xff\xff\xff\xff\xff\xff\xff\x00\x00\x02\x00\x02\x00"
SCD_SIGNATURE = b"\x00\xff\xff\xff\xff\xff\xff\xff\xff\xff\xff\x00\x00\x02\x00\x01\x53"


def _entry(name: str) -> MagicEntry:
    return next(entry for entry in MAGIC_NUMBERS if entry.system_name == name)


class TestMagicTable:
    """Tests for the signature table itself."""

    def test_table_order(self) -> None:
        assert [entry.system_name for entry in MAGIC_NUMBERS] == ["ps1", "pcecd", "scd"]

    def test_signatures_are_fixed_length(self) -> None:
        assert all(len(entry.signature) == MAGIC_LEN for entry in MAGIC_NUMBERS)

    def test_entry_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            MagicEntry(0, "broken", b"\x00" * 16)


class TestDetectSystem:
    """Tests for detect_system."""

    def test_ps1_signature(self) -> None:
        stream = io.BytesIO(PS1_SIGNATURE + b"\x00" * 4096)

        assert detect_system(stream) == Ok("ps1")

    def test_scd_signature(self, large_image) -> None:
        image = large_image()
        image[0:MAGIC_LEN] = SCD_SIGNATURE

        assert detect_system(io.BytesIO(image)) == Ok("scd")

    def test_pcecd_signature(self, large_image) -> None:
        image = large_image()
        entry = _entry("pcecd")
        image[entry.offset:entry.offset + MAGIC_LEN] = entry.signature

        assert detect_system(io.BytesIO(image)) == Ok("pcecd")

    def test_table_order_breaks_ties(self, large_image) -> None:
        image = large_image()
        entry = _entry("pcecd")
        image[0:MAGIC_LEN] = SCD_SIGNATURE
        image[entry.offset:entry.offset + MAGIC_LEN] = entry.signature

        assert detect_system(io.BytesIO(image)) == Ok("pcecd")

    def test_high_bytes_compare_exactly(self, large_image) -> None:
        image = large_image()
        entry = _entry("pcecd")
        almost = bytearray(entry.signature)
        almost[-1] ^= 0x01
        image[entry.offset:entry.offset + MAGIC_LEN] = almost

        result = detect_system(io.BytesIO(image))

        assert isinstance(result, Err)
        assert isinstance(result.error, UnrecognizedSystemError)

    def test_psp_string_probe(self, large_image) -> None:
        image = large_image()
        image[PSP_MAGIC_OFFSET:PSP_MAGIC_OFFSET + 8] = b"PSP GAME"

        assert detect_system(io.BytesIO(image)) == Ok("psp")

    def test_psp_probe_is_case_sensitive(self, large_image) -> None:
        image = large_image()
        image[PSP_MAGIC_OFFSET:PSP_MAGIC_OFFSET + 8] = b"psp game"

        result = detect_system(io.BytesIO(image))

        assert isinstance(result, Err)
        assert isinstance(result.error, UnrecognizedSystemError)

    def test_unrecognized(self, large_image) -> None:
        result = detect_system(io.BytesIO(large_image()))

        assert isinstance(result, Err)
        assert isinstance(result.error, UnrecognizedSystemError)
        assert result.error.error_code == "SYSTEM_NOT_RECOGNIZED"

    def test_short_stream_is_read_error(self) -> None:
        result = detect_system(io.BytesIO(b"\x00" * 100))

        assert isinstance(result, Err)
        assert isinstance(result.error, DiscReadError)
        assert result.error.offset == _entry("pcecd").offset
        assert result.error.code == -errno.EIO

    def test_stream_failure_is_read_error(self) -> None:
        class _BrokenStream(io.BytesIO):
            def read(self, size=-1):
                raise OSError(errno.EIO, "Input/output error")

        result = detect_system(_BrokenStream(b""))

        assert isinstance(result, Err)
        assert isinstance(result.error, DiscReadError)
        assert result.error.errno == errno.EIO

    def test_repeat_calls_are_identical(self, large_image) -> None:
        image = large_image()
        image[PSP_MAGIC_OFFSET:PSP_MAGIC_OFFSET + 8] = b"PSP GAME"
        stream = io.BytesIO(image)

        first = detect_system(stream)
        stream.seek(0)
        second = detect_system(stream)

        assert first == second == Ok("psp")
