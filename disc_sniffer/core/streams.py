"""Byte stream access for disc images.

Detection code only needs ``seek``/``read``/``tell``; any binary file object
or ``io.BytesIO`` qualifies. Archive and compressed-image backends live
outside this package and are passed in already opened.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from ..exceptions import DiscReadError

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteStream(Protocol):
    """Seekable, readable byte source."""

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        ...

    def read(self, size: int = -1) -> bytes:
        ...

    def tell(self) -> int:
        ...


@contextmanager
def open_stream(path: str | Path) -> Iterator[ByteStream]:
    """Open ``path`` read-only; the handle is closed on every exit path.

    Raises:
        DiscReadError: the file could not be opened (errno preserved).
    """
    try:
        handle = open(path, "rb")
    except OSError as exc:
        logger.info("Could not open '%s': %s", path, exc.strerror or exc)
        raise DiscReadError.from_os_error(exc, path=str(path)) from exc
    try:
        yield handle
    finally:
        handle.close()


def seek_to(stream: ByteStream, offset: int, whence: int = io.SEEK_SET) -> int:
    try:
        return stream.seek(offset, whence)
    except OSError as exc:
        raise DiscReadError.from_os_error(exc, offset=offset) from exc
    except ValueError as exc:
        # negative offsets and closed files
        raise DiscReadError(f"Cannot seek to {offset}: {exc}", offset=offset) from exc


def read_at(stream: ByteStream, offset: int, size: int) -> bytes:
    """Seek to ``offset`` and read up to ``size`` bytes.

    The result may be shorter than ``size`` at end of stream; callers decide
    whether that is fatal.
    """
    seek_to(stream, offset)
    try:
        data = stream.read(size)
    except OSError as exc:
        raise DiscReadError.from_os_error(exc, offset=offset) from exc
    return data or b""


def stream_length(stream: ByteStream) -> int:
    return seek_to(stream, 0, io.SEEK_END)
