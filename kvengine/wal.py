"""Write-ahead log of serialized entries."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Iterator
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from kvengine.entry import CRC, HEADER, Entry

logger = logging.getLogger(__name__)


class CorruptEntryError(Exception):
    """A record in a log or data file is truncated or fails its checksum."""


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise CorruptEntryError(f"truncated {what}")
    return data


def _read_record(stream: BinaryIO) -> tuple[Entry, bool] | None:
    """Read one record; return it with its checksum validity, or None at end."""
    crc_bytes = stream.read(CRC.size)
    if not crc_bytes:
        return None
    if len(crc_bytes) < CRC.size:
        raise CorruptEntryError("truncated checksum")
    (crc,) = CRC.unpack(crc_bytes)

    header = _read_exact(stream, HEADER.size, "header")
    timestamp, tombstone, key_size, value_size = HEADER.unpack(header)
    key = _read_exact(stream, key_size, "key")
    value = _read_exact(stream, value_size, "value")

    valid = zlib.crc32(header + key + value) == crc
    return Entry(timestamp, tombstone, key, value, crc=crc), valid


def read_one_entry(stream: BinaryIO) -> Entry | None:
    """Read the next entry from a binary stream.

    Returns None at a clean end of stream and raises CorruptEntryError when
    the record is truncated or its checksum does not match.
    """
    record = _read_record(stream)
    if record is None:
        return None
    entry, valid = record
    if not valid:
        raise CorruptEntryError("checksum mismatch, record is damaged")
    return entry


def iter_entries(stream: BinaryIO) -> Iterator[Entry]:
    """Yield entries from a stream until its end; damage raises CorruptEntryError."""
    while (entry := read_one_entry(stream)) is not None:
        yield entry


class WAL:
    """Append-only log file of entries."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        self._file = open(self.path, "a+b")

    def write(self, entry: Entry) -> None:
        """Append one entry and flush it to the file."""
        self._file.write(entry.serialize())
        self._file.flush()

    def read_all(self) -> list[Entry]:
        """Read every entry from the start, skipping those with a bad checksum."""
        self._file.seek(0)
        entries = []
        while (record := _read_record(self._file)) is not None:
            entry, valid = record
            if not valid:
                logger.warning("checksum mismatch in %s, skipping record", self.path)
                continue
            entries.append(entry)
        return entries

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> WAL:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()