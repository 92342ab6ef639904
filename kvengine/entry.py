"""Key-value record and its binary encoding."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field

CRC = struct.Struct("<I")
HEADER = struct.Struct("<qBQQ")

LIVE = 0
TOMBSTONE = 1


@dataclass
class Entry:
    """A single record: timestamp, deletion marker, key and value.

    The encoded form is a little-endian CRC32 followed by the timestamp
    (8 bytes), tombstone (1 byte), key size (8), value size (8), key and value.
    """

    timestamp: int
    tombstone: int
    key: bytes
    value: bytes
    crc: int = field(default=0, compare=False)

    @property
    def key_size(self) -> int:
        return len(self.key)

    @property
    def value_size(self) -> int:
        return len(self.value)

    @property
    def is_deleted(self) -> bool:
        return self.tombstone == TOMBSTONE

    def serialize(self) -> bytes:
        """Encode the entry, prefixed with the CRC32 of the remaining bytes."""
        body = (
            HEADER.pack(self.timestamp, self.tombstone, self.key_size, self.value_size)
            + bytes(self.key)
            + bytes(self.value)
        )
        return CRC.pack(zlib.crc32(body)) + body