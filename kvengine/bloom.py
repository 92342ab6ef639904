"""Bloom filter over byte strings, hashed with seeded 64-bit FNV-1a."""

from __future__ import annotations

from collections.abc import Iterator
from os import PathLike
from pathlib import Path

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK64 = (1 << 64) - 1


def _fnv1a64(data: bytes) -> int:
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK64
    return h


class BloomFilter:
    """Bit array of ``size`` bytes probed by ``k`` seeded hashes."""

    def __init__(self, size: int, k: int) -> None:
        if size <= 0:
            raise ValueError("bloom filter size must be positive")
        self.size = size
        self.k = k
        self.bits = bytearray(size)

    def _positions(self, data: bytes) -> Iterator[int]:
        nbits = self.size * 8
        payload = bytes(data)
        for seed in range(self.k):
            yield _fnv1a64(seed.to_bytes(8, "little") + payload) % nbits

    def add(self, data: bytes) -> None:
        """Mark a key as present."""
        for pos in self._positions(data):
            self.bits[pos >> 3] |= 1 << (pos & 7)

    def might_contain(self, data: bytes) -> bool:
        """Return False if the key is surely absent, True if it may be present."""
        return all(self.bits[pos >> 3] & (1 << (pos & 7)) for pos in self._positions(data))

    def save_to_file(self, path: str | PathLike[str]) -> None:
        """Write the raw bit array to a file."""
        Path(path).write_bytes(bytes(self.bits))