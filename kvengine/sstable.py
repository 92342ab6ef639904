"""Sorted string table files: data, index, summary, bloom filter and Merkle metadata."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterable
from os import PathLike
from pathlib import Path

from kvengine.bloom import BloomFilter
from kvengine.config import DEFAULT_CONFIG
from kvengine.entry import Entry
from kvengine.merkle import MerkleTree
from kvengine.wal import CorruptEntryError, iter_entries

BLOOM_SIZE = 1024
BLOOM_HASHES = 3

_U64 = struct.Struct("<Q")


def _part(path: str | PathLike[str], suffix: str) -> Path:
    return Path(os.fspath(path) + suffix)


def _index_record(key: bytes, offset: int) -> bytes:
    return _U64.pack(len(key)) + key + _U64.pack(offset)


def create_sstable(
    path: str | PathLike[str],
    entries: Iterable[Entry],
    summary_step: int = DEFAULT_CONFIG.summary_step,
) -> None:
    """Write an SSTable made of ``path`` plus .data, .index, .filter, .summary and .meta.

    Entries are written in key order. The index maps each key to the offset of
    its record in the data file, the summary keeps every ``summary_step``-th
    index record, and the meta file holds the Merkle root of the values.
    """
    if summary_step <= 0:
        raise ValueError("summary step must be positive")

    ordered = sorted(entries, key=lambda e: bytes(e.key))
    bloom = BloomFilter(BLOOM_SIZE, BLOOM_HASHES)
    index_records: list[bytes] = []
    offset = 0

    with open(_part(path, ".data"), "wb") as data_file, open(
        _part(path, ".index"), "wb"
    ) as index_file:
        for entry in ordered:
            serialized = entry.serialize()
            data_file.write(serialized)
            record = _index_record(bytes(entry.key), offset)
            index_file.write(record)
            index_records.append(record)
            offset += len(serialized)
            bloom.add(entry.key)

    bloom.save_to_file(_part(path, ".filter"))
    _part(path, ".summary").write_bytes(b"".join(index_records[::summary_step]))

    tree = MerkleTree.from_data(entry.value for entry in ordered)
    _part(path, ".meta").write_bytes(tree.root_hash)


def verify_sstable(path: str | PathLike[str]) -> bool:
    """Recompute the Merkle root of the data file and compare it with the stored one.

    Reading stops at the first damaged record, so altered data yields False.
    """
    values: list[bytes] = []
    with open(_part(path, ".data"), "rb") as data_file:
        try:
            for entry in iter_entries(data_file):
                values.append(entry.value)
        except CorruptEntryError:
            pass

    computed = MerkleTree.from_data(values).root_hash
    expected = _part(path, ".meta").read_bytes()
    return computed == expected


def read_index(path: str | PathLike[str]) -> list[tuple[bytes, int]]:
    """Return the (key, data offset) pairs stored in the index file."""
    records: list[tuple[bytes, int]] = []
    with open(_part(path, ".index"), "rb") as index_file:
        while len(size_bytes := index_file.read(_U64.size)) == _U64.size:
            (key_size,) = _U64.unpack(size_bytes)
            key = index_file.read(key_size)
            offset_bytes = index_file.read(_U64.size)
            if len(key) != key_size or len(offset_bytes) != _U64.size:
                break
            records.append((key, _U64.unpack(offset_bytes)[0]))
    return records