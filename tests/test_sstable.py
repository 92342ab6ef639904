import shutil

import pytest

from kvengine.bloom import BloomFilter
from kvengine.entry import Entry
from kvengine.merkle import MerkleTree
from kvengine.sstable import create_sstable, read_index, verify_sstable
from kvengine.wal import iter_entries


def _entries():
    return [
        Entry(10, 0, b"cherry", b"red"),
        Entry(11, 0, b"apple", b"green"),
        Entry(12, 1, b"banana", b""),
        Entry(13, 0, b"date", b"brown"),
        Entry(14, 0, b"elder", b"black"),
    ]


def test_index_is_sorted_and_offsets_follow_records(tmp_path):
    base = tmp_path / "t"
    entries = _entries()
    create_sstable(base, entries, 5)

    index = read_index(base)
    ordered = sorted(entries, key=lambda e: e.key)
    assert [key for key, _ in index] == [e.key for e in ordered]

    offset = 0
    for (_, stored), entry in zip(index, ordered):
        assert stored == offset
        offset += len(entry.serialize())


def test_data_file_round_trips(tmp_path):
    base = tmp_path / "t"
    entries = _entries()
    create_sstable(base, entries, 5)

    with open(str(base) + ".data", "rb") as fh:
        read_back = list(iter_entries(fh))
    assert read_back == sorted(entries, key=lambda e: e.key)


def test_index_wire_format(tmp_path):
    base = tmp_path / "one"
    create_sstable(base, [Entry(1, 0, b"k", b"v")], 5)
    assert [tuple(pair) for pair in read_index(base)] == [(b"k", 0)]
    raw = (tmp_path / "one.index").read_bytes()
    assert raw == (1).to_bytes(8, "little") + b"k" + (0).to_bytes(8, "little")


def test_summary_keeps_every_nth_index_record(tmp_path):
    base = tmp_path / "t"
    create_sstable(base, _entries(), 2)
    shutil.copy(tmp_path / "t.summary", tmp_path / "s.index")
    keys = [key for key, _ in read_index(tmp_path / "s")]
    assert keys == [b"apple", b"cherry", b"elder"]


def test_summary_step_one_equals_index(tmp_path):
    base = tmp_path / "t"
    create_sstable(base, _entries(), 1)
    shutil.copy(tmp_path / "t.summary", tmp_path / "s.index")
    summary = [tuple(pair) for pair in read_index(tmp_path / "s")]
    index = [tuple(pair) for pair in read_index(base)]
    assert len(index) == 5
    assert summary == index


def test_filter_file_matches_bloom_of_keys(tmp_path):
    base = tmp_path / "t"
    entries = _entries()
    create_sstable(base, entries, 5)
    bloom = BloomFilter(1024, 3)
    for entry in entries:
        bloom.add(entry.key)
    stored = (tmp_path / "t.filter").read_bytes()
    assert len(stored) == 1024
    assert stored == bytes(bloom.bits)


def test_meta_holds_merkle_root_of_sorted_values(tmp_path):
    base = tmp_path / "t"
    entries = _entries()
    create_sstable(base, entries, 5)
    values = [e.value for e in sorted(entries, key=lambda e: e.key)]
    assert (tmp_path / "t.meta").read_bytes() == MerkleTree.from_data(values).root_hash


def test_verify_succeeds_on_untouched_table(tmp_path):
    base = tmp_path / "t"
    create_sstable(base, _entries(), 5)
    assert verify_sstable(base) is True


def test_verify_detects_damaged_data(tmp_path):
    base = tmp_path / "t"
    create_sstable(base, _entries(), 5)
    data_path = tmp_path / "t.data"
    raw = bytearray(data_path.read_bytes())
    raw[-1] ^= 0xFF
    data_path.write_bytes(bytes(raw))
    assert verify_sstable(base) is False


def test_verify_detects_altered_meta(tmp_path):
    base = tmp_path / "t"
    create_sstable(base, _entries(), 5)
    meta = tmp_path / "t.meta"
    meta.write_bytes(bytes(32))
    assert verify_sstable(base) is False


def test_verify_missing_table_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        verify_sstable(tmp_path / "absent")


def test_read_index_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_index(tmp_path / "absent")


def test_non_positive_summary_step_rejected(tmp_path):
    with pytest.raises(ValueError):
        create_sstable(tmp_path / "t", _entries(), 0)


def test_empty_table_rejected(tmp_path):
    with pytest.raises(ValueError):
        create_sstable(tmp_path / "t", [], 5)


def test_input_list_is_not_reordered(tmp_path):
    entries = _entries()
    original = list(entries)
    create_sstable(tmp_path / "t", entries, 5)
    assert entries == original