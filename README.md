# kvengine

A small key-value storage engine. Writes go to an in-memory memtable and
are appended to a write-ahead log (`wal.log`). When the memtable fills up,
or on request, its contents are flushed to a set of SSTable files:

- `<name>.data`: the records sorted by key, each prefixed with a CRC32
- `<name>.index`: each key with the offset of its record in the data file
- `<name>.summary`: every N-th index record
- `<name>.filter`: a Bloom filter over the keys (1024 bytes, 3 hashes)
- `<name>.meta`: the SHA-256 root hash of a Merkle tree over the values

## Installation

```
pip install .
```

## Interactive shell

```
kvengine
```

The shell takes no options (besides `--help`) and reads commands from
standard input:

| Command               | Effect                                               |
|-----------------------|------------------------------------------------------|
| `PUT <key> <value>`   | store a value (the value may contain spaces)         |
| `GET <key>`           | look up a value in the memtable                      |
| `DELETE <key>`        | record a tombstone for the key                       |
| `FLUSH`               | write the memtable to SSTable files                  |
| `VERIFY`              | check the data file against its Merkle root hash     |
| `EXIT`                | leave the shell                                      |

The command word is case-insensitive. Every `PUT` and `DELETE` is appended
to `wal.log`. The memtable counts every write, overwrites and deletes
included; when a `PUT` finds it full, or a `DELETE` fills it, the memtable
is written out as SSTable files and a fresh, empty memtable takes its place.
The SSTable files are always written as `sstable_test.*` in the current
directory, and the index is printed after each flush.

## Configuration

Settings are read from `config.json` in the current directory:

```json
{
  "memtable_max_size": 1000,
  "block_size_kb": 4,
  "cache_size": 128,
  "summary_step": 5,
  "memtable_type": "hashmap"
}
```

Keys missing from the file keep these defaults and unknown keys are
ignored. A file that is missing, cannot be decoded, or holds a value of
the wrong type yields the defaults as a whole. Only `memtable_max_size`
and `summary_step` affect the engine; the other settings are loaded but
not used.

## Library use

```python
from kvengine.config import load_config
from kvengine.memtable import Memtable
from kvengine.sstable import create_sstable, verify_sstable, read_index

config = load_config("config.json")
table = Memtable(config.memtable_max_size)
table.put("alpha", "1")
table.put("beta", "2")
table.delete("alpha")
print(table.get("alpha"))   # None: deleted
print(table.get("beta"))    # "2"

create_sstable("mytable", table.get_all().values(), config.summary_step)
print(read_index("mytable"))     # [(b"alpha", 0), (b"beta", ...)]
print(verify_sstable("mytable")) # True unless the data file was altered
```

`Memtable.put` raises `MemtableFullError` once the table has taken
`max_size` writes. `create_sstable` raises `ValueError` for an empty set of
entries or a non-positive summary step.

The write-ahead log can be used on its own:

```python
from kvengine.entry import Entry
from kvengine.wal import WAL

with WAL("wal.log") as log:
    log.write(Entry(timestamp=0, tombstone=0, key=b"k", value=b"v"))
    entries = log.read_all()
```

`WAL.read_all` skips records whose checksum does not match. To read
entries from any binary stream, use `read_one_entry` or `iter_entries` from
`kvengine.wal`; they raise `CorruptEntryError` on a truncated or damaged
record. The building blocks `BloomFilter` (`kvengine.bloom`) and
`MerkleTree` (`kvengine.merkle`) are usable directly as well.

## What it does not do

- `GET` looks only in the current memtable; flushed SSTables are never read
  back for lookups.
- The write-ahead log is only appended to; it is not replayed at start-up,
  so the memtable starts empty each time.
- Every flush overwrites the same `sstable_test.*` files; there are no
  multiple SSTable levels and no compaction.
- There is no block cache, and the Bloom filter and summary files are
  written but not consulted.

## Running the tests

```
pip install .[test]
pytest
```