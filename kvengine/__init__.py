"""A small key-value storage engine with a memtable, write-ahead log and SSTables."""

__version__ = "0.1.0"
__all__ = ["config", "entry", "wal", "memtable", "bloom", "merkle", "sstable", "cli"]