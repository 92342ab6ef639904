"""In-memory table of the most recent writes."""

from __future__ import annotations

import threading
import time

from kvengine.entry import LIVE, TOMBSTONE, Entry


class MemtableFullError(Exception):
    """The memtable has reached its maximum number of writes."""


class Memtable:
    """Hash-map memtable bounded by the number of writes it has taken.

    Every put and delete counts toward the size, including overwrites of an
    existing key. Puts are refused once the limit is reached; deletes are not.
    """

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._data: dict[str, Entry] = {}
        self._size = 0
        self._lock = threading.RLock()

    def put(self, key: str, value: str) -> None:
        """Store a value, raising MemtableFullError when the table is full."""
        with self._lock:
            if self._size >= self.max_size:
                raise MemtableFullError("memtable is full")
            self._data[key] = Entry(int(time.time()), LIVE, key.encode(), value.encode())
            self._size += 1

    def get(self, key: str) -> str | None:
        """Return the live value for a key, or None if absent or deleted."""
        with self._lock:
            entry = self._data.get(key)
        if entry is None or entry.is_deleted:
            return None
        return entry.value.decode("utf-8", errors="replace")

    def delete(self, key: str) -> None:
        """Record a tombstone for a key."""
        with self._lock:
            self._data[key] = Entry(int(time.time()), TOMBSTONE, key.encode(), b"")
            self._size += 1

    def get_all(self) -> dict[str, Entry]:
        """Return a snapshot of every stored entry, tombstones included."""
        with self._lock:
            return dict(self._data)

    def __len__(self) -> int:
        return self._size