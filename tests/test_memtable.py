import pytest

from kvengine.entry import TOMBSTONE
from kvengine.memtable import Memtable, MemtableFullError


def test_put_then_get():
    mem = Memtable(10)
    mem.put("a", "one")
    assert mem.get("a") == "one"


def test_get_missing_is_none():
    assert Memtable(10).get("nothing") is None


def test_overwrite_returns_latest_and_counts():
    mem = Memtable(10)
    mem.put("a", "one")
    mem.put("a", "two")
    assert mem.get("a") == "two"
    assert len(mem) == 2


def test_delete_hides_value_and_keeps_tombstone():
    mem = Memtable(10)
    mem.put("a", "one")
    mem.delete("a")
    assert mem.get("a") is None
    entry = mem.get_all()["a"]
    assert entry.tombstone == TOMBSTONE
    assert entry.value == b""


def test_full_table_refuses_put():
    mem = Memtable(2)
    mem.put("a", "1")
    mem.put("b", "2")
    with pytest.raises(MemtableFullError):
        mem.put("c", "3")
    assert mem.get("c") is None
    assert len(mem) == 2


def test_delete_allowed_past_limit():
    mem = Memtable(1)
    mem.put("a", "1")
    mem.delete("b")
    assert len(mem) == 2
    assert mem.get_all()["b"].is_deleted


def test_get_all_holds_encoded_entries():
    mem = Memtable(5)
    mem.put("key", "value")
    entry = mem.get_all()["key"]
    assert (entry.key, entry.value) == (b"key", b"value")


def test_get_all_is_a_snapshot():
    mem = Memtable(5)
    mem.put("a", "1")
    snapshot = mem.get_all()
    mem.put("b", "2")
    assert set(snapshot) == {"a"}
    assert set(mem.get_all()) == {"a", "b"}


def test_zero_capacity_refuses_first_put():
    with pytest.raises(MemtableFullError):
        Memtable(0).put("a", "1")