"""Tests for the Memory KV store."""

import threading

from txkv.kv.memory import Memory


class TestMemoryBasic:
    def test_set_get(self):
        m = Memory()
        m.set("k", "v")
        assert m.get("k") == "v"

    def test_get_missing(self):
        m = Memory()
        assert m.get("nope") is None

    def test_get_default(self):
        m = Memory()
        assert m.get("nope", "fallback") == "fallback"

    def test_stores_none(self):
        m = Memory()
        m.set("k", None)
        assert "k" in m
        assert m.get("k", "fallback") is None

    def test_opaque_values(self):
        m = Memory()
        m.set("list", [1, 2])
        m.set("bytes", b"raw")
        assert m.get("list") == [1, 2]
        assert m.get("bytes") == b"raw"

    def test_contains(self):
        m = Memory()
        m.set("k", "v")
        assert "k" in m
        assert "nope" not in m

    def test_keys(self):
        m = Memory()
        m.set("a", "1")
        m.set("b", "2")
        assert set(m.keys()) == {"a", "b"}

    def test_initial(self):
        m = Memory({"a": "1"})
        assert m.get("a") == "1"

    def test_initial_is_copied(self):
        seed = {"a": "1"}
        m = Memory(seed)
        m.set("b", "2")
        assert seed == {"a": "1"}

    def test_set_many(self):
        m = Memory()
        m.set_many(a="1", b=None)
        assert m.get("a") == "1"
        assert "b" in m
        assert m.get("b", "fallback") is None

    def test_overwrite(self):
        m = Memory()
        m.set("k", "old")
        m.set("k", "new")
        assert m.get("k") == "new"


class TestMemoryRemove:
    def test_remove(self):
        m = Memory()
        m.set("k", "v")
        m.remove("k")
        assert m.get("k") is None

    def test_remove_missing(self):
        m = Memory()
        m.remove("nope")  # should not raise

    def test_remove_many(self):
        m = Memory()
        m.set_many(a="1", b="2", c="3")
        m.remove_many("a", "c", "missing")
        assert m.get("a") is None
        assert m.get("b") == "2"
        assert m.get("c") is None


class TestMemoryThreads:
    def test_concurrent_writes(self):
        m = Memory()

        def write(thread_id):
            for i in range(100):
                m.set(f"t{thread_id}-{i}", i)

        threads = [threading.Thread(target=write, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(list(m.keys())) == 800
