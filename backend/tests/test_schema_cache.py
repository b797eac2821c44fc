import pytest

from core.errors import CatalogError
from core.schema_cache import SchemaCache
from models.schema import TableInfo


class CountingReader:
    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail

    def read(self):
        self.calls += 1
        if self.fail:
            raise CatalogError("connection dropped")
        return {"orders": TableInfo()}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_hit_within_ttl_returns_same_object():
    clock, reader = FakeClock(), CountingReader()
    cache = SchemaCache(ttl_seconds=3600, clock=clock)

    first = cache.get(reader)
    clock.now += 3599
    second = cache.get(reader)

    assert second is first
    assert reader.calls == 1


def test_expired_entry_is_refreshed():
    clock, reader = FakeClock(), CountingReader()
    cache = SchemaCache(ttl_seconds=3600, clock=clock)

    first = cache.get(reader)
    clock.now += 3600
    second = cache.get(reader)

    assert reader.calls == 2
    assert second is not first
    assert second == first


def test_invalidate_forces_a_read():
    reader = CountingReader()
    cache = SchemaCache(clock=FakeClock())
    cache.get(reader)
    cache.invalidate()
    cache.get(reader)
    assert reader.calls == 2


def test_failed_read_leaves_slot_empty():
    cache = SchemaCache(clock=FakeClock())
    with pytest.raises(CatalogError):
        cache.get(CountingReader(fail=True))

    reader = CountingReader()
    cache.get(reader)
    assert reader.calls == 1
