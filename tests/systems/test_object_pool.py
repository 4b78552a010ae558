"""
test_object_pool.py
-------------------
Regression tests for ObjectPool freelist behaviour.

Covers:
1. Warmup pre-allocation and reuse of idle objects
2. reset_fn receives get() arguments
3. Releasing a non-active object is a no-op
4. The freelist never grows past max_size (extras are destroyed)
"""

import pytest

from birddash.systems.object_pool import ObjectPool


class Dummy:
    def __init__(self):
        self.active = False
        self.visible = False
        self.value = None
        self.destroyed = False

    def destroy(self):
        self.destroyed = True


def reset_dummy(obj, value=None):
    obj.value = value


@pytest.fixture
def pool():
    return ObjectPool(Dummy, reset_dummy, max_size=3, warmup=2, name="test")


class TestObjectPool:

    def test_warmup_creates_idle_objects(self, pool):
        assert pool.available_count == 2
        assert pool.active_count == 0
        assert pool.total_created == 2

    def test_warmup_is_capped_by_max_size(self):
        small = ObjectPool(Dummy, max_size=2, warmup=10)
        assert small.available_count == 2

    def test_get_reuses_idle_then_allocates(self, pool):
        a = pool.get()
        b = pool.get()
        assert pool.total_created == 2
        c = pool.get()
        assert pool.total_created == 3
        assert all(o.active and o.visible for o in (a, b, c))
        assert pool.active_count == 3

    def test_get_forwards_arguments_to_reset(self, pool):
        obj = pool.get(value=42)
        assert obj.value == 42

    def test_release_returns_object_to_freelist(self, pool):
        obj = pool.get()
        assert pool.release(obj) is True
        assert not obj.active and not obj.visible
        assert pool.available_count == 2
        assert pool.active_count == 0

    def test_release_of_inactive_object_is_noop(self, pool):
        obj = pool.get()
        pool.release(obj)
        before = pool.available_count
        assert pool.release(obj) is False
        assert pool.release(Dummy()) is False
        assert pool.available_count == before

    def test_freelist_never_exceeds_max_size(self, pool):
        objects = [pool.get() for _ in range(6)]
        kept = [pool.release(o) for o in objects]

        assert pool.available_count == 3
        assert kept.count(True) == 3
        assert sum(o.destroyed for o in objects) == 3

    def test_release_all_and_destroy(self, pool):
        objects = [pool.get() for _ in range(3)]
        pool.release_all()
        assert pool.active_count == 0
        assert pool.available_count == 3

        pool.destroy()
        assert pool.available_count == 0
        assert all(o.destroyed for o in objects)

    def test_get_active_is_a_snapshot(self, pool):
        pool.get()
        pool.get()
        for obj in pool.get_active():
            pool.release(obj)
        assert pool.active_count == 0
