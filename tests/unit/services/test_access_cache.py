from uuid import uuid4

import pytest

from src.app.services.access_control import (
    InMemoryAccessCache,
    NullAccessCache,
    TTLCache,
    create_access_cache,
)
from tests.unit.factories import make_membership, make_role


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_entries_expire_after_ttl(clock):
    cache = TTLCache(ttl_seconds=300, max_size=10, clock=clock)
    cache.put("a", 1)

    clock.advance(299)
    assert cache.get("a") == 1

    clock.advance(1)
    assert cache.get("a") is None
    assert len(cache) == 0


def test_least_recently_used_entry_is_evicted(clock):
    cache = TTLCache(ttl_seconds=300, max_size=2, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get("a")
    cache.put("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.stats.evictions == 1


def test_put_refreshes_deadline(clock):
    cache = TTLCache(ttl_seconds=10, max_size=10, clock=clock)
    cache.put("a", 1)
    clock.advance(8)
    cache.put("a", 2)
    clock.advance(8)

    assert cache.get("a") == 2


def test_stats_track_hits_and_misses(clock):
    cache = TTLCache(ttl_seconds=10, max_size=10, clock=clock)
    cache.put("a", 1)
    cache.get("a")
    cache.get("missing")

    assert cache.stats.to_dict() == {
        "hits": 1,
        "misses": 1,
        "evictions": 0,
        "invalidations": 0,
        "hit_rate": 0.5,
    }


def test_invalidate_reports_whether_key_was_present(clock):
    cache = TTLCache(ttl_seconds=10, max_size=10, clock=clock)
    cache.put("a", 1)

    assert cache.invalidate("a") is True
    assert cache.invalidate("a") is False
    assert cache.stats.invalidations == 1


def test_membership_and_role_round_trip(clock):
    cache = InMemoryAccessCache(ttl_seconds=300, clock=clock)
    tenant_id, user_id = uuid4(), uuid4()
    role = make_role("Employee", {})
    membership = make_membership(tenant_id, user_id, [role.id])

    cache.put_membership(membership)
    cache.put_role(role)

    assert cache.get_membership(tenant_id, user_id) == membership
    assert cache.get_membership(uuid4(), user_id) is None
    assert cache.get_role(role.id) == role


def test_invalidate_tenant_drops_only_that_tenants_memberships(clock):
    cache = InMemoryAccessCache(clock=clock)
    tenant_a, tenant_b, role_id = uuid4(), uuid4(), uuid4()
    a1 = make_membership(tenant_a, uuid4(), [role_id])
    a2 = make_membership(tenant_a, uuid4(), [role_id])
    b1 = make_membership(tenant_b, uuid4(), [role_id])
    for membership in (a1, a2, b1):
        cache.put_membership(membership)

    cache.invalidate_tenant(tenant_a)

    assert cache.get_membership(tenant_a, a1.user_id) is None
    assert cache.get_membership(tenant_a, a2.user_id) is None
    assert cache.get_membership(tenant_b, b1.user_id) == b1


def test_clear_drops_everything(clock):
    cache = InMemoryAccessCache(clock=clock)
    role = make_role("Employee", {})
    cache.put_role(role)
    cache.put_membership(make_membership(uuid4(), uuid4(), [role.id]))

    cache.clear()

    assert len(cache.roles) == 0
    assert len(cache.memberships) == 0


def test_null_cache_never_returns_values():
    cache = NullAccessCache()
    role = make_role("Employee", {})
    cache.put_role(role)

    assert cache.get_role(role.id) is None


def test_create_access_cache_backends():
    assert isinstance(create_access_cache("memory", 60, 100), InMemoryAccessCache)
    assert isinstance(create_access_cache("none", 60, 100), NullAccessCache)
    with pytest.raises(ValueError):
        create_access_cache("redis", 60, 100)
