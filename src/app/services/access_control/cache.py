"""
Access Control Cache

Time-boxed memoization of membership and role lookups. Entries carry their
own deadline; expired entries are dropped on read, there is no sweeper.
Staleness is bounded by the TTL and can be tightened by the invalidation
hooks that mutation use cases call after committing.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar
from uuid import UUID

from .dtos import MembershipInfo, RoleInfo

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheStats:
    """Cache performance statistics"""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "invalidations": self.invalidations,
            "hit_rate": round(self.hit_rate, 4),
        }


class TTLCache(Generic[K, V]):
    """
    Bounded LRU map with a per-entry deadline.

    Safe to share between coroutines and threads: every operation runs under
    one lock and never awaits. ``clock`` returns seconds and defaults to
    ``time.monotonic``.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_size: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._lock = threading.RLock()
        self._data: "OrderedDict[K, Tuple[float, V]]" = OrderedDict()
        self.stats = CacheStats()

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                self.stats.misses += 1
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._data[key]
                self.stats.evictions += 1
                self.stats.misses += 1
                return None

            self._data.move_to_end(key)
            self.stats.hits += 1
            return value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = (self._clock() + self.ttl, value)
            self._data.move_to_end(key)
            while len(self._data) > self.max_size:
                self._data.popitem(last=False)
                self.stats.evictions += 1

    def invalidate(self, key: K) -> bool:
        with self._lock:
            if self._data.pop(key, None) is None:
                return False
            self.stats.invalidations += 1
            return True

    def invalidate_where(self, predicate: Callable[[K, V], bool]) -> int:
        with self._lock:
            keys = [key for key, (_, value) in self._data.items() if predicate(key, value)]
            for key in keys:
                del self._data[key]
            self.stats.invalidations += len(keys)
            return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class IAccessCache(ABC):
    """Cache port in front of the membership and role readers"""

    @abstractmethod
    def get_membership(self, tenant_id: UUID, user_id: UUID) -> Optional[MembershipInfo]:
        pass

    @abstractmethod
    def put_membership(self, membership: MembershipInfo) -> None:
        pass

    @abstractmethod
    def get_role(self, role_id: UUID) -> Optional[RoleInfo]:
        pass

    @abstractmethod
    def put_role(self, role: RoleInfo) -> None:
        pass

    @abstractmethod
    def invalidate_membership(self, tenant_id: UUID, user_id: UUID) -> None:
        pass

    @abstractmethod
    def invalidate_role(self, role_id: UUID) -> None:
        pass

    @abstractmethod
    def invalidate_tenant(self, tenant_id: UUID) -> None:
        """Drop every membership cached for a tenant"""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


def membership_cache_key(tenant_id: UUID, user_id: UUID) -> str:
    return f"{tenant_id}:{user_id}"


class InMemoryAccessCache(IAccessCache):
    """Per-process cache; each instance of the service tolerates up to one TTL of staleness"""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_size: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.memberships: TTLCache[str, MembershipInfo] = TTLCache(ttl_seconds, max_size, clock)
        self.roles: TTLCache[str, RoleInfo] = TTLCache(ttl_seconds, max_size, clock)

    def get_membership(self, tenant_id: UUID, user_id: UUID) -> Optional[MembershipInfo]:
        return self.memberships.get(membership_cache_key(tenant_id, user_id))

    def put_membership(self, membership: MembershipInfo) -> None:
        self.memberships.put(
            membership_cache_key(membership.tenant_id, membership.user_id), membership
        )

    def get_role(self, role_id: UUID) -> Optional[RoleInfo]:
        return self.roles.get(str(role_id))

    def put_role(self, role: RoleInfo) -> None:
        self.roles.put(str(role.id), role)

    def invalidate_membership(self, tenant_id: UUID, user_id: UUID) -> None:
        self.memberships.invalidate(membership_cache_key(tenant_id, user_id))

    def invalidate_role(self, role_id: UUID) -> None:
        self.roles.invalidate(str(role_id))

    def invalidate_tenant(self, tenant_id: UUID) -> None:
        self.memberships.invalidate_where(lambda _, value: value.tenant_id == tenant_id)

    def clear(self) -> None:
        self.memberships.clear()
        self.roles.clear()


class NullAccessCache(IAccessCache):
    """Caching disabled: every lookup goes to the store"""

    def get_membership(self, tenant_id: UUID, user_id: UUID) -> Optional[MembershipInfo]:
        return None

    def put_membership(self, membership: MembershipInfo) -> None:
        pass

    def get_role(self, role_id: UUID) -> Optional[RoleInfo]:
        return None

    def put_role(self, role: RoleInfo) -> None:
        pass

    def invalidate_membership(self, tenant_id: UUID, user_id: UUID) -> None:
        pass

    def invalidate_role(self, role_id: UUID) -> None:
        pass

    def invalidate_tenant(self, tenant_id: UUID) -> None:
        pass

    def clear(self) -> None:
        pass


def create_access_cache(backend: str, ttl_seconds: float, max_size: int) -> IAccessCache:
    """Build the cache selected by ACCESS_CACHE_BACKEND"""
    if backend == "memory":
        return InMemoryAccessCache(ttl_seconds=ttl_seconds, max_size=max_size)
    if backend == "none":
        return NullAccessCache()
    raise ValueError(f"Unknown access cache backend: {backend}")
