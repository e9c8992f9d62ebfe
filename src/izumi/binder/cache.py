"""
PlanCache - thread-safe, compute-once memoization of construction plans.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .model import CacheKey, ConstructionPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Counters describing cache usage."""

    hits: int
    misses: int
    size: int
    max_entries: int | None


class PlanCache:
    """
    Memoizes ConstructionPlans by CacheKey.

    The first caller to miss on a key builds the plan while holding a lock
    specific to that key; concurrent callers for the same key wait on it and
    receive the identical plan instance. The map itself is guarded by a short
    lock that is never held while a plan is being built. Failed builds are not
    cached.

    By default entries live as long as the cache (the shared cache lives for
    the process). Passing ``max_entries`` evicts least recently used plans
    beyond that size.
    """

    _shared: PlanCache | None = None
    _shared_lock = threading.Lock()

    def __init__(self, max_entries: int | None = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._plans: OrderedDict[CacheKey, ConstructionPlan[Any]] = OrderedDict()
        self._key_locks: dict[CacheKey, threading.Lock] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @classmethod
    def shared(cls) -> PlanCache:
        """Get the process-wide cache, creating it on first use."""
        if cls._shared is None:
            with cls._shared_lock:
                if cls._shared is None:
                    cls._shared = cls()
        return cls._shared

    def get_or_compute(self, key: CacheKey, compute: Callable[[], ConstructionPlan[Any]]) -> ConstructionPlan[Any]:
        """
        Return the plan cached under ``key``, building it with ``compute`` on a miss.

        Args:
            key: The cache key
            compute: Builds the plan; called at most once per key unless it raises

        Returns:
            The cached plan
        """
        plan = self._lookup(key)
        if plan is not None:
            return plan

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # another thread may have finished the build while we waited
            plan = self._lookup(key)
            if plan is not None:
                return plan

            logger.debug("Plan cache miss for %s", key)
            try:
                plan = compute()
                with self._lock:
                    self._misses += 1
                    self._plans[key] = plan
                    self._evict()
            finally:
                with self._lock:
                    self._key_locks.pop(key, None)
            return plan

    def get(self, key: CacheKey) -> ConstructionPlan[Any] | None:
        """Return the cached plan for ``key`` without building anything."""
        return self._lookup(key)

    def clear(self) -> None:
        """Drop every cached plan and reset the counters."""
        with self._lock:
            self._plans.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(self._hits, self._misses, len(self._plans), self._max_entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._plans)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._plans

    def _lookup(self, key: CacheKey) -> ConstructionPlan[Any] | None:
        with self._lock:
            plan = self._plans.get(key)
            if plan is not None:
                self._hits += 1
                if self._max_entries is not None:
                    self._plans.move_to_end(key)
            return plan

    def _evict(self) -> None:
        if self._max_entries is None:
            return
        while len(self._plans) > self._max_entries:
            evicted, _ = self._plans.popitem(last=False)
            logger.debug("Evicted plan for %s", evicted)
