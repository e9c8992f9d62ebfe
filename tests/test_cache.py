#!/usr/bin/env python3
"""
Unit tests for the plan cache.
"""

import threading
import time
import unittest

from binder_targets import Counter, Named
from izumi.binder import CacheKey, ConstructionPlanner, MapValueSource, PlanCache


def key_for(values, policy=True):
    return CacheKey(Named, Named, Named, MapValueSource(values), policy)


class TestCacheKey(unittest.TestCase):
    """Test CacheKey equality."""

    def test_equal_sources_make_equal_keys(self):
        """Test that separately allocated but equal sources give equal keys."""
        self.assertEqual(key_for({"name": "a"}), key_for({"name": "a"}))
        self.assertEqual(hash(key_for({"name": "a"})), hash(key_for({"name": "a"})))

    def test_each_component_participates(self):
        """Test that every key component distinguishes keys."""
        base = key_for({"name": "a"})

        self.assertNotEqual(base, key_for({"name": "b"}))
        self.assertNotEqual(base, key_for({"name": "a"}, policy=False))
        self.assertNotEqual(base, CacheKey(Counter, Named, Named, MapValueSource({"name": "a"}), True))

    def test_str(self):
        self.assertEqual(str(key_for({})), "Named via Named")


class TestPlanCache(unittest.TestCase):
    """Test memoization behaviour."""

    def setUp(self):
        self.planner = ConstructionPlanner()

    def compute_for(self, key):
        return lambda: self.planner.build(
            key.construct_class,
            key.construct_type,
            key.using_callable,
            key.value_source,
            key.accept_missing_nullable_as_null,
        )

    def test_same_key_returns_identical_plan(self):
        """Test that equal keys return the cached instance."""
        cache = PlanCache()
        first = cache.get_or_compute(key_for({"name": "a"}), self.compute_for(key_for({"name": "a"})))
        second = cache.get_or_compute(key_for({"name": "a"}), self.compute_for(key_for({"name": "a"})))

        self.assertIs(first, second)
        self.assertEqual(len(cache), 1)
        stats = cache.stats()
        self.assertEqual((stats.hits, stats.misses, stats.size), (1, 1, 1))

    def test_get_without_compute(self):
        """Test lookups that never build."""
        cache = PlanCache()
        key = key_for({"name": "a"})

        self.assertIsNone(cache.get(key))
        plan = cache.get_or_compute(key, self.compute_for(key))
        self.assertIs(cache.get(key), plan)
        self.assertIn(key, cache)

    def test_failed_build_is_not_cached(self):
        """Test that an exception from the builder leaves no entry behind."""
        cache = PlanCache()
        key = key_for({"name": "a"})

        def failing():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            cache.get_or_compute(key, failing)

        self.assertNotIn(key, cache)
        self.assertIsNotNone(cache.get_or_compute(key, self.compute_for(key)))

    def test_concurrent_misses_compute_once(self):
        """Test that racing callers share a single build."""
        cache = PlanCache()
        key = key_for({"name": "a"})
        calls = []
        build = self.compute_for(key)

        def slow_compute():
            calls.append(1)
            time.sleep(0.05)
            return build()

        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(cache.get_or_compute(key_for({"name": "a"}), slow_compute))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 8)
        self.assertTrue(all(plan is results[0] for plan in results))

    def test_lru_eviction(self):
        """Test that a bounded cache evicts the least recently used plan."""
        cache = PlanCache(max_entries=2)
        keys = [key_for({"name": name}) for name in ("a", "b", "c")]

        cache.get_or_compute(keys[0], self.compute_for(keys[0]))
        cache.get_or_compute(keys[1], self.compute_for(keys[1]))
        cache.get(keys[0])
        cache.get_or_compute(keys[2], self.compute_for(keys[2]))

        self.assertIn(keys[0], cache)
        self.assertNotIn(keys[1], cache)
        self.assertIn(keys[2], cache)
        self.assertEqual(cache.stats().max_entries, 2)

    def test_invalid_bound(self):
        with self.assertRaises(ValueError):
            PlanCache(max_entries=0)

    def test_clear(self):
        cache = PlanCache()
        key = key_for({})
        cache.get_or_compute(key, self.compute_for(key))
        cache.clear()

        self.assertEqual(len(cache), 0)
        self.assertEqual(cache.stats().misses, 0)

    def test_shared_cache_is_a_singleton(self):
        self.assertIs(PlanCache.shared(), PlanCache.shared())


if __name__ == "__main__":
    unittest.main()
