"""Tests for gitwatch_core.ignore_cache."""

import pytest

from conftest import RecordingOracle
from gitwatch_core.ignore_cache import IgnoreCache
from gitwatch_core.oracle import OracleError


class TestCacheHits:
    """Verdicts are served from the cache while fresh."""

    def test_miss_consults_oracle(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)

        assert cache.query("/repo/a.py") is False
        assert oracle.count("/repo/a.py") == 1
        assert "/repo/a.py" in cache
        assert len(cache) == 1

    def test_repeated_queries_call_oracle_once(self, clock):
        oracle = RecordingOracle(ignored=["/repo/a.log"])
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)

        results = [cache.query("/repo/a.log") for _ in range(5)]

        assert results == [True] * 5
        assert oracle.count("/repo/a.log") == 1
        assert cache.stats.hits == 4
        assert cache.stats.misses == 1

    def test_path_objects_and_strings_share_entries(self, oracle, clock, tmp_path):
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)

        cache.query(tmp_path / "a.py")
        cache.query(str(tmp_path / "a.py"))

        assert len(oracle.calls) == 1


class TestCapacityEviction:
    """Oldest entries go first when the cache is full."""

    def test_inserting_beyond_capacity_evicts_oldest(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=3, clock=clock)
        for name in ["a", "b", "c", "d"]:
            cache.query(name)

        assert "a" not in cache
        assert all(name in cache for name in ["b", "c", "d"])
        assert len(cache) == 3

        cache.query("a")
        assert oracle.count("a") == 2

    def test_size_never_exceeds_max(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=4, clock=clock)
        for i in range(50):
            cache.query(f"file{i}")
            assert len(cache) <= 4

    def test_scenario_evicted_path_is_rechecked(self, clock):
        """max_size=2: A actionable, B ignored, C actionable evicts A."""
        oracle = RecordingOracle(ignored=["B"])
        cache = IgnoreCache(oracle, max_age=30, max_size=2, clock=clock)

        assert cache.query("A") is False
        assert cache.query("B") is True
        assert cache.query("C") is False
        assert "A" not in cache

        assert cache.query("A") is False
        assert oracle.count("A") == 2
        assert oracle.count("B") == 1

    def test_zero_size_always_consults_oracle(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=0, clock=clock)

        cache.query("a")
        cache.query("a")
        cache.query("a")

        assert oracle.count("a") == 3
        assert len(cache) == 0


class TestAgeEviction:
    """Entries older than max_age are re-validated."""

    def test_stale_entry_is_recomputed(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)
        cache.query("a")

        clock.advance(30.001)
        cache.query("a")

        assert oracle.count("a") == 2

    def test_entry_expires_exactly_at_max_age(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)
        cache.query("a")

        clock.advance(29.5)
        cache.query("a")
        assert oracle.count("a") == 1

        clock.advance(0.5)
        cache.query("a")
        assert oracle.count("a") == 2

    def test_only_expired_prefix_is_evicted(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=10, max_size=10, clock=clock)
        cache.query("old1")
        cache.query("old2")
        clock.advance(6)
        cache.query("young")
        clock.advance(5)

        cache.query("other")

        assert "old1" not in cache
        assert "old2" not in cache
        assert "young" in cache
        assert cache.stats.evictions == 2

    def test_changed_verdict_seen_after_expiry(self, clock):
        oracle = RecordingOracle()
        cache = IgnoreCache(oracle, max_age=5, max_size=10, clock=clock)
        assert cache.query("a.tmp") is False

        oracle.ignored.add("a.tmp")
        assert cache.query("a.tmp") is False

        clock.advance(5)
        assert cache.query("a.tmp") is True


class TestErrors:
    """Oracle failures propagate and nothing is cached."""

    def test_oracle_error_propagates(self, clock):
        oracle = RecordingOracle(error=OracleError("git exploded"))
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)

        with pytest.raises(OracleError, match="git exploded"):
            cache.query("a")

        assert len(cache) == 0

    @pytest.mark.parametrize("kwargs", [{"max_age": -1}, {"max_size": -1}])
    def test_negative_limits_rejected(self, oracle, kwargs):
        with pytest.raises(ValueError):
            IgnoreCache(oracle, **kwargs)

    def test_clear(self, oracle, clock):
        cache = IgnoreCache(oracle, max_age=30, max_size=10, clock=clock)
        cache.query("a")
        cache.clear()

        assert len(cache) == 0
        cache.query("a")
        assert oracle.count("a") == 2
