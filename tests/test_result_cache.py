"""
Unit tests for the bounded TTL result cache.
"""

import pytest

from fuelcell_control.config import ControlParameters, FuelCellConfiguration
from fuelcell_control.utils.result_cache import ResultCache, make_cache_key


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.mark.unit
class TestResultCache:
    def test_put_and_get(self):
        cache = ResultCache(max_entries=4)
        cache.put("a", 1)

        assert cache.get("a") == 1
        assert "a" in cache
        assert cache.get("missing") is None

    def test_lru_eviction(self):
        cache = ResultCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    def test_ttl_expiry(self):
        clock = FakeClock()
        cache = ResultCache(max_entries=4, ttl_seconds=10.0, clock=clock)
        cache.put("a", 1)

        clock.now = 5.0
        assert cache.get("a") == 1

        clock.now = 20.0
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_no_expiry(self):
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=None, clock=clock)
        cache.put("a", 1)
        clock.now = 1e9

        assert cache.get("a") == 1

    def test_get_or_compute(self):
        cache = ResultCache()
        calls = []

        def compute():
            calls.append(1)
            return "value"

        assert cache.get_or_compute("k", compute) == "value"
        assert cache.get_or_compute("k", compute) == "value"
        assert len(calls) == 1

    def test_stats_and_clear(self):
        cache = ResultCache()
        cache.put("a", 1)
        cache.get("a")
        cache.get("b")

        assert cache.stats() == {"entries": 1, "hits": 1, "misses": 1}
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("kwargs", [{"max_entries": 0}, {"ttl_seconds": 0}, {"ttl_seconds": -1}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            ResultCache(**kwargs)


@pytest.mark.unit
class TestCacheKey:
    def test_equal_inputs_equal_keys(self, pem_config):
        from_dict = FuelCellConfiguration.model_validate(pem_config.to_dict())

        assert make_cache_key(pem_config, ControlParameters()) == make_cache_key(
            from_dict, ControlParameters()
        )

    def test_different_inputs_different_keys(self, pem_config):
        other = pem_config.model_copy(update={"active_area": 50.0})

        assert make_cache_key(pem_config) != make_cache_key(other)

    def test_dict_and_model_parts(self):
        assert make_cache_key({"b": 1, "a": 2}) == make_cache_key({"a": 2, "b": 1})
