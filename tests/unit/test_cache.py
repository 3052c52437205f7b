"""Unit tests for cache service."""
import pytest
from datetime import datetime, timedelta
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.services.cache_service import CacheService


class FakeClock:
    """Controllable wall clock."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class TestCacheService:
    """Test recipe cache service."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return CacheService(ttl_hours=24, max_entries=50, clock=clock)

    def test_cache_set_and_get(self, cache):
        """Test setting and getting cache values."""
        recipe = Recipe(title="Pancakes", tags=["breakfast"])

        cache.set("https://www.tiktok.com/@test/video/123", recipe)

        result = cache.get("https://www.tiktok.com/@test/video/123")
        assert result == recipe

    def test_cache_miss(self, cache):
        """Test cache miss."""
        assert cache.get("https://www.tiktok.com/@test/video/999") is None

    def test_urls_differing_in_query_and_case_share_entry(self, cache):
        recipe = Recipe(title="Tacos")
        cache.set("https://www.tiktok.com/@x/video/123?lang=en", recipe)

        assert cache.get("https://WWW.TikTok.com/@X/video/123") == recipe
        assert cache.get("https://www.tiktok.com/@x/video/123?is_from_webapp=1") == recipe

    def test_cache_expiry(self, cache, clock):
        """Entries older than the TTL read as absent."""
        url = "https://www.tiktok.com/@test/video/123"
        cache.set(url, Recipe(title="Soup"))

        clock.advance(hours=23, minutes=59)
        assert cache.get(url) is not None

        clock.advance(minutes=2)
        assert cache.get(url) is None
        # Removed lazily on read
        assert len(cache) == 0

    def test_get_returns_copy(self, cache):
        url = "https://www.tiktok.com/@test/video/123"
        cache.set(url, Recipe(title="Salad", tags=["vegan"]))

        first = cache.get(url)
        first.tags.append("mutated")

        assert cache.get(url).tags == ["vegan"]

    def test_capacity_evicts_oldest_inserted(self, clock):
        cache = CacheService(ttl_hours=24, max_entries=3, clock=clock)
        for i in range(3):
            cache.set(f"https://www.tiktok.com/@u/video/{i}", Recipe(title=f"R{i}"))

        # Reading does not protect an entry from eviction
        assert cache.get("https://www.tiktok.com/@u/video/0") is not None

        cache.set("https://www.tiktok.com/@u/video/3", Recipe(title="R3"))

        assert len(cache) == 3
        assert cache.get("https://www.tiktok.com/@u/video/0") is None
        assert cache.get("https://www.tiktok.com/@u/video/3").title == "R3"
        assert cache.evictions == 1

    def test_never_grows_beyond_capacity(self, clock):
        cache = CacheService(ttl_hours=24, max_entries=50, clock=clock)
        for i in range(120):
            cache.set(f"https://youtu.be/video{i}", Recipe(title=str(i)))
            assert len(cache) <= 50
        assert len(cache) == 50

    def test_replacing_key_does_not_evict(self, clock):
        cache = CacheService(ttl_hours=24, max_entries=2, clock=clock)
        cache.set("https://youtu.be/a", Recipe(title="A"))
        cache.set("https://youtu.be/b", Recipe(title="B"))

        cache.set("https://youtu.be/a?t=1", Recipe(title="A2"))

        assert len(cache) == 2
        assert cache.get("https://youtu.be/a").title == "A2"
        assert cache.get("https://youtu.be/b").title == "B"
        assert cache.evictions == 0

    def test_sweep_removes_expired_entries(self, cache, clock):
        cache.set("https://youtu.be/old", Recipe(title="Old"))
        clock.advance(hours=20)
        cache.set("https://youtu.be/new", Recipe(title="New"))
        clock.advance(hours=5)

        assert cache.sweep() == 1
        assert len(cache) == 1
        assert cache.get("https://youtu.be/new").title == "New"

    def test_cache_clear(self, cache):
        """Test cache clear functionality."""
        url = "https://www.tiktok.com/@test/video/123"
        cache.set(url, Recipe(title="Bread"))
        assert cache.get(url) is not None

        cache.clear()
        assert cache.get(url) is None

    def test_cache_stats(self, cache):
        """Test cache statistics."""
        stats = cache.get_stats()
        assert stats["total_entries"] == 0
        assert stats["max_entries"] == 50
        assert stats["ttl_hours"] == 24
        assert stats["hit_rate"] == 0.0

        cache.set("https://youtu.be/1", Recipe(title="One"))
        cache.get("https://youtu.be/1")
        cache.get("https://youtu.be/2")

        stats = cache.get_stats()
        assert stats["total_entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5

    def test_cache_key_generation(self, cache):
        """Test cache key generation consistency."""
        key1 = cache._make_key("https://www.tiktok.com/@test/video/123?a=1")
        key2 = cache._make_key("https://www.tiktok.com/@test/video/123")
        assert key1 == key2

        key3 = cache._make_key("https://www.tiktok.com/@test/video/456")
        assert key1 != key3
