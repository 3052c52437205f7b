"""In-memory recipe cache keyed by normalized video URL."""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from recipe_extractor.models.recipe import Recipe
from recipe_extractor.utils.validators import URLValidator


class CacheService:
    """Bounded in-memory cache for extracted recipes.

    Entries expire ``ttl_hours`` after they were stored and are dropped
    lazily when read. When the cache is full the oldest inserted entry is
    evicted; reads do not refresh an entry's position, so this is insertion
    order eviction rather than LRU.
    """

    def __init__(
        self,
        ttl_hours: int = 24,
        max_entries: int = 50,
        clock: Callable[[], datetime] = datetime.now
    ):
        self._cache: Dict[str, Dict[str, Any]] = {}
        self.ttl = timedelta(hours=ttl_hours)
        self.max_entries = max_entries
        self._clock = clock
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def _make_key(self, url: str) -> str:
        """Generate cache key from URL."""
        return URLValidator.normalize_url(url)

    def _is_expired(self, item: Dict[str, Any]) -> bool:
        return self._clock() - item['stored_at'] > self.ttl

    def get(self, url: str) -> Optional[Recipe]:
        """Get a copy of the cached recipe, or None when absent or expired."""
        key = self._make_key(url)
        item = self._cache.get(key)

        if item is None:
            self.misses += 1
            return None

        if self._is_expired(item):
            del self._cache[key]
            self.misses += 1
            return None

        self.hits += 1
        return item['data'].model_copy(deep=True)

    def set(self, url: str, data: Recipe) -> None:
        """Cache a recipe, replacing any previous entry for the same key."""
        key = self._make_key(url)

        # Replacing an existing key keeps its insertion position
        if key not in self._cache and len(self._cache) >= self.max_entries:
            oldest_key = next(iter(self._cache))
            del self._cache[oldest_key]
            self.evictions += 1

        self._cache[key] = {
            'data': data.model_copy(deep=True),
            'stored_at': self._clock()
        }

    def sweep(self) -> int:
        """Drop every expired entry, returning how many were removed."""
        expired = [key for key, item in self._cache.items() if self._is_expired(item)]
        for key in expired:
            del self._cache[key]
        return len(expired)

    def clear(self) -> None:
        """Clear all cache."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache stats."""
        lookups = self.hits + self.misses
        return {
            "total_entries": len(self._cache),
            "max_entries": self.max_entries,
            "ttl_hours": int(self.ttl.total_seconds() // 3600),
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hits / lookups if lookups else 0.0
        }
