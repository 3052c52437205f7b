"""Recipe service: cache lookup, download, extraction and bookkeeping."""
import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional

from recipe_extractor.core.config import settings
from recipe_extractor.core.exceptions import RecipeExtractorError
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.models.responses import RecentRecipe
from recipe_extractor.services.cache_service import CacheService
from recipe_extractor.services.media_fetcher import MediaFetcher
from recipe_extractor.services.recent_ledger import RecentLedger, load_seed_entries
from recipe_extractor.services.recipe_extractor import RecipeExtractor
from recipe_extractor.utils.logging import CorrelatedLogger, MetricsLogger
from recipe_extractor.utils.validators import URLValidator


@dataclass
class ExtractionOutcome:
    """Recipe returned to the caller and whether it came from the cache."""
    recipe: Recipe
    cached: bool


class _InFlight:
    def __init__(self):
        self.lock = asyncio.Lock()
        self.waiters = 0


class RecipeService:
    """Orchestrates a single recipe extraction request.

    Requests for the same normalized URL are serialized, so a second
    concurrent request waits for the first and is then served from the
    cache. Cache and recent list are owned by the service instance.
    """

    def __init__(
        self,
        fetcher: Optional[MediaFetcher] = None,
        extractor: Optional[RecipeExtractor] = None,
        cache: Optional[CacheService] = None,
        ledger: Optional[RecentLedger] = None,
        cache_enabled: Optional[bool] = None,
        max_concurrent_extractions: Optional[int] = None,
        sweep_interval_seconds: Optional[int] = None
    ):
        self.fetcher = fetcher or MediaFetcher()
        self.extractor = extractor or RecipeExtractor()
        self.cache = cache or CacheService(
            ttl_hours=settings.cache_ttl_hours,
            max_entries=settings.cache_max_entries
        )
        self.ledger = ledger or RecentLedger(
            max_entries=settings.recent_max_entries,
            description_length=settings.recent_description_length,
            seeds=load_seed_entries(description_length=settings.recent_description_length)
        )
        self.cache_enabled = settings.cache_enabled if cache_enabled is None else cache_enabled
        self.sweep_interval_seconds = (
            settings.cache_sweep_interval_seconds if sweep_interval_seconds is None else sweep_interval_seconds
        )
        self._semaphore = asyncio.Semaphore(max_concurrent_extractions or settings.max_concurrent_extractions)
        self._inflight: Dict[str, _InFlight] = {}
        self._sweep_task: Optional[asyncio.Task] = None
        self.started_at = datetime.now()
        self.request_count = 0
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    async def start(self) -> None:
        """Start background cache maintenance."""
        if self._sweep_task is None and self.sweep_interval_seconds > 0:
            self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def shutdown(self) -> None:
        """Stop background work and drop cached recipes."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
        self.cache.clear()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            removed = self.cache.sweep()
            if removed:
                self.logger.info(f"Cache sweep removed {removed} expired entries")

    async def extract_recipe(self, url: Optional[str], request_id: Optional[str] = None) -> ExtractionOutcome:
        """Get the recipe for a video URL - check cache first, then download and extract."""
        platform = URLValidator.require_supported(url)
        url = url.strip()
        logger = self.logger.bind(request_id)
        self.request_count += 1
        start_time = datetime.now()

        logger.info(f"Processing video: {url}")
        try:
            outcome = await self._extract(url, request_id)
        except RecipeExtractorError as e:
            logger.error(f"Error processing video {url}: {e.message}")
            self.metrics.log_extraction_metrics(
                request_id, url, platform, False, self._elapsed_ms(start_time), error_code=e.error_code
            )
            raise

        self.metrics.log_extraction_metrics(
            request_id, url, platform, True, self._elapsed_ms(start_time), cache_hit=outcome.cached
        )
        return outcome

    async def _extract(self, url: str, request_id: Optional[str]) -> ExtractionOutcome:
        key = URLValidator.normalize_url(url)

        async with self._single_flight(key):
            cached_recipe = self.cache.get(url) if self.cache_enabled else None
            if cached_recipe is not None:
                self.logger.bind(request_id).info(f"Cache hit: {key}")
                self.ledger.record(url, cached_recipe)
                return ExtractionOutcome(recipe=cached_recipe, cached=True)

            async with self._semaphore:
                async with self.fetcher.acquire(url, request_id) as media:
                    recipe = await self.extractor.extract(media, request_id)
                    if self.cache_enabled:
                        self.cache.set(url, recipe)

            self.ledger.record(url, recipe)
            return ExtractionOutcome(recipe=recipe, cached=False)

    @asynccontextmanager
    async def _single_flight(self, key: str) -> AsyncIterator[None]:
        entry = self._inflight.get(key)
        if entry is None:
            entry = self._inflight[key] = _InFlight()
        entry.waiters += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.waiters -= 1
            if entry.waiters == 0:
                self._inflight.pop(key, None)

    def get_recent(self) -> List[RecentRecipe]:
        """Recent extractions followed by the example entries."""
        return self.ledger.list()

    def get_cache_stats(self) -> dict:
        """Get cache statistics."""
        return {"enabled": self.cache_enabled, **self.cache.get_stats()}

    def uptime_seconds(self) -> int:
        return int((datetime.now() - self.started_at).total_seconds())

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> int:
        return int((datetime.now() - start_time).total_seconds() * 1000)
