"""Service layer modules for the Recipe Extractor Service."""
from .cache_service import CacheService
from .recent_ledger import RecentLedger
from .media_fetcher import MediaFetcher, LocalMedia, YtDlpStrategy, TikTokApiStrategy
from .recipe_extractor import RecipeExtractor, GeminiAnalysisClient
from .recipe_service import RecipeService, ExtractionOutcome

__all__ = [
    "CacheService", "RecentLedger",
    "MediaFetcher", "LocalMedia", "YtDlpStrategy", "TikTokApiStrategy",
    "RecipeExtractor", "GeminiAnalysisClient",
    "RecipeService", "ExtractionOutcome"
]
