"""Response models for the Recipe Extractor Service."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from .recipe import Recipe

class ExtractResponse(BaseModel):
    """Successful extraction."""
    success: bool = True
    recipe: Recipe
    cached: bool = False

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None

class RecentRecipe(BaseModel):
    """Display entry for the recent recipes list."""
    id: str
    url: str
    title: str
    description: str
    recipe: Recipe
    created_at: Optional[str] = None
    is_example: bool = False

class RecentRecipesResponse(BaseModel):
    """Recent recipes listing."""
    success: bool = True
    recipes: List[RecentRecipe]

class PlatformInfo(BaseModel):
    """Supported platform description."""
    name: str
    display_name: str
    markers: List[str]
    url_patterns: List[str]
    fallback_available: bool

class SupportedPlatformsData(BaseModel):
    """Supported platforms information."""
    platforms: List[PlatformInfo]
    max_filesize_mb: int

class DependencyStatus(BaseModel):
    """Service dependency status."""
    yt_dlp: str
    gemini: str

class CacheStats(BaseModel):
    """Cache statistics."""
    enabled: bool
    total_entries: int
    max_entries: int
    ttl_hours: int
    hits: int
    misses: int
    evictions: int
    hit_rate: float

class HealthMetrics(BaseModel):
    """Service health metrics."""
    uptime_seconds: int
    requests_processed: int
    cache_hit_rate: float
    recent_entries: int

class HealthData(BaseModel):
    """Complete health check response."""
    status: str
    timestamp: str
    version: str
    dependencies: DependencyStatus
    metrics: HealthMetrics
