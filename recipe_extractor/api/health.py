"""Health check and monitoring endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from recipe_extractor.core.config import settings, PlatformConfig
from recipe_extractor.core.dependencies import get_recipe_service
from recipe_extractor.models.responses import (
    HealthData, DependencyStatus, HealthMetrics,
    SupportedPlatformsData, PlatformInfo
)
from recipe_extractor.services import RecipeService
from recipe_extractor.utils.response_helpers import ResponseHelper

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health")
async def health_check(service: RecipeService = Depends(get_recipe_service)):
    """
    Health check endpoint with dependency status and metrics
    """
    cache_stats = service.get_cache_stats()

    dependencies = DependencyStatus(
        yt_dlp="healthy" if settings.ytdlp_available() else "not_installed",
        gemini="healthy" if service.extractor.configured else "not_configured"
    )

    health_data = HealthData(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api_version,
        dependencies=dependencies,
        metrics=HealthMetrics(
            uptime_seconds=service.uptime_seconds(),
            requests_processed=service.request_count,
            cache_hit_rate=cache_stats["hit_rate"],
            recent_entries=len(service.ledger)
        )
    )

    return JSONResponse(
        status_code=200,
        content=health_data.model_dump()
    )

@router.get("/supported-platforms")
async def get_supported_platforms():
    """
    Get list of supported platforms
    """
    platforms = []
    for platform_name, config in PlatformConfig.SUPPORTED_PLATFORMS.items():
        platforms.append(PlatformInfo(
            name=platform_name,
            display_name=config["display_name"],
            markers=config["markers"],
            url_patterns=config["url_patterns"],
            fallback_available=config.get("fallback", False)
        ))

    platforms_data = SupportedPlatformsData(
        platforms=platforms,
        max_filesize_mb=settings.max_filesize_mb
    )

    return ResponseHelper.create_success_response({"data": platforms_data.model_dump()})
