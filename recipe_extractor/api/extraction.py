"""Extraction API endpoints."""
from fastapi import APIRouter, Depends

from recipe_extractor.models.requests import ExtractRequest
from recipe_extractor.models.responses import CacheStats, RecentRecipesResponse
from recipe_extractor.services import RecipeService
from recipe_extractor.core.dependencies import get_recipe_service, get_logger
from recipe_extractor.core.exceptions import RecipeExtractorError
from recipe_extractor.utils.response_helpers import ResponseHelper

# Create router
router = APIRouter(prefix="/api", tags=["extraction"])


@router.post("/extract")
async def extract_recipe(
    request: ExtractRequest,
    service: RecipeService = Depends(get_recipe_service)
):
    """Extract a recipe from a TikTok, YouTube Shorts or Instagram Reel URL."""
    request_id = ResponseHelper.generate_request_id()

    try:
        outcome = await service.extract_recipe(request.url, request_id)
        return ResponseHelper.create_extract_response(outcome.recipe, outcome.cached)

    except RecipeExtractorError as e:
        return ResponseHelper.create_error_from_exception(e, request_id)
    except Exception as e:
        get_logger().exception(f"[{request_id}] Unexpected error processing video: {e}")
        return ResponseHelper.create_error_response(
            message=str(e) or "Failed to extract recipe from video",
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            request_id=request_id
        )


@router.get("/recent")
async def get_recent_recipes(service: RecipeService = Depends(get_recipe_service)):
    """Recently extracted recipes, newest first, followed by examples."""
    response = RecentRecipesResponse(recipes=service.get_recent())
    return ResponseHelper.create_success_response(response.model_dump(exclude={"success"}))


@router.get("/cache/stats")
async def get_cache_stats(service: RecipeService = Depends(get_recipe_service)):
    """Get cache statistics."""
    stats = CacheStats(**service.get_cache_stats())
    return ResponseHelper.create_success_response({"data": stats.model_dump()})
