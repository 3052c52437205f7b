"""Dependency injection setup for FastAPI."""
from functools import lru_cache
from fastapi import Request

from recipe_extractor.services import RecipeService
from recipe_extractor.utils.logging import CorrelatedLogger

def create_recipe_service() -> RecipeService:
    """Build the service graph from settings (composition root)."""
    return RecipeService()

# Service dependencies
def get_recipe_service(request: Request) -> RecipeService:
    """Dependency for RecipeService, owned by the application lifespan."""
    service = getattr(request.app.state, "recipe_service", None)
    if service is None:
        service = create_recipe_service()
        request.app.state.recipe_service = service
    return service

@lru_cache()
def get_logger() -> CorrelatedLogger:
    """Get logger instance."""
    return CorrelatedLogger("recipe_extractor.api")
