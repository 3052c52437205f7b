"""Data models for the Recipe Extractor Service."""
from .requests import ExtractRequest
from .recipe import Ingredient, InstructionStep, Recipe
from .responses import (
    ExtractResponse, ErrorResponse, RecentRecipe, RecentRecipesResponse,
    PlatformInfo, SupportedPlatformsData, DependencyStatus, CacheStats,
    HealthMetrics, HealthData
)

__all__ = [
    "ExtractRequest",
    "Ingredient", "InstructionStep", "Recipe",
    "ExtractResponse", "ErrorResponse", "RecentRecipe", "RecentRecipesResponse",
    "PlatformInfo", "SupportedPlatformsData", "DependencyStatus", "CacheStats",
    "HealthMetrics", "HealthData"
]
