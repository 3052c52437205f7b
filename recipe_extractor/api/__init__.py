"""API module initialization."""
from .extraction import router as extraction_router
from .health import router as health_router

__all__ = ["extraction_router", "health_router"]
