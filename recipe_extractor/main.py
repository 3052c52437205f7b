"""Main FastAPI application with modular architecture."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from recipe_extractor.core.config import settings
from recipe_extractor.core.dependencies import create_recipe_service
from recipe_extractor.core.exceptions import RecipeExtractorError
from recipe_extractor.api import extraction_router, health_router
from recipe_extractor.utils.logging import LoggerSetup
from recipe_extractor.utils.response_helpers import ResponseHelper

# Setup logging
LoggerSetup.setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    service = create_recipe_service()
    app.state.recipe_service = service
    await service.start()
    logger.info(f"{settings.api_title} v{settings.api_version} starting up...")
    if not settings.gemini_configured:
        logger.warning("GEMINI_API_KEY is not configured, extraction requests will fail")
    yield
    # Shutdown
    logger.info("Application shutting down...")
    await service.shutdown()

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global exception handler for custom exceptions
@app.exception_handler(RecipeExtractorError)
async def recipe_extractor_exception_handler(request, exc: RecipeExtractorError):
    """Handle custom recipe extractor exceptions."""
    return ResponseHelper.create_error_from_exception(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc: RequestValidationError):
    """Malformed request bodies get the same answer as a missing URL."""
    return ResponseHelper.create_error_response(
        message="Please provide a video URL",
        status_code=400,
        error_code="VALIDATION_ERROR"
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions."""
    return ResponseHelper.create_error_response(
        message=str(exc.detail),
        status_code=exc.status_code,
        error_code="HTTP_ERROR"
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error", exc_info=exc)

    return ResponseHelper.create_error_response(
        message="An unexpected error occurred",
        status_code=500,
        error_code="INTERNAL_SERVER_ERROR"
    )

# Include routers
app.include_router(health_router)
app.include_router(extraction_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "recipe_extractor.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
