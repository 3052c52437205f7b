"""Response creation utilities."""
import uuid
from typing import Any, Dict, Optional
from fastapi import status
from fastapi.responses import JSONResponse

from ..models.recipe import Recipe
from ..models.responses import ErrorResponse, ExtractResponse
from ..core.exceptions import RecipeExtractorError

# Map error codes to HTTP status codes
STATUS_MAPPING = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNSUPPORTED_PLATFORM": status.HTTP_400_BAD_REQUEST,
}

class ResponseHelper:
    """Utilities for creating standardized API responses."""

    @staticmethod
    def generate_request_id() -> str:
        """Generate unique request ID."""
        return f"req_{uuid.uuid4().hex[:8]}"

    @staticmethod
    def create_extract_response(recipe: Recipe, cached: bool) -> JSONResponse:
        """Create the extraction success response."""
        response = ExtractResponse(recipe=recipe, cached=cached)
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=response.model_dump()
        )

    @staticmethod
    def create_success_response(data: Dict[str, Any]) -> JSONResponse:
        """Create a plain success response merging data into the body."""
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"success": True, **data}
        )

    @staticmethod
    def create_error_response(
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> JSONResponse:
        """Create standardized error response."""
        response = ErrorResponse(
            error=message,
            code=error_code,
            details=details or None,
            request_id=request_id
        )
        return JSONResponse(
            status_code=status_code,
            content=response.model_dump(exclude_none=True)
        )

    @staticmethod
    def create_error_from_exception(
        exc: RecipeExtractorError,
        request_id: Optional[str] = None
    ) -> JSONResponse:
        """Create error response from custom exception."""
        http_status = STATUS_MAPPING.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return ResponseHelper.create_error_response(
            message=exc.message,
            status_code=http_status,
            error_code=exc.error_code,
            request_id=request_id,
            details=exc.details
        )
