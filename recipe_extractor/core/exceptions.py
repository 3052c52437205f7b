"""Custom exceptions for the Recipe Extractor Service."""
from typing import Optional

class RecipeExtractorError(Exception):
    """Base exception for recipe extractor service."""

    def __init__(self, message: str, error_code: str, details: Optional[dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(RecipeExtractorError):
    """Exception raised for input validation errors."""

    def __init__(self, message: str, details: Optional[dict] = None, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code, details)

class UnsupportedPlatformError(ValidationError):
    """Exception raised when the URL is not from a supported platform."""

    def __init__(self, url: str):
        message = "Unsupported platform. Please use TikTok, YouTube Shorts, or Instagram Reels"
        super().__init__(message, {"url": url}, error_code="UNSUPPORTED_PLATFORM")

class ToolNotInstalledError(RecipeExtractorError):
    """Exception raised when the download tool binary cannot be spawned."""

    def __init__(self, tool: str = "yt-dlp"):
        message = f"{tool} is not installed"
        super().__init__(message, "TOOL_NOT_INSTALLED", {"tool": tool})

class AcquisitionError(RecipeExtractorError):
    """Exception raised when the video could not be downloaded."""

    def __init__(self, message: str, reason: Optional[str] = None, details: Optional[dict] = None,
                 error_code: str = "ACQUISITION_FAILED"):
        details = dict(details or {})
        if reason:
            details["reason"] = reason
        super().__init__(message, error_code, details)

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason")

class FallbackAcquisitionError(AcquisitionError):
    """Exception raised when the platform-specific fallback download also fails."""

    def __init__(self, url: str, reason: str):
        message = "Failed to download TikTok video. Please try a different video."
        super().__init__(message, reason, {"url": url}, error_code="FALLBACK_ACQUISITION_FAILED")

class NotConfiguredError(RecipeExtractorError):
    """Exception raised when no analysis credentials are configured."""

    def __init__(self, setting: str = "GEMINI_API_KEY"):
        message = f"{setting} is not configured"
        super().__init__(message, "NOT_CONFIGURED", {"setting": setting})

class ExtractionError(RecipeExtractorError):
    """Exception raised when the recipe could not be extracted from the video."""

    def __init__(self, message: str, reason: Optional[str] = None, attempts: int = 0):
        details = {"attempts": attempts}
        if reason:
            details["reason"] = reason
        super().__init__(message, "EXTRACTION_FAILED", details)

class CleanupError(RecipeExtractorError):
    """Exception raised when a temporary media file cannot be removed."""

    def __init__(self, path: str, reason: str):
        message = f"Failed to remove temporary file {path}: {reason}"
        details = {"path": path, "reason": reason}
        super().__init__(message, "CLEANUP_FAILED", details)

class ConfigurationError(RecipeExtractorError):
    """Exception raised for configuration errors."""

    def __init__(self, setting: str, reason: str = ""):
        message = f"Configuration error for {setting}: {reason}" if reason else f"Configuration error: {setting}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, "CONFIGURATION_ERROR", details)
