"""URL validation utilities."""
from typing import Optional, Tuple
from recipe_extractor.core.config import PlatformConfig
from recipe_extractor.core.exceptions import UnsupportedPlatformError, ValidationError

class URLValidator:
    """URL validation utilities for supported platforms."""

    @staticmethod
    def normalize_url(url: str) -> str:
        """Cache identity key: drop everything from the first '?' and fold case.

        Two different videos that only differ after '?' collide on purpose,
        tracking parameters must not defeat the cache.
        """
        return url.split("?", 1)[0].lower()

    @staticmethod
    def get_platform_from_url(url: str) -> str:
        """Extract platform name from URL."""
        if not url:
            return "unknown"
        lowered = url.lower()
        for platform, config in PlatformConfig.SUPPORTED_PLATFORMS.items():
            if any(marker in lowered for marker in config["markers"]):
                return platform
        return "unknown"

    @staticmethod
    def validate_video_url(url: Optional[str]) -> bool:
        """Validate if URL contains one of the supported platform markers."""
        return URLValidator.get_platform_from_url(url or "") != "unknown"

    @staticmethod
    def validate_and_get_platform(url: Optional[str]) -> Tuple[bool, str]:
        """Validate URL and return validation status with platform."""
        platform = URLValidator.get_platform_from_url(url or "")
        return platform != "unknown", platform

    @staticmethod
    def require_supported(url: Optional[str]) -> str:
        """Return the platform for url or raise the matching ValidationError."""
        if url is None or not str(url).strip():
            raise ValidationError("Please provide a video URL")

        is_valid, platform = URLValidator.validate_and_get_platform(url.strip())
        if not is_valid:
            raise UnsupportedPlatformError(url)
        return platform

    @staticmethod
    def supports_fallback(url: str) -> bool:
        """Whether url belongs to a platform with a secondary download path."""
        return URLValidator.get_platform_from_url(url) in PlatformConfig.get_fallback_platforms()
