"""Unit tests for validation utilities."""
import pytest
from recipe_extractor.core.exceptions import UnsupportedPlatformError, ValidationError
from recipe_extractor.utils.validators import URLValidator

class TestURLValidator:
    """Test URL validation utilities."""

    @pytest.mark.parametrize("url,platform", [
        ("https://www.tiktok.com/@user/video/1234567890", "tiktok"),
        ("https://vm.tiktok.com/ZMabc123/", "tiktok"),
        ("https://www.youtube.com/shorts/abcDEF12345", "youtube_shorts"),
        ("https://youtu.be/abcDEF12345", "youtube_shorts"),
        ("https://www.instagram.com/reel/Cxyz123/", "instagram"),
        ("https://www.instagram.com/p/Cxyz123/", "instagram"),
    ])
    def test_supported_urls(self, url, platform):
        assert URLValidator.validate_video_url(url) is True
        assert URLValidator.get_platform_from_url(url) == platform

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=123",
        "https://twitter.com/user/status/123",
        "https://example.com/video",
        "invalid-url",
        "",
    ])
    def test_reject_unsupported_urls(self, url):
        assert URLValidator.validate_video_url(url) is False
        assert URLValidator.get_platform_from_url(url) == "unknown"

    def test_normalize_url(self):
        assert URLValidator.normalize_url(
            "https://www.TikTok.com/@X/video/123?lang=en&q=1"
        ) == "https://www.tiktok.com/@x/video/123"
        assert URLValidator.normalize_url("https://youtu.be/abc") == "https://youtu.be/abc"

    def test_require_supported_missing_url(self):
        for value in (None, "", "   "):
            with pytest.raises(ValidationError) as exc_info:
                URLValidator.require_supported(value)
            assert exc_info.value.message == "Please provide a video URL"

    def test_require_supported_unknown_platform(self):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            URLValidator.require_supported("https://example.com/video")
        assert exc_info.value.error_code == "UNSUPPORTED_PLATFORM"
        assert "Unsupported platform" in exc_info.value.message

    def test_supports_fallback(self):
        assert URLValidator.supports_fallback("https://www.tiktok.com/@x/video/1") is True
        assert URLValidator.supports_fallback("https://youtu.be/abc") is False
        assert URLValidator.supports_fallback("https://www.instagram.com/reel/abc/") is False
