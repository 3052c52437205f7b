"""
Configuration management for the Recipe Extractor Service.
Centralizes environment variable handling and application settings.
"""
import os
import shutil
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _collect_gemini_keys() -> List[str]:
    """Collect analysis credentials in rotation order.

    GEMINI_API_KEY comes first, then GEMINI_API_KEY_2, GEMINI_API_KEY_3, ...
    until a gap, then any comma-separated GEMINI_API_KEYS. Duplicates are
    dropped while keeping the first position.
    """
    keys = []
    primary = os.getenv("GEMINI_API_KEY", "").strip()
    if primary:
        keys.append(primary)

    index = 2
    while True:
        value = os.getenv(f"GEMINI_API_KEY_{index}", "").strip()
        if not value:
            break
        keys.append(value)
        index += 1

    extra = os.getenv("GEMINI_API_KEYS", "")
    keys.extend(k.strip() for k in extra.split(",") if k.strip())

    return list(dict.fromkeys(keys))


def _resolve_ytdlp_path() -> str:
    """Locate the yt-dlp executable, falling back to a bare PATH lookup."""
    configured = os.getenv("YTDLP_PATH")
    if configured:
        return configured

    candidates = [
        "/opt/render/project/.render/bin/yt-dlp",  # Render deployment
        os.path.join(os.getenv("USERPROFILE", ""), "yt-dlp.exe") if os.getenv("USERPROFILE") else "",
    ]
    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            return candidate
    return "yt-dlp"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # API Configuration
        self.api_title = "Recipe Extractor Service"
        self.api_description = "Extracts structured recipes from TikTok, YouTube Shorts and Instagram Reels using yt-dlp and Gemini"
        self.api_version = "1.0.0"
        self.debug_mode = _env_flag("DEBUG_MODE", "false")
        self.port = int(os.getenv("PORT", "3000"))
        self.allowed_origins = ["*"]

        # Analysis service
        self.gemini_api_keys = _collect_gemini_keys()
        self.gemini_model = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self.analysis_language = os.getenv("ANALYSIS_LANGUAGE", "en")

        # Media acquisition
        self.ytdlp_path = _resolve_ytdlp_path()
        self.temp_dir = Path(os.getenv("TEMP_DIR", str(PACKAGE_DIR.parent / "temp")))
        self.max_filesize_mb = int(os.getenv("MAX_FILESIZE_MB", "25"))
        self.tiktok_fallback_api_url = os.getenv("TIKTOK_FALLBACK_API_URL", "https://www.tikwm.com/api/")
        self.max_concurrent_extractions = int(os.getenv("MAX_CONCURRENT_EXTRACTIONS", "5"))

        # Deadlines (0 disables)
        self.download_timeout_seconds = int(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "120"))
        self.analysis_timeout_seconds = int(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "180"))

        # Cache Configuration
        self.cache_enabled = _env_flag("CACHE_ENABLED", "true")
        self.cache_ttl_hours = int(os.getenv("CACHE_TTL_HOURS", "24"))
        self.cache_max_entries = int(os.getenv("CACHE_MAX_ENTRIES", "50"))
        self.cache_sweep_interval_seconds = int(os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", "3600"))

        # Recent recipes
        self.recent_max_entries = int(os.getenv("RECENT_MAX_ENTRIES", "10"))
        self.recent_description_length = int(os.getenv("RECENT_DESCRIPTION_LENGTH", "100"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_keys)

    def ytdlp_available(self) -> bool:
        """Check whether the yt-dlp binary can be spawned."""
        return os.path.exists(self.ytdlp_path) or shutil.which(self.ytdlp_path) is not None


class PlatformConfig:
    """Platform-specific configurations."""

    SUPPORTED_PLATFORMS = {
        "tiktok": {
            "markers": ["tiktok.com"],
            "display_name": "TikTok",
            "fallback": True,
            "url_patterns": [
                "https://www.tiktok.com/@{username}/video/{video_id}",
                "https://vm.tiktok.com/{short_id}",
            ]
        },
        "youtube_shorts": {
            "markers": ["youtube.com/shorts", "youtu.be"],
            "display_name": "YouTube Shorts",
            "fallback": False,
            "url_patterns": [
                "https://www.youtube.com/shorts/{video_id}",
                "https://youtu.be/{video_id}",
            ]
        },
        "instagram": {
            "markers": ["instagram.com/reel", "instagram.com/p"],
            "display_name": "Instagram Reels",
            "fallback": False,
            "url_patterns": [
                "https://www.instagram.com/reel/{shortcode}/",
                "https://www.instagram.com/p/{shortcode}/",
            ]
        }
    }

    @classmethod
    def get_fallback_platforms(cls) -> List[str]:
        """Platforms that have a secondary download path."""
        return [name for name, config in cls.SUPPORTED_PLATFORMS.items() if config.get("fallback")]


class YTDLPConfig:
    """Command line construction for the yt-dlp subprocess."""

    @staticmethod
    def get_format_selector(max_filesize_mb: int) -> str:
        """Prefer mp4 under the size bound, widen to any quality only as a last resort."""
        limit = f"{max_filesize_mb}M"
        return (
            f"best[filesize<{limit}][ext=mp4]"
            f"/best[filesize<{limit}]"
            f"/worst[ext=mp4]"
            f"/worst"
        )

    @classmethod
    def get_args(cls, url: str, output_template: str, max_filesize_mb: int) -> List[str]:
        """Get yt-dlp arguments for a single download."""
        return [
            url,
            "-o", output_template,
            "--no-playlist",
            "--max-filesize", f"{max_filesize_mb}M",
            "-f", cls.get_format_selector(max_filesize_mb),
            "--no-warnings",
            "--quiet",
        ]


# Create global settings instance
settings = Settings()
