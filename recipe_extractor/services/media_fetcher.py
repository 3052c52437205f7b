"""Video download service: yt-dlp first, platform-specific API as fallback."""
import asyncio
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, List, Optional, Sequence, Tuple

import aiohttp

from recipe_extractor.core.config import settings, YTDLPConfig
from recipe_extractor.core.exceptions import (
    AcquisitionError, CleanupError, FallbackAcquisitionError, ToolNotInstalledError
)
from recipe_extractor.utils.logging import CorrelatedLogger
from recipe_extractor.utils.validators import URLValidator

# AcquisitionError.reason values
TOOL_FAILED = "tool_failed"
ENVIRONMENT = "environment"
FILE_LOST = "file_lost"

PARTIAL_SUFFIXES = (".part", ".ytdl", ".temp")


@dataclass
class LocalMedia:
    """A downloaded video owned by a single request."""
    media_id: str
    path: Path
    source: str

    @property
    def extension(self) -> str:
        return self.path.suffix.lstrip(".").lower()

    @property
    def size_bytes(self) -> int:
        return self.path.stat().st_size

    def cleanup(self) -> None:
        """Delete the file. Safe to call more than once."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise CleanupError(str(self.path), str(e)) from e


def discard_files(directory: Path, media_id: str, logger: Optional[CorrelatedLogger] = None) -> None:
    """Remove leftovers (partial downloads) for media_id; failures are logged, never raised."""
    try:
        candidates = list(directory.iterdir())
    except OSError:
        return
    for candidate in candidates:
        if not candidate.name.startswith(media_id):
            continue
        try:
            candidate.unlink(missing_ok=True)
        except OSError as e:
            if logger:
                logger.error(f"Failed to remove partial download {candidate.name}: {e}")


class AcquisitionStrategy:
    """One way of getting a local copy of a video."""

    name = "base"

    def applies_to(self, url: str) -> bool:
        return True

    async def acquire(self, url: str, logger: CorrelatedLogger) -> LocalMedia:
        raise NotImplementedError


class YtDlpStrategy(AcquisitionStrategy):
    """Download with the yt-dlp executable."""

    name = "yt-dlp"

    def __init__(
        self,
        ytdlp_path: Optional[str] = None,
        temp_dir: Optional[Path] = None,
        max_filesize_mb: Optional[int] = None,
        timeout_seconds: Optional[int] = None
    ):
        self.ytdlp_path = ytdlp_path or settings.ytdlp_path
        self.temp_dir = Path(temp_dir or settings.temp_dir)
        self.max_filesize_mb = max_filesize_mb or settings.max_filesize_mb
        self.timeout_seconds = settings.download_timeout_seconds if timeout_seconds is None else timeout_seconds

    async def acquire(self, url: str, logger: CorrelatedLogger) -> LocalMedia:
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        media_id = uuid.uuid4().hex
        # Extension is picked by yt-dlp from the negotiated format
        output_template = str(self.temp_dir / f"{media_id}.%(ext)s")
        args = YTDLPConfig.get_args(url, output_template, self.max_filesize_mb)

        logger.info(f"Starting video download with yt-dlp: {url}")
        try:
            returncode, stderr = await self._run(args)
        except BaseException:
            discard_files(self.temp_dir, media_id, logger)
            raise

        if returncode != 0:
            discard_files(self.temp_dir, media_id, logger)
            logger.warning(f"yt-dlp exited with code {returncode}: {stderr.strip()[-500:]}")
            raise AcquisitionError(
                "yt-dlp failed",
                reason=TOOL_FAILED,
                details={"exit_code": returncode, "stderr": stderr.strip()[-500:]}
            )

        path = self._find_output(media_id)
        if path is None:
            discard_files(self.temp_dir, media_id, logger)
            raise AcquisitionError("Video download completed but file not found", reason=FILE_LOST)

        return LocalMedia(media_id=media_id, path=path, source=self.name)

    async def _run(self, args: List[str]) -> Tuple[int, str]:
        """Run yt-dlp and return (exit code, stderr)."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.ytdlp_path, *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError:
            raise ToolNotInstalledError("yt-dlp")
        except OSError as e:
            raise AcquisitionError(f"Could not start yt-dlp: {e}", reason=ENVIRONMENT) from e

        try:
            if self.timeout_seconds:
                _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
            else:
                _, stderr = await process.communicate()
        except asyncio.TimeoutError:
            await self._terminate(process)
            raise AcquisitionError(
                f"yt-dlp timed out after {self.timeout_seconds}s",
                reason=ENVIRONMENT,
                details={"timeout_seconds": self.timeout_seconds}
            )
        except BaseException:
            # Cancelled: stop the child before the caller discards its files
            await self._terminate(process)
            raise

        return process.returncode, (stderr or b"").decode("utf-8", errors="replace")

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()

    def _find_output(self, media_id: str) -> Optional[Path]:
        for candidate in sorted(self.temp_dir.iterdir()):
            if candidate.name.startswith(media_id) and not candidate.name.endswith(PARTIAL_SUFFIXES):
                return candidate
        return None


class TikTokApiStrategy(AcquisitionStrategy):
    """Resolve a direct video URL through the tikwm lookup API and download it."""

    name = "tiktok-api"

    def __init__(
        self,
        api_url: Optional[str] = None,
        temp_dir: Optional[Path] = None,
        timeout_seconds: Optional[int] = None
    ):
        self.api_url = api_url or settings.tiktok_fallback_api_url
        self.temp_dir = Path(temp_dir or settings.temp_dir)
        self.timeout_seconds = settings.download_timeout_seconds if timeout_seconds is None else timeout_seconds

    def applies_to(self, url: str) -> bool:
        return URLValidator.supports_fallback(url)

    async def acquire(self, url: str, logger: CorrelatedLogger) -> LocalMedia:
        logger.info("Trying TikTok fallback (tikwm.com)...")
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds or None)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                payload = await self._fetch_json(session, url)
                media_url = self._parse_media_url(payload)
                logger.info("Got TikTok video URL from API")
                content = await self._fetch_bytes(session, media_url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"TikTok fallback error: {e}")
            raise FallbackAcquisitionError(url, str(e)) from e

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        media_id = uuid.uuid4().hex
        path = self.temp_dir / f"{media_id}.mp4"
        try:
            await asyncio.to_thread(path.write_bytes, content)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise FallbackAcquisitionError(url, str(e)) from e

        logger.info("TikTok video downloaded via fallback")
        return LocalMedia(media_id=media_id, path=path, source=self.name)

    async def _fetch_json(self, session: aiohttp.ClientSession, url: str) -> dict:
        async with session.get(self.api_url, params={"url": url}) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def _fetch_bytes(self, session: aiohttp.ClientSession, media_url: str) -> bytes:
        async with session.get(media_url) as response:
            if response.status != 200:
                raise ValueError(f"Failed to download video from TikTok API (HTTP {response.status})")
            return await response.read()

    @staticmethod
    def _parse_media_url(payload: dict) -> str:
        if not isinstance(payload, dict) or payload.get("code") != 0:
            raise ValueError("TikTok API failed to get video URL")
        data = payload.get("data")
        media_url = data.get("play") if isinstance(data, dict) else None
        if not media_url:
            raise ValueError("TikTok API failed to get video URL")
        return media_url


class MediaFetcher:
    """Tries each applicable strategy in order and returns the first download."""

    def __init__(self, strategies: Optional[Sequence[AcquisitionStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else [
            YtDlpStrategy(),
            TikTokApiStrategy(),
        ]
        self.logger = CorrelatedLogger(__name__)

    async def fetch(self, url: str, request_id: Optional[str] = None) -> LocalMedia:
        """Download url to the temp directory."""
        logger = self.logger.bind(request_id)
        failures: List[AcquisitionError] = []

        for strategy in self.strategies:
            if not strategy.applies_to(url):
                continue
            try:
                media = await strategy.acquire(url, logger)
            except ToolNotInstalledError:
                raise
            except AcquisitionError as e:
                if e.reason == FILE_LOST:
                    raise
                logger.warning(f"{strategy.name} failed: {e.message}")
                failures.append(e)
                continue

            logger.info(f"Video downloaded via {strategy.name}: {media.path.name}")
            return media

        raise self._user_facing_error(failures)

    def _user_facing_error(self, failures: List[AcquisitionError]) -> AcquisitionError:
        if not failures:
            return AcquisitionError(
                "Failed to download video. Make sure the URL is valid and the video is publicly accessible."
            )

        last = failures[-1]
        if isinstance(last, FallbackAcquisitionError):
            return last

        if last.reason == TOOL_FAILED:
            max_mb = getattr(self.strategies[0], "max_filesize_mb", settings.max_filesize_mb)
            return AcquisitionError(
                f"Video is too large or too long. Maximum file size is {max_mb}MB "
                f"(typically under 60 seconds).",
                reason=TOOL_FAILED,
                details={k: v for k, v in last.details.items() if k != "reason"}
            )

        return AcquisitionError(
            "Failed to download video. Make sure the URL is valid and the video is publicly accessible.",
            reason=last.reason or ENVIRONMENT,
            details={"cause": last.message}
        )

    def release(self, media: LocalMedia, request_id: Optional[str] = None) -> None:
        """Delete a downloaded file; failures are logged, never raised."""
        logger = self.logger.bind(request_id)
        try:
            media.cleanup()
            logger.info("Cleaned up video file")
        except CleanupError as e:
            logger.error(f"Failed to cleanup video: {e.message}")

    @asynccontextmanager
    async def acquire(self, url: str, request_id: Optional[str] = None) -> AsyncIterator[LocalMedia]:
        """Download url and guarantee the file is removed when the block exits."""
        media = await self.fetch(url, request_id)
        try:
            yield media
        finally:
            self.release(media, request_id)
