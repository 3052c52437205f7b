"""Recipe extraction service using Gemini multimodal analysis."""
import asyncio
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from google import genai
from google.genai import types
from pydantic import ValidationError as PydanticValidationError

from recipe_extractor.config.templates import PromptTemplateEngine, get_template_engine
from recipe_extractor.core.config import settings
from recipe_extractor.core.exceptions import ExtractionError, NotConfiguredError
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.services.media_fetcher import LocalMedia
from recipe_extractor.utils.logging import CorrelatedLogger, MetricsLogger

T = TypeVar("T")

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
RATE_LIMIT_MARKERS = ("429", "quota", "resource_exhausted", "rate limit")

MIME_TYPES = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
}
DEFAULT_MIME_TYPE = MIME_TYPES["mp4"]


def get_mime_type(path: Path) -> str:
    """Content type for a video file; unknown extensions are sent as mp4."""
    return MIME_TYPES.get(path.suffix.lstrip(".").lower(), DEFAULT_MIME_TYPE)


def is_rate_limited(error: BaseException) -> bool:
    """Whether a failure looks like a quota or rate limit rejection."""
    if getattr(error, "code", None) == 429 or getattr(error, "status_code", None) == 429:
        return True
    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


@dataclass
class CredentialFailure:
    """One failed attempt with a credential."""
    index: int
    error: BaseException
    rate_limited: bool


@dataclass
class RotationResult(Generic[T]):
    """Outcome of trying credentials in order."""
    value: Optional[T] = None
    succeeded: bool = False
    failures: List[CredentialFailure] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.failures[-1].error if self.failures else None


async def rotate_credentials(
    credentials: Sequence[str],
    attempt: Callable[[str], Awaitable[T]],
    on_failure: Optional[Callable[[CredentialFailure, int], None]] = None
) -> RotationResult[T]:
    """Call attempt with each credential until one succeeds.

    Every failure falls through to the next credential regardless of its
    type; nothing is raised, failures are collected on the result.
    """
    result: RotationResult[T] = RotationResult()
    for index, credential in enumerate(credentials):
        try:
            result.value = await attempt(credential)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            failure = CredentialFailure(index=index, error=e, rate_limited=is_rate_limited(e))
            result.failures.append(failure)
            if on_failure:
                on_failure(failure, len(credentials))
            continue
        result.succeeded = True
        break
    return result


class GeminiAnalysisClient:
    """Thin async wrapper around the Gemini generate_content call."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        self.model_name = model_name
        self.client = genai.Client(api_key=api_key)

    async def generate(self, media: bytes, mime_type: str, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=[
                types.Part.from_bytes(data=media, mime_type=mime_type),
                prompt,
            ]
        )
        if not response.text:
            raise RuntimeError("Model response did not include text content.")
        return response.text


class RecipeExtractor:
    """Sends a downloaded video to Gemini and parses the recipe it describes."""

    ANALYSIS_TYPE = "recipe_extraction"

    def __init__(
        self,
        api_keys: Optional[Sequence[str]] = None,
        model_name: Optional[str] = None,
        client_factory: Optional[Callable[[str, str], Any]] = None,
        template_engine: Optional[PromptTemplateEngine] = None,
        language: Optional[str] = None,
        timeout_seconds: Optional[int] = None
    ):
        self.api_keys = list(settings.gemini_api_keys if api_keys is None else api_keys)
        self.model_name = model_name or settings.gemini_model
        self.client_factory = client_factory or GeminiAnalysisClient
        self.template_engine = template_engine
        self.language = language or settings.analysis_language
        self.timeout_seconds = settings.analysis_timeout_seconds if timeout_seconds is None else timeout_seconds
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    @property
    def configured(self) -> bool:
        return bool(self.api_keys)

    def build_prompt(self) -> str:
        engine = self.template_engine or get_template_engine()
        return engine.render_prompt(self.ANALYSIS_TYPE, language=self.language)

    async def extract(self, media: LocalMedia, request_id: Optional[str] = None) -> Recipe:
        """Extract a recipe from a local video, rotating API keys on failure."""
        if not self.api_keys:
            raise NotConfiguredError("GEMINI_API_KEY")

        logger = self.logger.bind(request_id)

        video_data = await asyncio.to_thread(media.path.read_bytes)
        mime_type = get_mime_type(media.path)
        prompt = self.build_prompt()
        logger.info(f"Video size: {len(video_data) / 1024 / 1024:.2f} MB ({mime_type})")

        total = len(self.api_keys)

        async def attempt(api_key: str) -> str:
            client = self.client_factory(api_key, self.model_name)
            call = client.generate(video_data, mime_type, prompt)
            if self.timeout_seconds:
                return await asyncio.wait_for(call, timeout=self.timeout_seconds)
            return await call

        def on_failure(failure: CredentialFailure, count: int) -> None:
            key_num = failure.index + 1
            if failure.rate_limited:
                logger.warning(f"API key {key_num} of {count} rate limited, trying next key...")
            else:
                logger.warning(f"API key {key_num} of {count} failed: {failure.error}")
            self.metrics.log_credential_attempt(
                request_id, key_num, count, success=False, rate_limited=failure.rate_limited
            )

        result = await rotate_credentials(self.api_keys, attempt, on_failure)

        if not result.succeeded:
            last_error = result.last_error
            raise ExtractionError(
                f"Failed to extract recipe: {last_error or 'all API keys failed'}",
                reason=type(last_error).__name__ if last_error else None,
                attempts=total
            )

        key_num = len(result.failures) + 1
        self.metrics.log_credential_attempt(request_id, key_num, total, success=True)
        logger.info(f"Success with API key {key_num}")

        return self.parse_response(result.value)

    @staticmethod
    def parse_response(text: str) -> Recipe:
        """Decode the span from the first '{' to the last '}' as a recipe."""
        match = JSON_OBJECT_PATTERN.search(text or "")
        if not match:
            raise ExtractionError(
                "The AI response was not in the expected recipe format",
                reason="No valid JSON found in response"
            )

        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ExtractionError(
                "The AI response was not in the expected recipe format",
                reason=f"Invalid JSON: {e.msg}"
            ) from e

        if not isinstance(data, dict):
            raise ExtractionError(
                "The AI response was not in the expected recipe format",
                reason="JSON payload is not an object"
            )

        try:
            return Recipe.model_validate(data)
        except PydanticValidationError as e:
            raise ExtractionError(
                "The AI response was not in the expected recipe format",
                reason=str(e)
            ) from e
