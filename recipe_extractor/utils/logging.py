"""Logging configuration and utilities."""
import logging
import sys
from typing import Optional
from ..core.config import settings

class LoggerSetup:
    """Centralized logging configuration."""

    @staticmethod
    def setup_logging(
        level: Optional[str] = None,
        format_string: Optional[str] = None
    ) -> None:
        """Setup application logging."""
        log_level = level or settings.log_level
        log_format = format_string or settings.log_format

        # Configure root logger
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.INFO),
            format=log_format,
            handlers=[
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set specific logger levels
        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("fastapi").setLevel(logging.INFO)
        logging.getLogger("google_genai").setLevel(logging.WARNING)  # Reduce Gemini SDK verbosity
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

class CorrelatedLogger:
    """Logger with correlation ID support for request tracking."""

    def __init__(self, name: str, request_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.request_id = request_id

    def bind(self, request_id: Optional[str]) -> "CorrelatedLogger":
        """Return a logger for the same name tagged with request_id."""
        return CorrelatedLogger(self.logger.name, request_id)

    def _format_message(self, message: str) -> str:
        """Format message with request ID if available."""
        if self.request_id:
            return f"[{self.request_id}] {message}"
        return message

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with correlation ID."""
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with correlation ID."""
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with correlation ID."""
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with correlation ID."""
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception message with correlation ID."""
        self.logger.exception(self._format_message(message), **kwargs)

class MetricsLogger:
    """Logger for performance metrics and monitoring."""

    def __init__(self):
        self.logger = logging.getLogger("metrics")

    def log_extraction_metrics(
        self,
        request_id: str,
        url: str,
        platform: str,
        success: bool,
        processing_time_ms: int,
        cache_hit: bool = False,
        error_code: Optional[str] = None
    ) -> None:
        """Log recipe extraction metrics."""
        status = "success" if success else "failed"
        cache_status = "hit" if cache_hit else "miss"

        log_msg = (
            f"EXTRACTION_METRICS request_id={request_id} "
            f"url={url} platform={platform} status={status} "
            f"processing_time_ms={processing_time_ms} cache={cache_status}"
        )

        if error_code:
            log_msg += f" error_code={error_code}"

        self.logger.info(log_msg)

    def log_credential_attempt(
        self,
        request_id: Optional[str],
        attempt: int,
        total: int,
        success: bool,
        rate_limited: bool = False
    ) -> None:
        """Log one analysis credential attempt."""
        status = "success" if success else ("rate_limited" if rate_limited else "failed")
        self.logger.info(
            f"CREDENTIAL_METRICS request_id={request_id} "
            f"attempt={attempt}/{total} status={status}"
        )
