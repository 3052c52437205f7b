"""Utility modules for the Recipe Extractor Service."""
from .validators import URLValidator
from .response_helpers import ResponseHelper
from .logging import LoggerSetup, CorrelatedLogger, MetricsLogger

__all__ = [
    "URLValidator", "ResponseHelper",
    "LoggerSetup", "CorrelatedLogger", "MetricsLogger"
]
