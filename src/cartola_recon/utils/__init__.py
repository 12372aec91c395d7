"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    CartolaParseError,
    LedgerParseError,
    CalendarParseError,
    ConfigurationError,
    ValidationError,
    ReportGenerationError,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "ReconciliationError",
    "CartolaParseError",
    "LedgerParseError",
    "CalendarParseError",
    "ConfigurationError",
    "ValidationError",
    "ReportGenerationError",
    "setup_logging",
    "get_logger",
]
