"""Matching engine, index and strategies."""

from .dialects import BankDialect, available_banks, build_dialect
from .engine import ReconciliationEngine, match_records
from .index import MatchIndex
from .strategies import (
    MatchingStrategy,
    FieldKeyStrategy,
    DateKeyStrategy,
)

__all__ = [
    "BankDialect",
    "available_banks",
    "build_dialect",
    "ReconciliationEngine",
    "match_records",
    "MatchIndex",
    "MatchingStrategy",
    "FieldKeyStrategy",
    "DateKeyStrategy",
]
