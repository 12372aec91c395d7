"""Data models for reconciliation."""

from .records import (
    DateSentinel,
    RecordDate,
    StatementRecord,
    LedgerRecord,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
)

__all__ = [
    "DateSentinel",
    "RecordDate",
    "StatementRecord",
    "LedgerRecord",
    "MatchedPair",
    "ReconciliationResult",
    "ReconciliationSummary",
]
