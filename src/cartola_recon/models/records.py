"""Data models for statement/ledger records and reconciliation results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class DateSentinel(Enum):
    """Outcome of a date that could not be produced."""

    INVALID = "Fecha Inválida"  # source date could not be parsed
    UNAVAILABLE = "No Disponible"  # calendar has no later business day

    def __str__(self) -> str:
        return self.value


RecordDate = Union[date, DateSentinel]


@dataclass(frozen=True)
class StatementRecord:
    """
    One normalized bank statement (Cartola) row.

    `charge` is money leaving the account, `credit` money entering it,
    both from the bank's point of view.
    """

    date: RecordDate
    narrative: str
    document_number: Optional[str]
    charge: int
    credit: int
    rut: Optional[str] = None
    name: Optional[str] = None
    # 1-based spreadsheet row, for diagnostics only
    row_number: Optional[int] = None


@dataclass(frozen=True)
class LedgerRecord:
    """
    One normalized general ledger (Libro Mayor) row.

    `next_business_day` is resolved against the business-day calendar when
    the record is built and never recomputed.
    """

    date: RecordDate
    narrative: str
    document_number: Optional[str]
    debit: int
    credit: int
    rut: Optional[str] = None
    name: Optional[str] = None
    next_business_day: RecordDate = DateSentinel.INVALID
    row_number: Optional[int] = None


@dataclass(frozen=True)
class MatchedPair:
    """A statement record paired with the ledger record it reconciles."""

    statement: StatementRecord
    ledger: LedgerRecord
    strategy: str
    statement_index: int
    ledger_index: int


@dataclass
class ReconciliationResult:
    """Partition of one run's records into matched and pending sets."""

    bank: str
    matched: list[MatchedPair] = field(default_factory=list)
    pending_statement: list[StatementRecord] = field(default_factory=list)
    pending_ledger: list[LedgerRecord] = field(default_factory=list)

    @property
    def statement_count(self) -> int:
        return len(self.matched) + len(self.pending_statement)

    @property
    def ledger_count(self) -> int:
        return len(self.matched) + len(self.pending_ledger)

    def matches_by_strategy(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for pair in self.matched:
            counts[pair.strategy] = counts.get(pair.strategy, 0) + 1
        return counts


@dataclass
class ReconciliationSummary:
    """Summary figures of a reconciliation run."""

    bank: str
    reconciliation_date: datetime

    total_statement_records: int
    total_ledger_records: int

    matched_count: int
    pending_statement_count: int
    pending_ledger_count: int

    matches_by_strategy: dict[str, int] = field(default_factory=dict)

    # Optional context for the report
    source_filename: Optional[str] = None
    calendar_filename: Optional[str] = None
    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def match_rate(self) -> float:
        """Percentage of statement records that were reconciled."""
        if self.total_statement_records == 0:
            return 0.0
        return (self.matched_count / self.total_statement_records) * 100
