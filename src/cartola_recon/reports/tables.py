"""
Tabular rendering of a reconciliation result.

Three tables, one per output set, ready to be written to a sheet:
Conciliados (matched pairs), Pendientes Cartola and Pendientes Libro Mayor.
Dates are rendered dd/mm/YYYY (or the sentinel label) and narratives are
upper-cased.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..matching.dialects import BankDialect
from ..models.records import (
    LedgerRecord,
    MatchedPair,
    ReconciliationResult,
    StatementRecord,
)
from ..normalization.dates import format_date

RUT_HEADER = "RUT"
CHARGE_HEADER = "CARGO"
CREDIT_HEADER = "ABONO"
DATE_HEADER = "FECHA"


@dataclass
class Table:
    headers: list[str]
    rows: list[list[Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def _reference(record: Union[StatementRecord, LedgerRecord], kind: str) -> str:
    value: Optional[str] = record.rut if kind == "rut" else record.document_number
    return value or ""


def _reference_header(dialect: BankDialect) -> str:
    if dialect.report.pending_reference == "rut":
        return RUT_HEADER
    return dialect.report.document_header


def _matched_row(pair: MatchedPair, dialect: BankDialect) -> list[Any]:
    statement, ledger = pair.statement, pair.ledger
    rut_source = statement if dialect.report.matched_rut_source == "statement" else ledger
    return [
        format_date(statement.date),
        statement.narrative.upper(),
        ledger.document_number or "",
        rut_source.rut or "",
        statement.charge,
        statement.credit,
    ]


def matched_table(result: ReconciliationResult, dialect: BankDialect) -> Table:
    """Matched pairs, in statement order."""
    headers = [
        DATE_HEADER,
        dialect.report.narrative_header,
        dialect.report.document_header,
        RUT_HEADER,
        CHARGE_HEADER,
        CREDIT_HEADER,
    ]
    return Table(headers, [_matched_row(pair, dialect) for pair in result.matched])


def pending_statement_table(result: ReconciliationResult, dialect: BankDialect) -> Table:
    """Statement records left unmatched, in statement order."""
    reference = dialect.report.pending_reference
    headers = [
        DATE_HEADER,
        dialect.report.narrative_header,
        _reference_header(dialect),
        CHARGE_HEADER,
        CREDIT_HEADER,
    ]
    rows = [
        [
            format_date(record.date),
            record.narrative.upper(),
            _reference(record, reference),
            record.charge,
            record.credit,
        ]
        for record in result.pending_statement
    ]
    return Table(headers, rows)


def pending_ledger_table(result: ReconciliationResult, dialect: BankDialect) -> Table:
    """Ledger records left unmatched, in ledger order."""
    reference = dialect.report.pending_reference
    headers = [
        DATE_HEADER,
        dialect.report.narrative_header,
        _reference_header(dialect),
        CHARGE_HEADER,
        CREDIT_HEADER,
    ]
    rows = [
        [
            format_date(record.date),
            record.narrative.upper(),
            _reference(record, reference),
            record.debit,
            record.credit,
        ]
        for record in result.pending_ledger
    ]
    return Table(headers, rows)
