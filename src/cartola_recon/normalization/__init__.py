"""Field-level cleanup: dates, amounts and narrative extraction."""

from .amounts import normalize_amount, normalize_text
from .dates import (
    BusinessDayCalendar,
    format_date,
    next_business_day,
    parse_date,
)
from .extractors import (
    EXTRACTORS,
    LedgerExtractors,
    StatementExtractors,
    extract_document_number,
    extract_rut_inline,
    extract_rut_slash,
    extract_statement_name,
    extract_transfer_name,
)

__all__ = [
    "normalize_amount",
    "normalize_text",
    "BusinessDayCalendar",
    "format_date",
    "next_business_day",
    "parse_date",
    "EXTRACTORS",
    "LedgerExtractors",
    "StatementExtractors",
    "extract_document_number",
    "extract_rut_inline",
    "extract_rut_slash",
    "extract_statement_name",
    "extract_transfer_name",
]
