"""
General ledger (Libro Mayor) row mapper.

Besides mapping columns, this is where ledger narratives go through the
bank's extraction rules and where each record's next business day is
resolved, once, against the calendar.
"""

from pathlib import Path
from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig, SheetLayout
from ..matching.dialects import BankDialect
from ..models.records import DateSentinel, LedgerRecord
from ..normalization.amounts import normalize_amount, normalize_text
from ..normalization.dates import BusinessDayCalendar, next_business_day, parse_date
from ..utils.exceptions import ConfigurationError, LedgerParseError
from .sheets import cell, is_blank_row, read_sheet

logger = logging.getLogger(__name__)

# Document number stored when the narrative carries none
MISSING_DOCUMENT = "0"


class LedgerParser:
    """Parser for the Libro Mayor sheet of an uploaded workbook."""

    def __init__(
        self,
        config: ReconConfig,
        dialect: BankDialect,
        calendar: BusinessDayCalendar,
    ):
        """
        Initialize the parser.

        Args:
            config: Application configuration
            dialect: Bank dialect (extraction rules, invalid-date policy)
            calendar: Business days used for `next_business_day`
        """
        self.config = config
        self.dialect = dialect
        self.calendar = calendar
        layout = config.input.ledger.get(dialect.name)
        if layout is None:
            raise ConfigurationError(f"No Libro Mayor layout configured for bank '{dialect.name}'")
        self.layout: SheetLayout = layout

    def parse_file(self, file_path: Path) -> list[LedgerRecord]:
        """
        Read the ledger sheet of a workbook.

        Args:
            file_path: Path to the workbook

        Returns:
            Ledger records in sheet order

        Raises:
            LedgerParseError: If the sheet cannot be read
        """
        logger.info(f"Reading {self.layout.sheet_name} sheet from: {file_path}")

        try:
            df = read_sheet(file_path, self.layout.sheet_name, self.layout.first_row)
        except Exception as e:
            logger.error(f"Failed to read ledger sheet: {e}")
            raise LedgerParseError(
                f"Could not read sheet '{self.layout.sheet_name}' from {file_path}: {e}"
            ) from e

        records = self.parse_dataframe(df)
        logger.info(f"Extracted {len(records)} ledger records")
        return records

    def parse_dataframe(self, df: pd.DataFrame) -> list[LedgerRecord]:
        """
        Convert positional rows (no header) to ledger records.

        Args:
            df: Rows starting at the first data row

        Returns:
            Ledger records; fully blank rows are skipped
        """
        records: list[LedgerRecord] = []
        invalid_dates = 0

        for position, (_, row) in enumerate(df.iterrows()):
            row_number = self.layout.first_row + position
            if is_blank_row(row):
                logger.debug(f"Libro Mayor row {row_number}: blank, skipping")
                continue

            record = self._normalize_row(row, row_number)
            if record.date is DateSentinel.INVALID:
                invalid_dates += 1
            records.append(record)

        if invalid_dates:
            logger.warning(f"{invalid_dates} ledger rows have an invalid date")
        return records

    def _document_number(self, row: pd.Series, narrative: str) -> Optional[str]:
        extract_document = self.dialect.ledger_extractors.document
        if extract_document is not None:
            return extract_document(narrative) or MISSING_DOCUMENT

        column = self.layout.columns.get("document")
        return normalize_text(cell(row, column)) or None

    def _normalize_row(self, row: pd.Series, row_number: int) -> LedgerRecord:
        columns = self.layout.columns
        narrative = normalize_text(cell(row, columns.get("narrative")))
        raw_date = cell(row, columns.get("date"))
        parsed_date = parse_date(raw_date)

        if parsed_date is None:
            logger.debug(f"Libro Mayor row {row_number}: invalid date {raw_date!r}")
            if self.dialect.invalid_date_row == "blank":
                return LedgerRecord(
                    date=DateSentinel.INVALID,
                    narrative=narrative,
                    document_number=None,
                    debit=0,
                    credit=0,
                    next_business_day=DateSentinel.INVALID,
                    row_number=row_number,
                )
            return LedgerRecord(
                date=DateSentinel.INVALID,
                narrative=narrative,
                document_number=self._document_number(row, narrative),
                debit=normalize_amount(cell(row, columns.get("debit"))),
                credit=normalize_amount(cell(row, columns.get("credit"))),
                next_business_day=DateSentinel.INVALID,
                row_number=row_number,
            )

        extractors = self.dialect.ledger_extractors
        return LedgerRecord(
            date=parsed_date,
            narrative=narrative,
            document_number=self._document_number(row, narrative),
            debit=normalize_amount(cell(row, columns.get("debit"))),
            credit=normalize_amount(cell(row, columns.get("credit"))),
            rut=extractors.rut(narrative),
            name=extractors.name(narrative),
            next_business_day=next_business_day(parsed_date, self.calendar),
            row_number=row_number,
        )
