"""
Bank statement (Cartola) row mapper.
Reads the statement sheet and converts rows to StatementRecords.
"""

from pathlib import Path
from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig, SheetLayout
from ..matching.dialects import BankDialect
from ..models.records import DateSentinel, StatementRecord
from ..normalization.amounts import normalize_amount, normalize_text
from ..normalization.dates import parse_date
from ..utils.exceptions import CartolaParseError, ConfigurationError
from .sheets import cell, is_blank_row, read_sheet

logger = logging.getLogger(__name__)


class CartolaParser:
    """
    Parser for the Cartola sheet of an uploaded workbook.

    Column positions differ between banks and come from
    `input.cartola.<bank>` in the configuration.
    """

    def __init__(self, config: ReconConfig, dialect: BankDialect):
        """
        Initialize the parser.

        Args:
            config: Application configuration
            dialect: Bank dialect (extraction rules)
        """
        self.config = config
        self.dialect = dialect
        layout = config.input.cartola.get(dialect.name)
        if layout is None:
            raise ConfigurationError(f"No Cartola layout configured for bank '{dialect.name}'")
        self.layout: SheetLayout = layout

    def parse_file(self, file_path: Path) -> list[StatementRecord]:
        """
        Read the statement sheet of a workbook.

        Args:
            file_path: Path to the workbook

        Returns:
            Statement records in sheet order

        Raises:
            CartolaParseError: If the sheet cannot be read
        """
        logger.info(f"Reading {self.layout.sheet_name} sheet from: {file_path}")

        try:
            df = read_sheet(file_path, self.layout.sheet_name, self.layout.first_row)
        except Exception as e:
            logger.error(f"Failed to read statement sheet: {e}")
            raise CartolaParseError(
                f"Could not read sheet '{self.layout.sheet_name}' from {file_path}: {e}"
            ) from e

        records = self.parse_dataframe(df)
        logger.info(f"Extracted {len(records)} statement records")
        return records

    def parse_dataframe(self, df: pd.DataFrame) -> list[StatementRecord]:
        """
        Convert positional rows (no header) to statement records.

        Args:
            df: Rows starting at the first data row

        Returns:
            Statement records; fully blank rows are skipped
        """
        records: list[StatementRecord] = []
        for position, (_, row) in enumerate(df.iterrows()):
            row_number = self.layout.first_row + position
            if is_blank_row(row):
                logger.debug(f"Cartola row {row_number}: blank, skipping")
                continue
            records.append(self._normalize_row(row, row_number))
        return records

    def _normalize_row(self, row: pd.Series, row_number: int) -> StatementRecord:
        columns = self.layout.columns
        extractors = self.dialect.statement_extractors

        raw_date = cell(row, columns.get("date"))
        parsed_date = parse_date(raw_date)
        if parsed_date is None:
            logger.warning(f"Cartola row {row_number}: invalid date {raw_date!r}")

        narrative = normalize_text(cell(row, columns.get("narrative")))
        document: Optional[str] = None
        if "document" in columns:
            document = normalize_text(cell(row, columns["document"])) or None

        return StatementRecord(
            date=parsed_date if parsed_date is not None else DateSentinel.INVALID,
            narrative=narrative,
            document_number=document,
            charge=normalize_amount(cell(row, columns.get("charge"))),
            credit=normalize_amount(cell(row, columns.get("credit"))),
            rut=extractors.rut(narrative),
            name=extractors.name(narrative),
            row_number=row_number,
        )
