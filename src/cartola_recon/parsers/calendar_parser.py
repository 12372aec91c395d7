"""Business-day calendar loader."""

from pathlib import Path
import logging

import pandas as pd

from ..config import CalendarLayout, ReconConfig
from ..normalization.dates import BusinessDayCalendar
from ..utils.exceptions import CalendarParseError
from .sheets import read_sheet

logger = logging.getLogger(__name__)


class CalendarParser:
    """Reads the list of business days from a workbook sheet or a CSV file."""

    def __init__(self, config: ReconConfig):
        self.config = config
        self.layout: CalendarLayout = config.input.calendar

    def parse_file(self, file_path: Path) -> BusinessDayCalendar:
        """
        Load the calendar.

        Args:
            file_path: .xlsx workbook (configured sheet) or .csv file

        Returns:
            Calendar of valid business days

        Raises:
            CalendarParseError: If the file cannot be read or holds no valid date
        """
        logger.info(f"Loading business days from: {file_path}")

        try:
            if file_path.suffix.lower() == ".csv":
                df = pd.read_csv(
                    file_path,
                    header=None,
                    skiprows=max(self.layout.first_row - 1, 0),
                    dtype=str,
                )
            else:
                df = read_sheet(file_path, self.layout.sheet_name, self.layout.first_row)
        except Exception as e:
            logger.error(f"Failed to read business-day calendar: {e}")
            raise CalendarParseError(f"Could not read business days from {file_path}: {e}") from e

        if self.layout.column >= len(df.columns):
            raise CalendarParseError(
                f"Business-day column {self.layout.column} not found in {file_path}"
            )

        return self.parse_values(df.iloc[:, self.layout.column].tolist())

    def parse_values(self, values: list) -> BusinessDayCalendar:
        """Build a calendar from raw values, failing when none is valid."""
        calendar = BusinessDayCalendar.from_values(values)
        if not calendar:
            raise CalendarParseError("The business-day calendar has no valid dates")

        logger.info(
            f"Loaded {len(calendar)} business days ({calendar.first} to {calendar.last})"
        )
        return calendar
