"""Positional access to spreadsheet rows read with pandas."""

from pathlib import Path
from typing import Any, Optional

import pandas as pd


def read_sheet(file_path: Path, sheet_name: str, first_row: int) -> pd.DataFrame:
    """
    Read a sheet without headers, starting at a spreadsheet row.

    Args:
        file_path: Workbook path
        sheet_name: Sheet to read
        first_row: 1-based row of the first data row

    Returns:
        DataFrame with integer column labels (A=0)
    """
    return pd.read_excel(
        file_path,
        sheet_name=sheet_name,
        header=None,
        skiprows=max(first_row - 1, 0),
        dtype=object,
    )


def cell(row: pd.Series, column: Optional[int]) -> Any:
    """Value at a 0-based column, None when the column is absent or empty."""
    if column is None or column >= len(row):
        return None
    value = row.iloc[column]
    if pd.isna(value):
        return None
    return value


def is_blank_row(row: pd.Series) -> bool:
    return all(
        pd.isna(value) or (isinstance(value, str) and not value.strip())
        for value in row
    )
