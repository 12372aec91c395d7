from datetime import date, datetime

import pytest
from openpyxl import Workbook

from cartola_recon.config import load_config
from cartola_recon.models.records import DateSentinel, LedgerRecord, StatementRecord
from cartola_recon.normalization.dates import BusinessDayCalendar


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def calendar():
    """Business days of early March 2024 (weekends excluded)."""
    return BusinessDayCalendar.from_values(
        [
            date(2024, 3, 1),
            date(2024, 3, 4),
            date(2024, 3, 5),
            date(2024, 3, 6),
            date(2024, 3, 7),
            date(2024, 3, 8),
        ]
    )


@pytest.fixture
def make_statement():
    def _make(day=date(2024, 3, 1), narrative="", document=None, charge=0, credit=0,
              rut=None, name=None):
        return StatementRecord(
            date=day,
            narrative=narrative,
            document_number=document,
            charge=charge,
            credit=credit,
            rut=rut,
            name=name,
        )

    return _make


@pytest.fixture
def make_ledger():
    def _make(day=date(2024, 3, 1), narrative="", document=None, debit=0, credit=0,
              rut=None, name=None, next_day=DateSentinel.INVALID):
        return LedgerRecord(
            date=day,
            narrative=narrative,
            document_number=document,
            debit=debit,
            credit=credit,
            rut=rut,
            name=name,
            next_business_day=next_day,
        )

    return _make


def _write_sheet(wb, title, first_row, rows):
    ws = wb.create_sheet(title)
    # Title and header rows above the data, like the exported workbooks
    for row_number in range(1, first_row):
        ws.cell(row=row_number, column=1, value=f"{title} {row_number}")
    for offset, values in enumerate(rows):
        for column, value in values.items():
            ws.cell(row=first_row + offset, column=column, value=value)


@pytest.fixture
def workbook_path(tmp_path):
    """BCI workbook with one matching Cartola / Libro Mayor pair and a calendar sheet."""
    wb = Workbook()
    wb.remove(wb.active)
    # Columns are 1-based here (A=1)
    _write_sheet(
        wb,
        "Cartola",
        3,
        [{1: datetime(2024, 3, 1), 6: "Transferencia", 8: "1234567", 11: 50000}],
    )
    _write_sheet(
        wb,
        "Libro Mayor",
        10,
        [
            {3: datetime(2024, 3, 1), 6: "TRF/1234567/12345678K", 9: 50000},
            {3: datetime(2024, 3, 4), 6: "PAGO PROVEEDOR", 10: 1200},
        ],
    )
    _write_sheet(
        wb,
        "DiasHabiles2024",
        2,
        [{1: datetime(2024, 3, 1)}, {1: datetime(2024, 3, 4)}, {1: datetime(2024, 3, 5)}],
    )
    path = tmp_path / "conciliacion.xlsx"
    wb.save(path)
    return path
