"""Output tables and Excel report."""

from .excel_generator import ExcelReportGenerator
from .tables import Table, matched_table, pending_ledger_table, pending_statement_table

__all__ = [
    "ExcelReportGenerator",
    "Table",
    "matched_table",
    "pending_ledger_table",
    "pending_statement_table",
]
