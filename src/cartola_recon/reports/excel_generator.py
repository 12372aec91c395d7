"""
Excel report generator for reconciliation results.
Writes a summary sheet plus the matched and pending tables.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig
from ..matching.dialects import BankDialect
from ..models.records import ReconciliationResult, ReconciliationSummary
from ..utils.exceptions import ReportGenerationError
from .tables import (
    Table,
    matched_table,
    pending_ledger_table,
    pending_statement_table,
)

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
AMOUNT_FORMAT = "#,##0"


class ExcelReportGenerator:
    """Generates the reconciliation workbook."""

    def __init__(self, config: ReconConfig, dialect: BankDialect):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
            dialect: Bank dialect (column layout of the tables)
        """
        self.config = config
        self.dialect = dialect
        self.sheet_names = config.output.sheets

    def default_filename(self, now: Optional[datetime] = None) -> str:
        """File name from the configured template, e.g. Conciliacion_Bancaria_BCI_20240301_101500.xlsx."""
        now = now or datetime.now()
        return self.config.output.filename_template.format(
            bank=self.dialect.display_name,
            timestamp=now.strftime(self.config.output.timestamp_format),
        )

    def generate_report(
        self,
        summary: ReconciliationSummary,
        result: ReconciliationResult,
        output_path: Path,
    ) -> Path:
        """
        Generate the complete reconciliation report.

        Args:
            summary: Reconciliation summary
            result: Reconciliation result
            output_path: Path for output file

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_summary_sheet(wb, summary)
        self._write_table(wb, self.sheet_names.matched, matched_table(result, self.dialect), MATCH_FILL)
        self._write_table(
            wb,
            self.sheet_names.pending_statement,
            pending_statement_table(result, self.dialect),
            UNMATCHED_FILL,
        )
        self._write_table(
            wb,
            self.sheet_names.pending_ledger,
            pending_ledger_table(result, self.dialect),
            UNMATCHED_FILL,
        )

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            logger.error(f"Failed to save report: {e}")
            raise ReportGenerationError(f"Could not write report to {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(self, wb: Workbook, summary: ReconciliationSummary) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(self.sheet_names.summary)

        ws["A1"] = f"Conciliación Bancaria {summary.bank}"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:C1")

        info = [
            ("Fecha de conciliación:", summary.reconciliation_date.strftime("%d/%m/%Y %H:%M:%S")),
            ("Archivo:", summary.source_filename or "-"),
            ("Días hábiles:", summary.calendar_filename or "-"),
            ("Configuración:", summary.config_file_used or "Por defecto"),
        ]
        row = 3
        for label, value in info:
            ws[f"A{row}"] = label
            ws[f"B{row}"] = value
            row += 1

        row += 1
        ws[f"A{row}"] = "Resultado"
        ws[f"A{row}"].font = Font(bold=True)
        row += 1

        counts = [
            ("Registros Cartola:", summary.total_statement_records),
            ("Registros Libro Mayor:", summary.total_ledger_records),
            ("Conciliados:", summary.matched_count),
            ("Pendientes Cartola:", summary.pending_statement_count),
            ("Pendientes Libro Mayor:", summary.pending_ledger_count),
            ("Porcentaje conciliado:", f"{summary.match_rate:.2f}%"),
        ]
        for label, value in counts:
            ws[f"A{row}"] = label
            ws[f"B{row}"] = value
            row += 1

        row += 1
        ws[f"A{row}"] = "Conciliados por criterio"
        ws[f"A{row}"].font = Font(bold=True)
        row += 1
        for strategy, count in summary.matches_by_strategy.items():
            ws[f"A{row}"] = strategy
            ws[f"B{row}"] = count
            row += 1

        ws.column_dimensions["A"].width = 34
        ws.column_dimensions["B"].width = 40

    def _write_table(
        self, wb: Workbook, sheet_name: str, table: Table, fill: PatternFill
    ) -> Worksheet:
        """Write a table with a styled header row."""
        ws = wb.create_sheet(sheet_name)

        for col, header in enumerate(table.headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

        for row_num, row_data in enumerate(table.rows, start=2):
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
                cell.fill = fill
                if isinstance(value, int):
                    cell.number_format = AMOUNT_FORMAT

        self._auto_fit_columns(ws)
        return ws

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            ws.column_dimensions[column_cells[0].column_letter].width = min(max_length + 2, 60)
