"""
Command-line interface for the Cartola / Libro Mayor reconciliation tool.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import ReconConfig, generate_default_config, load_config
from .matching.dialects import build_dialect
from .matching.engine import ReconciliationEngine
from .models.records import ReconciliationSummary
from .normalization.dates import BusinessDayCalendar, format_date
from .parsers import CalendarParser, CartolaParser, LedgerParser
from .reports.excel_generator import ExcelReportGenerator
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging

console = Console()

BANKS = ["bci", "estado"]
PREVIEW_ROWS = 20

bank_argument = click.argument("bank", type=click.Choice(BANKS, case_sensitive=False))
workbook_argument = click.argument("workbook", type=click.Path(exists=True, path_type=Path))
config_option = click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
calendar_option = click.option(
    "--calendar",
    type=click.Path(exists=True, path_type=Path),
    help="Business-day file (.xlsx or .csv); defaults to the workbook itself",
)


@click.group()
@click.version_option(version=__version__)
def main():
    """Cartola vs Libro Mayor bank reconciliation tool (BCI, Estado)."""
    pass


@main.command()
@bank_argument
@workbook_argument
@calendar_option
@config_option
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel file path")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--dry-run", is_flag=True, help="Parse and match without generating the report"
)
def reconcile(
    bank: str,
    workbook: Path,
    calendar: Optional[Path],
    config: Optional[Path],
    output: Optional[Path],
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile the Cartola sheet of a workbook against its Libro Mayor sheet.

    BANK: Bank dialect (bci or estado)
    WORKBOOK: Workbook holding the Cartola and Libro Mayor sheets
    """
    try:
        recon_config = load_config(config)
        _setup_logging(recon_config, verbose)

        calendar_file = calendar or workbook

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading business days...", total=None)
            business_days = CalendarParser(recon_config).parse_file(calendar_file)
            progress.update(task, completed=True)

            engine = ReconciliationEngine(recon_config, bank)

            task = progress.add_task("Reading Cartola...", total=None)
            statement = CartolaParser(recon_config, engine.dialect).parse_file(workbook)
            progress.update(task, completed=True)

            task = progress.add_task("Reading Libro Mayor...", total=None)
            ledger = LedgerParser(recon_config, engine.dialect, business_days).parse_file(
                workbook
            )
            progress.update(task, completed=True)

            task = progress.add_task("Running reconciliation...", total=None)
            start_time = datetime.now()
            result = engine.reconcile(statement, ledger)
            processing_time = (datetime.now() - start_time).total_seconds()
            progress.update(task, completed=True)

            summary = engine.generate_summary(
                result,
                processing_time=processing_time,
                source_filename=workbook.name,
                calendar_filename=calendar_file.name,
            )

        _display_summary(summary)

        if dry_run:
            console.print("\n[yellow]Dry run - no report generated[/yellow]")
            return

        report_generator = ExcelReportGenerator(recon_config, engine.dialect)
        if output is None:
            output = Path(report_generator.default_filename())

        report_path = report_generator.generate_report(summary, result, output)
        console.print(f"\n[green]Report generated: {report_path}[/green]")

    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse-cartola")
@bank_argument
@workbook_argument
@config_option
def parse_cartola(bank: str, workbook: Path, config: Optional[Path]):
    """
    Parse the Cartola sheet and display its records.

    BANK: Bank dialect (bci or estado)
    WORKBOOK: Workbook holding the Cartola sheet
    """
    try:
        recon_config = load_config(config)
        dialect = build_dialect(bank, recon_config)
        records = CartolaParser(recon_config, dialect).parse_file(workbook)
    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Cartola {dialect.display_name}: {workbook.name}")
    table.add_column("Fecha")
    table.add_column(dialect.report.narrative_header)
    table.add_column("Documento")
    table.add_column("RUT")
    table.add_column("Cargo", justify="right")
    table.add_column("Abono", justify="right")

    for record in records[:PREVIEW_ROWS]:
        table.add_row(
            format_date(record.date),
            _truncate(record.narrative),
            record.document_number or "-",
            record.rut or "-",
            f"{record.charge:,}",
            f"{record.credit:,}",
        )

    _print_preview(table, len(records))


@main.command("parse-ledger")
@bank_argument
@workbook_argument
@calendar_option
@config_option
def parse_ledger(
    bank: str, workbook: Path, calendar: Optional[Path], config: Optional[Path]
):
    """
    Parse the Libro Mayor sheet and display its records.

    BANK: Bank dialect (bci or estado)
    WORKBOOK: Workbook holding the Libro Mayor sheet
    """
    try:
        recon_config = load_config(config)
        dialect = build_dialect(bank, recon_config)
        business_days: BusinessDayCalendar = CalendarParser(recon_config).parse_file(
            calendar or workbook
        )
        records = LedgerParser(recon_config, dialect, business_days).parse_file(workbook)
    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Libro Mayor {dialect.display_name}: {workbook.name}")
    table.add_column("Fecha")
    table.add_column("Hábil siguiente")
    table.add_column("Glosa")
    table.add_column("Documento")
    table.add_column("RUT")
    table.add_column("Debe", justify="right")
    table.add_column("Haber", justify="right")

    for record in records[:PREVIEW_ROWS]:
        table.add_row(
            format_date(record.date),
            format_date(record.next_business_day),
            _truncate(record.narrative),
            record.document_number or "-",
            record.rut or "-",
            f"{record.debit:,}",
            f"{record.credit:,}",
        )

    _print_preview(table, len(records))


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _setup_logging(config: ReconConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.logging.level
    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging(level, log_file=log_file, log_format=config.logging.format)


def _truncate(text: str, width: int = 40) -> str:
    return text[:width] + "..." if len(text) > width else text


def _print_preview(table: Table, total: int) -> None:
    console.print(table)
    if total > PREVIEW_ROWS:
        console.print(f"\n... and {total - PREVIEW_ROWS} more records")
    console.print(f"\nTotal records: {total}")


def _display_summary(summary: ReconciliationSummary) -> None:
    """Display reconciliation summary in console."""
    table = Table(title=f"Reconciliation Summary ({summary.bank})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Cartola records", str(summary.total_statement_records))
    table.add_row("Libro Mayor records", str(summary.total_ledger_records))
    table.add_row("Matched", str(summary.matched_count))
    table.add_row("Pending in Cartola", str(summary.pending_statement_count))
    table.add_row("Pending in Libro Mayor", str(summary.pending_ledger_count))
    for strategy, count in summary.matches_by_strategy.items():
        table.add_row(f"  {strategy}", str(count))
    table.add_row("Match rate", f"{summary.match_rate:.2f}%")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


if __name__ == "__main__":
    main()
