"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class SheetLayout(BaseModel):
    """Where the data of one input sheet lives."""

    sheet_name: str
    # 1-based spreadsheet row of the first data row
    first_row: int = 2
    # field name -> 0-based column index (A=0)
    columns: dict[str, int] = Field(default_factory=dict)


class CalendarLayout(BaseModel):
    """Where the business-day list lives."""

    sheet_name: str = "DiasHabiles2024"
    first_row: int = 2
    column: int = 0


class InputConfig(BaseModel):
    """Configuration for input workbooks, keyed by bank."""

    cartola: dict[str, SheetLayout] = Field(default_factory=dict)
    ledger: dict[str, SheetLayout] = Field(default_factory=dict)
    calendar: CalendarLayout = Field(default_factory=CalendarLayout)


class MatchingRule(BaseModel):
    """A single key component within a tier."""

    field: str
    match_type: str = "exact"
    required: bool = False


class MatchingTier(BaseModel):
    """A matching tier with priority and rules."""

    name: str
    description: str = ""
    priority: int = 99
    enabled: bool = True
    rules: list[MatchingRule] = Field(default_factory=list)


class ReportLayout(BaseModel):
    """Columns of the output sheets that differ between banks."""

    narrative_header: str = "DESCRIPCIÓN"
    document_header: str = "N° DOCUMENTO"
    # column shown between narrative and amounts in the pending sheets
    pending_reference: str = "document"
    # record whose RUT is shown in the matched sheet
    matched_rut_source: str = "ledger"


class DialectConfig(BaseModel):
    """Matching behaviour of one bank."""

    display_name: str
    tiers: list[MatchingTier] = Field(default_factory=list)
    mirror_amounts: bool = True
    invalid_date_row: str = "keep"
    index_invalid_dates: bool = True
    report: ReportLayout = Field(default_factory=ReportLayout)


class SheetsConfig(BaseModel):
    """Names of the report sheets."""

    summary: str = "Resumen"
    matched: str = "Conciliados"
    pending_statement: str = "Pendientes Cartola"
    pending_ledger: str = "Pendientes Libro Mayor"


class OutputConfig(BaseModel):
    """Configuration for output."""

    filename_template: str = "Conciliacion_Bancaria_{bank}_{timestamp}.xlsx"
    timestamp_format: str = "%Y%m%d_%H%M%S"
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    dialects: dict[str, DialectConfig] = Field(default_factory=dict)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def _amounts() -> dict[str, Any]:
    return {"field": "amounts", "match_type": "exact"}


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "cartola": {
                "bci": {
                    "sheet_name": "Cartola",
                    "first_row": 3,
                    "columns": {
                        "date": 0,
                        "narrative": 5,
                        "document": 7,
                        "charge": 9,
                        "credit": 10,
                    },
                },
                "estado": {
                    "sheet_name": "Cartola",
                    "first_row": 3,
                    "columns": {
                        "date": 0,
                        "narrative": 6,
                        "charge": 7,
                        "credit": 8,
                    },
                },
            },
            "ledger": {
                "bci": {
                    "sheet_name": "Libro Mayor",
                    "first_row": 10,
                    "columns": {
                        "date": 2,
                        "narrative": 5,
                        "debit": 8,
                        "credit": 9,
                    },
                },
                "estado": {
                    "sheet_name": "Libro Mayor",
                    "first_row": 10,
                    "columns": {
                        "date": 2,
                        "narrative": 5,
                        "document": 7,
                        "debit": 8,
                        "credit": 9,
                    },
                },
            },
            "calendar": {
                "sheet_name": "DiasHabiles2024",
                "first_row": 2,
                "column": 0,
            },
        },
        "dialects": {
            "bci": {
                "display_name": "BCI",
                "mirror_amounts": True,
                "invalid_date_row": "blank",
                "index_invalid_dates": True,
                "tiers": [
                    {
                        "name": "document_amounts",
                        "description": "Same document number and amounts, any date",
                        "priority": 1,
                        "enabled": True,
                        "rules": [
                            {"field": "document", "match_type": "exact"},
                            _amounts(),
                        ],
                    },
                    {
                        "name": "document_business_day_amounts",
                        "description": "Same document and amounts, ledger date or next business day",
                        "priority": 2,
                        "enabled": True,
                        "rules": [
                            {"field": "document", "match_type": "exact"},
                            {"field": "date", "match_type": "business_day"},
                            _amounts(),
                        ],
                    },
                ],
                "report": {
                    "narrative_header": "DESCRIPCIÓN",
                    "document_header": "N° DOCUMENTO",
                    "pending_reference": "document",
                    "matched_rut_source": "ledger",
                },
            },
            "estado": {
                "display_name": "Estado",
                "mirror_amounts": True,
                "invalid_date_row": "keep",
                "index_invalid_dates": False,
                "tiers": [
                    {
                        "name": "rut_date_amounts",
                        "description": "Same RUT, date and amounts",
                        "priority": 1,
                        "enabled": True,
                        "rules": [
                            {"field": "rut", "match_type": "exact"},
                            {"field": "date", "match_type": "exact"},
                            _amounts(),
                        ],
                    },
                    {
                        "name": "rut_business_day_amounts",
                        "description": "Same RUT and amounts, ledger date or next business day",
                        "priority": 2,
                        "enabled": True,
                        "rules": [
                            {"field": "rut", "match_type": "exact"},
                            {"field": "date", "match_type": "business_day"},
                            _amounts(),
                        ],
                    },
                    {
                        "name": "name_amounts",
                        "description": "Same counterparty name and amounts",
                        "priority": 3,
                        "enabled": True,
                        "rules": [
                            {"field": "name", "match_type": "exact"},
                            _amounts(),
                        ],
                    },
                    {
                        "name": "date_amounts",
                        "description": "Same amounts, ledger date or next business day",
                        "priority": 4,
                        "enabled": True,
                        "rules": [
                            {"field": "date", "match_type": "business_day"},
                            _amounts(),
                        ],
                    },
                ],
                "report": {
                    "narrative_header": "DETALLE",
                    "document_header": "N°DOCUMENTO",
                    "pending_reference": "rut",
                    "matched_rut_source": "statement",
                },
            },
        },
        "output": {
            "filename_template": "Conciliacion_Bancaria_{bank}_{timestamp}.xlsx",
            "timestamp_format": "%Y%m%d_%H%M%S",
            "sheets": {
                "summary": "Resumen",
                "matched": "Conciliados",
                "pending_statement": "Pendientes Cartola",
                "pending_ledger": "Pendientes Libro Mayor",
            },
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            "file": None,
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        # Mappings merge key by key, lists (tiers, rules) replace
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    return ReconConfig(**config_dict)


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Write the default configuration as YAML.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# Cartola / Libro Mayor reconciliation configuration
# Column indexes are 0-based (A=0); rows are spreadsheet row numbers.

"""
    yaml_content += yaml.safe_dump(
        get_default_config(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
