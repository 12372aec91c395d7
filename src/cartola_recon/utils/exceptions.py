"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class CartolaParseError(ReconciliationError):
    """Error reading a bank statement (Cartola) sheet."""

    pass


class LedgerParseError(ReconciliationError):
    """Error reading a general ledger (Libro Mayor) sheet."""

    pass


class CalendarParseError(ReconciliationError):
    """Error reading the business-day calendar."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ValidationError(ReconciliationError):
    """Input data rejected before matching starts."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating Excel report."""

    pass
