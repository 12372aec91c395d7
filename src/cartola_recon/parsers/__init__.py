"""Row mappers for Cartola, Libro Mayor and business-day sheets."""

from .calendar_parser import CalendarParser
from .cartola_parser import CartolaParser
from .ledger_parser import LedgerParser

__all__ = ["CalendarParser", "CartolaParser", "LedgerParser"]
