"""
Key-building strategies for transaction reconciliation.

A strategy turns a record into one or more match keys: selected fields
joined with "|". A statement record and a ledger record are candidates for
each other under a strategy when they share a key. Keys are compared as
plain strings, so both sides must render their fields identically.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from ..models.records import LedgerRecord, StatementRecord
from ..normalization.dates import format_date

KEY_SEPARATOR = "|"

TEXT_FIELDS = ("document", "rut", "name")
DATE_FIELD = "date"
AMOUNTS_FIELD = "amounts"
KNOWN_FIELDS = TEXT_FIELDS + (DATE_FIELD, AMOUNTS_FIELD)

DATE_MATCH_TYPES = ("exact", "business_day")

Record = Union[StatementRecord, LedgerRecord]


def _render(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _text_value(record: Record, field: str) -> Optional[str]:
    if field == "document":
        return record.document_number
    if field == "rut":
        return record.rut
    return record.name


class MatchingStrategy(ABC):
    """Abstract base class for key-building strategies."""

    def __init__(
        self,
        name: str,
        fields: Sequence[str],
        required: Iterable[str] = (),
        mirror_amounts: bool = True,
    ):
        """
        Initialize the strategy.

        Args:
            name: Strategy name, reported on every pair it produces
            fields: Ordered key components (document, rut, name, date, amounts)
            required: Text fields that must be present for a record to be keyed
            mirror_amounts: Compare the statement credit with the ledger debit
        """
        unknown = [f for f in fields if f not in KNOWN_FIELDS]
        if unknown:
            raise ValueError(f"Unknown key fields for strategy {name}: {unknown}")

        self.name = name
        self.fields = tuple(fields)
        self.required = frozenset(required)
        self.mirror_amounts = mirror_amounts

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, fields={self.fields})"

    @abstractmethod
    def ledger_keys(self, record: LedgerRecord) -> list[str]:
        """Keys a ledger record is indexed under (may be empty)."""
        pass

    @abstractmethod
    def statement_keys(self, record: StatementRecord) -> list[str]:
        """Keys a statement record is looked up with, in order."""
        pass

    def _amount_parts(self, record: Record) -> tuple[str, str]:
        if isinstance(record, LedgerRecord):
            return _render(record.debit), _render(record.credit)
        # A bank credit is booked as a ledger debit
        if self.mirror_amounts:
            return _render(record.credit), _render(record.charge)
        return _render(record.charge), _render(record.credit)

    def _has_required(self, record: Record) -> bool:
        for field in self.required:
            if field in TEXT_FIELDS and not _text_value(record, field):
                return False
        return True

    def _compose(self, record: Record, day: Optional[str] = None) -> str:
        parts: list[str] = []
        for field in self.fields:
            if field == AMOUNTS_FIELD:
                parts.extend(self._amount_parts(record))
            elif field == DATE_FIELD:
                parts.append(day or "")
            else:
                parts.append(_render(_text_value(record, field)))
        return KEY_SEPARATOR.join(parts)


class FieldKeyStrategy(MatchingStrategy):
    """
    Key made of text fields and amounts, regardless of date.
    One key per record.
    """

    def ledger_keys(self, record: LedgerRecord) -> list[str]:
        if not self._has_required(record):
            return []
        return [self._compose(record)]

    def statement_keys(self, record: StatementRecord) -> list[str]:
        if not self._has_required(record):
            return []
        return [self._compose(record)]


class DateKeyStrategy(MatchingStrategy):
    """
    Key that includes a posting date.

    With `date_match="business_day"` a ledger record is indexed under its
    own date and under its next business day, so a statement line posted
    on either day finds it.
    """

    def __init__(
        self,
        name: str,
        fields: Sequence[str],
        required: Iterable[str] = (),
        mirror_amounts: bool = True,
        date_match: str = "exact",
        index_invalid_dates: bool = True,
    ):
        """
        Initialize the strategy.

        Args:
            name: Strategy name
            fields: Ordered key components; must include "date"
            required: Text fields that must be present
            mirror_amounts: Compare the statement credit with the ledger debit
            date_match: "exact" or "business_day"
            index_invalid_dates: Key sentinel dates as "" instead of
                dropping the record from this strategy
        """
        super().__init__(name, fields, required, mirror_amounts)
        if DATE_FIELD not in self.fields:
            raise ValueError(f"Strategy {name} has no date field")
        if date_match not in DATE_MATCH_TYPES:
            raise ValueError(f"Unknown date match type for {name}: {date_match}")
        self.date_match = date_match
        self.index_invalid_dates = index_invalid_dates

    def _render_day(self, value: object) -> Optional[str]:
        if isinstance(value, date):
            return format_date(value)
        if self.index_invalid_dates:
            return ""
        return None

    def _keys_for_days(self, record: Record, days: Sequence[object]) -> list[str]:
        if not self._has_required(record):
            return []

        keys: list[str] = []
        for value in days:
            rendered = self._render_day(value)
            if rendered is None:
                continue
            key = self._compose(record, rendered)
            if key not in keys:
                keys.append(key)
        return keys

    def ledger_keys(self, record: LedgerRecord) -> list[str]:
        days: list[object] = [record.date]
        if self.date_match == "business_day":
            days.append(record.next_business_day)
        return self._keys_for_days(record, days)

    def statement_keys(self, record: StatementRecord) -> list[str]:
        return self._keys_for_days(record, [record.date])
