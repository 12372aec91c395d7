"""
Regex rules that pull comparable fields out of free-text narratives.

A bank statement or ledger narrative ("glosa") may carry a RUT, a
counterparty name or a document number. Each bank writes them differently,
so the rules are grouped per dialect. A rule that finds nothing returns
None; a missing field is an expected outcome, never an error.
"""

from functools import partial
from typing import Callable, NamedTuple, Optional
import re

Extractor = Callable[[object], Optional[str]]

RUT_TOKEN = re.compile(r"^\d{7,8}[kK\d]$")
RUT_INLINE = re.compile(r"\b\d{7,8}-[kK\d]\b")

TRANSFER_NAME = re.compile(r"TRANSFER\s+([A-Z\s]+)(?:/\d+)?")
NAME_AFTER_RUT = re.compile(r"\b\d{7,8}-[K\d]\s+(.+)")
NAME_AFTER_PREFIX = (
    re.compile(r"DE\s+([A-ZÁÉÍÓÚÑ\s]+)"),
    re.compile(r"AL\s+([A-ZÁÉÍÓÚÑ\s]+)"),
)

NUMERIC_TOKEN = re.compile(r"^\d+$")
TRAILING_DOCUMENT = re.compile(r"-\s*(\d{7,8})$")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def no_extraction(text: object) -> Optional[str]:
    """Placeholder for dialects that do not carry a field in the text."""
    return None


def extract_rut_slash(
    text: object, position: int, uppercase: bool = False
) -> Optional[str]:
    """
    Read a RUT from a slash-delimited narrative ("TRF/123/12345678K/...").

    Args:
        text: Narrative
        position: Index of the token holding the RUT after splitting on "/"
        uppercase: Upper-case the narrative before splitting

    Returns:
        RUT without separators, upper-cased, or None
    """
    if not isinstance(text, str):
        return None
    if uppercase:
        text = text.upper()

    parts = text.split("/")
    if len(parts) <= position:
        return None

    token = parts[position].strip()
    if not RUT_TOKEN.match(token):
        return None
    return token.replace("-", "").upper()


def extract_rut_inline(text: object) -> Optional[str]:
    """Find a hyphenated RUT ("12345678-9") anywhere in the text."""
    if not isinstance(text, str):
        return None
    match = RUT_INLINE.search(text)
    if not match:
        return None
    return match.group(0).replace("-", "").upper()


def extract_transfer_name(text: object, uppercase: bool = False) -> Optional[str]:
    """Counterparty written after the TRANSFER keyword."""
    if not isinstance(text, str):
        return None
    if uppercase:
        text = text.upper()
    match = TRANSFER_NAME.search(text)
    return _clean(match.group(1)) if match else None


def extract_statement_name(text: object) -> Optional[str]:
    """
    Counterparty of a Banco Estado statement line.

    Prefers the text that follows a hyphenated RUT; otherwise the words
    after "DE" or "AL", skipping captures that are only a "RUT" label.
    """
    if not isinstance(text, str):
        return None
    text = text.upper()

    match = NAME_AFTER_RUT.search(text)
    if match:
        return _clean(match.group(1))

    for pattern in NAME_AFTER_PREFIX:
        match = pattern.search(text)
        if match and "RUT" not in match.group(1):
            return _clean(match.group(1))
    return None


def extract_document_number(text: object) -> Optional[str]:
    """
    Document number of a ledger narrative.

    Either the second slash-delimited token when it is purely numeric, or
    a 7-8 digit suffix after a hyphen ("PAGO NOMINA EN LINEA-1234567").
    """
    if not isinstance(text, str):
        return None

    parts = text.split("/")
    if len(parts) > 1:
        token = parts[1].strip()
        if NUMERIC_TOKEN.match(token):
            return token

    match = TRAILING_DOCUMENT.search(text)
    return match.group(1) if match else None


class StatementExtractors(NamedTuple):
    """Rules applied to a statement narrative."""

    rut: Extractor
    name: Extractor


class LedgerExtractors(NamedTuple):
    """Rules applied to a ledger narrative.

    `document` is None when the ledger sheet has its own document column.
    """

    rut: Extractor
    name: Extractor
    document: Optional[Extractor]


BCI_STATEMENT = StatementExtractors(rut=no_extraction, name=no_extraction)
BCI_LEDGER = LedgerExtractors(
    rut=partial(extract_rut_slash, position=2),
    name=extract_transfer_name,
    document=extract_document_number,
)

ESTADO_STATEMENT = StatementExtractors(
    rut=extract_rut_inline,
    name=extract_statement_name,
)
ESTADO_LEDGER = LedgerExtractors(
    rut=partial(extract_rut_slash, position=1, uppercase=True),
    name=partial(extract_transfer_name, uppercase=True),
    document=None,
)

EXTRACTORS: dict[str, tuple[StatementExtractors, LedgerExtractors]] = {
    "bci": (BCI_STATEMENT, BCI_LEDGER),
    "estado": (ESTADO_STATEMENT, ESTADO_LEDGER),
}
