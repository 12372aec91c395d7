"""
Per-bank configuration of the reconciliation engine.

Both banks share one algorithm (index the ledger, then greedy matching over
the statement). A BankDialect carries what differs: narrative extraction
rules, the ordered strategies, and how rows with an invalid date are
treated.
"""

from dataclasses import dataclass, field
import logging

from ..config import DialectConfig, MatchingTier, ReconConfig, ReportLayout
from ..normalization.extractors import (
    EXTRACTORS,
    LedgerExtractors,
    StatementExtractors,
)
from ..utils.exceptions import ConfigurationError
from .strategies import (
    DATE_FIELD,
    TEXT_FIELDS,
    DateKeyStrategy,
    FieldKeyStrategy,
    MatchingStrategy,
)

logger = logging.getLogger(__name__)

INVALID_DATE_ROWS = ("blank", "keep")


@dataclass(frozen=True)
class BankDialect:
    """Everything bank-specific the engine and row mappers need."""

    name: str
    display_name: str
    statement_extractors: StatementExtractors
    ledger_extractors: LedgerExtractors
    strategies: tuple[MatchingStrategy, ...]
    mirror_amounts: bool = True
    # "blank": a ledger row with an invalid date keeps only its narrative
    # "keep": document number and amounts survive
    invalid_date_row: str = "keep"
    report: ReportLayout = field(default_factory=ReportLayout)

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self.strategies]


def available_banks(config: ReconConfig) -> list[str]:
    """Banks that have both a dialect configuration and extraction rules."""
    return [name for name in config.dialects if name in EXTRACTORS]


def create_strategy(tier: MatchingTier, dialect_config: DialectConfig) -> MatchingStrategy:
    """
    Create a key strategy from a tier configuration.

    Args:
        tier: Tier with its ordered rules
        dialect_config: Bank settings shared by all tiers

    Returns:
        Matching strategy

    Raises:
        ConfigurationError: If the tier cannot be turned into a strategy
    """
    if not tier.rules:
        raise ConfigurationError(f"Tier {tier.name} has no rules")

    fields = [rule.field for rule in tier.rules]
    required = [
        rule.field for rule in tier.rules if rule.required and rule.field in TEXT_FIELDS
    ]
    date_rule = next((r for r in tier.rules if r.field == DATE_FIELD), None)

    try:
        if date_rule:
            return DateKeyStrategy(
                tier.name,
                fields,
                required=required,
                mirror_amounts=dialect_config.mirror_amounts,
                date_match=date_rule.match_type,
                index_invalid_dates=dialect_config.index_invalid_dates,
            )
        return FieldKeyStrategy(
            tier.name,
            fields,
            required=required,
            mirror_amounts=dialect_config.mirror_amounts,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid tier {tier.name}: {e}") from e


def build_dialect(name: str, config: ReconConfig) -> BankDialect:
    """
    Build the dialect of a bank from configuration.

    Args:
        name: Bank key ("bci", "estado")
        config: Application configuration

    Returns:
        Bank dialect with strategies in priority order

    Raises:
        ConfigurationError: If the bank is unknown or misconfigured
    """
    key = name.strip().lower()
    dialect_config = config.dialects.get(key)
    if dialect_config is None or key not in EXTRACTORS:
        known = ", ".join(available_banks(config)) or "none"
        raise ConfigurationError(f"Unknown bank '{name}' (configured: {known})")

    if dialect_config.invalid_date_row not in INVALID_DATE_ROWS:
        raise ConfigurationError(
            f"invalid_date_row for {key} must be one of {INVALID_DATE_ROWS}, "
            f"got '{dialect_config.invalid_date_row}'"
        )

    enabled_tiers = [t for t in dialect_config.tiers if t.enabled]
    if not enabled_tiers:
        raise ConfigurationError(f"No enabled matching tiers for bank '{key}'")

    # sorted() is stable: equal priorities keep configuration order
    strategies = tuple(
        create_strategy(tier, dialect_config)
        for tier in sorted(enabled_tiers, key=lambda t: t.priority)
    )
    for strategy in strategies:
        logger.debug(f"Loaded matching tier for {key}: {strategy!r}")

    statement_extractors, ledger_extractors = EXTRACTORS[key]
    return BankDialect(
        name=key,
        display_name=dialect_config.display_name,
        statement_extractors=statement_extractors,
        ledger_extractors=ledger_extractors,
        strategies=strategies,
        mirror_amounts=dialect_config.mirror_amounts,
        invalid_date_row=dialect_config.invalid_date_row,
        report=dialect_config.report,
    )
