"""
Greedy, priority-ordered reconciliation of a bank statement against a
general ledger.

Each statement record, in statement order, takes the first unconsumed
ledger candidate of the first strategy that has one. There is no
backtracking: a pair, once made, is final, even when a different
assignment would have reconciled more rows.
"""

from datetime import datetime
from typing import Optional, Sequence
import logging

from ..config import ReconConfig
from ..models.records import (
    LedgerRecord,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
    StatementRecord,
)
from ..utils.exceptions import ValidationError
from .dialects import BankDialect, build_dialect
from .index import MatchIndex
from .strategies import MatchingStrategy

logger = logging.getLogger(__name__)


def match_records(
    statement: Sequence[StatementRecord],
    ledger: Sequence[LedgerRecord],
    index: MatchIndex,
    strategies: Sequence[MatchingStrategy],
    bank: str = "",
) -> ReconciliationResult:
    """
    Partition statement and ledger records into pairs and pending sets.

    Args:
        statement: Statement records in original order
        ledger: Ledger records in original order (the ones `index` was built from)
        index: Match index over `ledger`
        strategies: Strategies in priority order
        bank: Bank name recorded on the result

    Returns:
        Matched pairs in statement order, pending statement records in
        statement order and pending ledger records in ledger order
    """
    result = ReconciliationResult(bank=bank)
    matched_statement: set[int] = set()
    consumed_ledger: set[int] = set()

    for statement_index, record in enumerate(statement):
        if statement_index in matched_statement:
            continue

        pair: Optional[MatchedPair] = None
        for strategy in strategies:
            keys = strategy.statement_keys(record)
            if not keys:
                continue

            ledger_index = index.first_available(strategy.name, keys, consumed_ledger)
            if ledger_index is None:
                continue

            pair = MatchedPair(
                statement=record,
                ledger=ledger[ledger_index],
                strategy=strategy.name,
                statement_index=statement_index,
                ledger_index=ledger_index,
            )
            break

        if pair is None:
            logger.debug(f"Statement record {statement_index + 1} pending")
            result.pending_statement.append(record)
            continue

        result.matched.append(pair)
        matched_statement.add(statement_index)
        consumed_ledger.add(pair.ledger_index)
        logger.debug(
            f"Statement record {statement_index + 1} matched ledger record "
            f"{pair.ledger_index + 1} ({pair.strategy})"
        )

    for ledger_index, record in enumerate(ledger):
        if ledger_index not in consumed_ledger:
            logger.debug(f"Ledger record {ledger_index + 1} pending")
            result.pending_ledger.append(record)

    return result


class ReconciliationEngine:
    """
    Runs one reconciliation job for a bank.

    Holds no state between runs: every call to `reconcile` builds its own
    index and returns a fresh result.
    """

    def __init__(self, config: ReconConfig, bank: str):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
            bank: Bank key ("bci", "estado")
        """
        self.config = config
        self.dialect: BankDialect = build_dialect(bank, config)

    @property
    def strategies(self) -> tuple[MatchingStrategy, ...]:
        return self.dialect.strategies

    def reconcile(
        self,
        statement: Sequence[StatementRecord],
        ledger: Sequence[LedgerRecord],
    ) -> ReconciliationResult:
        """
        Reconcile statement records against ledger records.

        Args:
            statement: Normalized statement (Cartola) records
            ledger: Normalized ledger (Libro Mayor) records

        Returns:
            Reconciliation result

        Raises:
            ValidationError: If either input is empty
        """
        if not statement:
            raise ValidationError("The bank statement (Cartola) has no records")
        if not ledger:
            raise ValidationError("The general ledger (Libro Mayor) has no records")

        start_time = datetime.now()
        logger.info(
            f"Starting {self.dialect.display_name} reconciliation: "
            f"{len(statement)} statement records, {len(ledger)} ledger records"
        )

        index = MatchIndex.build(ledger, self.strategies)
        result = match_records(
            statement, ledger, index, self.strategies, bank=self.dialect.name
        )

        for strategy, count in result.matches_by_strategy().items():
            logger.debug(f"Tier {strategy}: {count} matches")

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {len(result.matched)} matched, "
            f"{len(result.pending_statement)} pending in statement, "
            f"{len(result.pending_ledger)} pending in ledger"
        )

        return result

    def generate_summary(
        self,
        result: ReconciliationResult,
        processing_time: float = 0.0,
        source_filename: Optional[str] = None,
        calendar_filename: Optional[str] = None,
    ) -> ReconciliationSummary:
        """
        Summarize a reconciliation result.

        Args:
            result: Result returned by `reconcile`
            processing_time: Seconds spent, for the report
            source_filename: Name of the input workbook
            calendar_filename: Name of the business-day calendar file

        Returns:
            Reconciliation summary
        """
        # Every strategy appears, in priority order, even with zero matches
        by_strategy = {name: 0 for name in self.dialect.strategy_names}
        by_strategy.update(result.matches_by_strategy())

        return ReconciliationSummary(
            bank=self.dialect.display_name,
            reconciliation_date=datetime.now(),
            total_statement_records=result.statement_count,
            total_ledger_records=result.ledger_count,
            matched_count=len(result.matched),
            pending_statement_count=len(result.pending_statement),
            pending_ledger_count=len(result.pending_ledger),
            matches_by_strategy=by_strategy,
            source_filename=source_filename,
            calendar_filename=calendar_filename,
            processing_time_seconds=processing_time,
            config_file_used=self.config.config_file_path,
        )
