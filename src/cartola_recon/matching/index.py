"""
Read-only multi-map from match keys to ledger positions.

Built once per run from the full ledger, before any statement record is
looked up. Candidate lists keep ledger order so the matcher always takes
the earliest unconsumed ledger record.
"""

from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Container, Iterable, Mapping, Optional, Sequence
import logging

from ..models.records import LedgerRecord
from .strategies import MatchingStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchIndex:
    """Per-strategy maps of key -> ledger positions."""

    maps: Mapping[str, Mapping[str, tuple[int, ...]]]

    @classmethod
    def build(
        cls,
        ledger: Sequence[LedgerRecord],
        strategies: Iterable[MatchingStrategy],
    ) -> "MatchIndex":
        """
        Index every ledger record under every strategy.

        Args:
            ledger: Ledger records in original order
            strategies: Strategies to build one map for each

        Returns:
            Immutable index
        """
        maps: dict[str, Mapping[str, tuple[int, ...]]] = {}

        for strategy in strategies:
            buckets: dict[str, list[int]] = defaultdict(list)
            for position, record in enumerate(ledger):
                for key in strategy.ledger_keys(record):
                    buckets[key].append(position)

            maps[strategy.name] = MappingProxyType(
                {key: tuple(positions) for key, positions in buckets.items()}
            )
            logger.debug(
                f"Indexed {len(ledger)} ledger records under {strategy.name}: "
                f"{len(buckets)} distinct keys"
            )

        return cls(maps=MappingProxyType(maps))

    def strategies(self) -> list[str]:
        return list(self.maps)

    def size(self, strategy: str) -> int:
        """Number of distinct keys of a strategy."""
        return len(self.maps.get(strategy, {}))

    def candidates(self, strategy: str, key: str) -> tuple[int, ...]:
        """Ledger positions stored under a key, in ledger order."""
        return self.maps.get(strategy, {}).get(key, ())

    def first_available(
        self,
        strategy: str,
        keys: Iterable[str],
        consumed: Container[int],
    ) -> Optional[int]:
        """
        First ledger position not yet consumed, trying keys in order.

        Args:
            strategy: Strategy name
            keys: Lookup keys of the statement record
            consumed: Ledger positions already paired

        Returns:
            Ledger position or None
        """
        for key in keys:
            for position in self.candidates(strategy, key):
                if position not in consumed:
                    return position
        return None
