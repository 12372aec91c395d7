from datetime import date

import pytest

from cartola_recon.matching.engine import ReconciliationEngine, match_records
from cartola_recon.matching.index import MatchIndex
from cartola_recon.matching.strategies import DateKeyStrategy, FieldKeyStrategy
from cartola_recon.utils.exceptions import ValidationError


def _run(statement, ledger, strategies):
    index = MatchIndex.build(ledger, strategies)
    return match_records(statement, ledger, index, strategies)


def test_exact_match_scenario(make_statement, make_ledger):
    """Same document, date and amounts on both sides -> one pair, nothing pending."""
    strategies = [
        FieldKeyStrategy("document_amounts", ["document", "amounts"], mirror_amounts=False)
    ]
    statement = [make_statement(day=date(2024, 3, 1), document="1001", credit=50000)]
    ledger = [make_ledger(day=date(2024, 3, 1), document="1001", credit=50000)]

    result = _run(statement, ledger, strategies)

    assert len(result.matched) == 1
    assert result.matched[0].strategy == "document_amounts"
    assert not result.pending_statement
    assert not result.pending_ledger


def test_mirrored_amounts_match(make_statement, make_ledger, config):
    """A bank credit matches the ledger debit under the default BCI rules."""
    engine = ReconciliationEngine(config, "bci")
    statement = [make_statement(document="1001", credit=50000)]
    ledger = [make_ledger(document="1001", debit=50000)]

    result = engine.reconcile(statement, ledger)

    assert [pair.strategy for pair in result.matched] == ["document_amounts"]


def test_same_side_amounts_do_not_match_when_mirrored(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "bci")
    statement = [make_statement(document="1001", credit=50000)]
    ledger = [make_ledger(document="1001", credit=50000)]

    result = engine.reconcile(statement, ledger)

    assert not result.matched
    assert len(result.pending_statement) == 1
    assert len(result.pending_ledger) == 1


def test_fallback_via_next_business_day(make_statement, make_ledger):
    strategies = [
        DateKeyStrategy("document_date_amounts", ["document", "date", "amounts"]),
        DateKeyStrategy(
            "document_business_day_amounts",
            ["document", "date", "amounts"],
            date_match="business_day",
        ),
    ]
    ledger = [
        make_ledger(
            day=date(2024, 3, 1),
            document="1001",
            debit=50000,
            next_day=date(2024, 3, 2),
        )
    ]
    statement = [make_statement(day=date(2024, 3, 2), document="1001", credit=50000)]

    result = _run(statement, ledger, strategies)

    assert len(result.matched) == 1
    assert result.matched[0].strategy == "document_business_day_amounts"


def test_estado_fallback_via_next_business_day(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "estado")
    ledger = [
        make_ledger(
            day=date(2024, 3, 1),
            rut="123456789",
            debit=1000,
            next_day=date(2024, 3, 4),
        )
    ]
    statement = [make_statement(day=date(2024, 3, 4), rut="123456789", credit=1000)]

    result = engine.reconcile(statement, ledger)

    assert result.matched[0].strategy == "rut_business_day_amounts"


def test_no_match_scenario(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "bci")
    statement = [make_statement(document="2002", credit=700)]
    ledger = [make_ledger(document="1001", debit=50000)]

    result = engine.reconcile(statement, ledger)

    assert not result.matched
    assert result.pending_statement == statement
    assert result.pending_ledger == ledger


def test_consumed_ledger_record_is_not_pending(make_statement, make_ledger, config):
    """Two identical statement lines compete for one ledger line; only the first wins."""
    engine = ReconciliationEngine(config, "bci")
    statement = [
        make_statement(document="1001", credit=500),
        make_statement(document="1001", credit=500),
    ]
    ledger = [make_ledger(document="1001", debit=500)]

    result = engine.reconcile(statement, ledger)

    assert len(result.matched) == 1
    assert result.matched[0].statement_index == 0
    assert result.pending_statement == [statement[1]]
    assert result.pending_ledger == []


def test_duplicates_pair_one_to_one(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "bci")
    statement = [make_statement(document="1001", credit=500) for _ in range(3)]
    ledger = [make_ledger(document="1001", debit=500) for _ in range(3)]

    result = engine.reconcile(statement, ledger)

    assert len(result.matched) == 3
    assert [pair.ledger_index for pair in result.matched] == [0, 1, 2]


def test_partition_invariant(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "estado")
    statement = [
        make_statement(rut="111111111", credit=100),
        make_statement(name="JUAN", charge=200),
        make_statement(day=date(2024, 3, 5), rut="999999999", name="PEDRO", credit=300),
        make_statement(credit=999),
    ]
    ledger = [
        make_ledger(rut="111111111", debit=100),
        make_ledger(day=date(2024, 3, 6), name="JUAN", credit=200),
        make_ledger(day=date(2024, 3, 4), debit=300, next_day=date(2024, 3, 5)),
        make_ledger(debit=5),
    ]

    result = engine.reconcile(statement, ledger)

    assert result.statement_count == len(statement)
    assert result.ledger_count == len(ledger)
    used = [pair.ledger_index for pair in result.matched]
    assert len(used) == len(set(used))
    assert result.matches_by_strategy() == {
        "rut_date_amounts": 1,
        "name_amounts": 1,
        "date_amounts": 1,
    }
    assert result.pending_statement == [statement[3]]
    assert result.pending_ledger == [ledger[3]]


def test_higher_priority_strategy_wins(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "estado")
    ledger = [
        make_ledger(day=date(2024, 3, 5), name="JUAN", debit=1000),
        make_ledger(day=date(2024, 3, 1), rut="123456789", debit=1000),
    ]
    statement = [
        make_statement(day=date(2024, 3, 1), rut="123456789", name="JUAN", credit=1000)
    ]

    result = engine.reconcile(statement, ledger)

    assert result.matched[0].strategy == "rut_date_amounts"
    assert result.matched[0].ledger_index == 1
    assert result.pending_ledger == [ledger[0]]


def test_greedy_result_depends_on_statement_order(make_statement, make_ledger):
    strategies = [
        FieldKeyStrategy("document_amounts", ["document", "amounts"]),
        FieldKeyStrategy("name_amounts", ["name", "amounts"]),
    ]
    ledger = [
        make_ledger(document="2", name="A", debit=100),
        make_ledger(document="7", name="A", debit=100),
    ]
    first = make_statement(document="1", name="A", credit=100)
    second = make_statement(document="2", credit=100)

    result = _run([first, second], ledger, strategies)
    assert len(result.matched) == 1
    assert result.pending_statement == [second]
    assert result.pending_ledger == [ledger[1]]

    result = _run([second, first], ledger, strategies)
    assert len(result.matched) == 2
    assert not result.pending_statement
    assert not result.pending_ledger


def test_reconcile_is_deterministic(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "estado")
    statement = [make_statement(credit=100), make_statement(credit=100)]
    ledger = [make_ledger(debit=100), make_ledger(debit=100)]

    assert engine.reconcile(statement, ledger) == engine.reconcile(statement, ledger)


def test_empty_inputs_are_rejected(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "bci")
    with pytest.raises(ValidationError):
        engine.reconcile([], [make_ledger()])
    with pytest.raises(ValidationError):
        engine.reconcile([make_statement()], [])


def test_generate_summary(make_statement, make_ledger, config):
    engine = ReconciliationEngine(config, "bci")
    statement = [
        make_statement(document="1001", credit=500),
        make_statement(document="1002", credit=600),
    ]
    ledger = [make_ledger(document="1001", debit=500)]

    result = engine.reconcile(statement, ledger)
    summary = engine.generate_summary(result, processing_time=0.5, source_filename="mayo.xlsx")

    assert summary.bank == "BCI"
    assert summary.total_statement_records == 2
    assert summary.total_ledger_records == 1
    assert summary.matched_count == 1
    assert summary.pending_statement_count == 1
    assert summary.pending_ledger_count == 0
    assert summary.match_rate == 50.0
    assert summary.matches_by_strategy == {
        "document_amounts": 1,
        "document_business_day_amounts": 0,
    }
    assert summary.source_filename == "mayo.xlsx"
