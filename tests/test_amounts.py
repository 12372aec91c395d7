from decimal import Decimal

import numpy as np
import pytest

from cartola_recon.normalization.amounts import normalize_amount, normalize_text


def test_amount_from_formatted_text():
    assert normalize_amount("$ 1.234.567") == 1234567
    assert normalize_amount("50,000") == 50000
    assert normalize_amount("-2.500") == -2500
    assert normalize_amount("12-3") == 12


def test_amount_defaults_to_zero():
    assert normalize_amount(None) == 0
    assert normalize_amount("") == 0
    assert normalize_amount("sin monto") == 0
    assert normalize_amount(float("nan")) == 0
    assert normalize_amount(float("inf")) == 0
    assert normalize_amount(True) == 0
    assert normalize_amount([100]) == 0


def test_amount_from_numbers():
    assert normalize_amount(50000) == 50000
    assert normalize_amount(50000.0) == 50000
    assert isinstance(normalize_amount(50000.0), int)
    assert normalize_amount(np.int64(7)) == 7
    assert normalize_amount(np.float64(1500.0)) == 1500
    assert normalize_amount(Decimal("300")) == 300
    assert isinstance(normalize_amount(Decimal("300.0")), int)
    assert normalize_amount(Decimal("1.5")) == Decimal("1.5")
    assert isinstance(normalize_amount(Decimal("1.5")), Decimal)
    assert normalize_amount(Decimal("NaN")) == 0
    assert normalize_amount(10.5) == 10.5


def test_normalize_text():
    assert normalize_text(None) == ""
    assert normalize_text("  TRANSFERENCIA  ") == "TRANSFERENCIA"
    assert normalize_text(1001.0) == "1001"
    assert normalize_text(1001) == "1001"
    assert normalize_text(10.25) == "10.25"
    assert normalize_text(float("nan")) == ""


@pytest.mark.parametrize(
    "value",
    [50000, 50000.0, "$ 1.234.567", "12-3", "-2.500", "", None, float("nan"), 10.5, Decimal("1.5")],
)
def test_amount_normalization_is_idempotent(value):
    once = normalize_amount(value)
    assert normalize_amount(once) == once
