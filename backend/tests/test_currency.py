import logging

import pytest

from spendwise.currency import (
    DEFAULT_CURRENCIES,
    apply_rate_overrides,
    can_convert,
    convert,
    convert_cents,
    format_amount,
    rate_table,
)

RATES = rate_table(DEFAULT_CURRENCIES)


def test_convert_eur_to_usd():
    assert convert(100, "EUR", "USD", RATES) == pytest.approx(109.89, abs=0.01)


def test_convert_same_currency_is_identity():
    assert convert(42.5, "JPY", "JPY", RATES) == 42.5
    assert convert(42.5, None, "USD", RATES) == 42.5


def test_convert_round_trip():
    there = convert(50, "USD", "JPY", RATES)
    assert convert(there, "JPY", "USD", RATES) == pytest.approx(50)


def test_convert_cross_rate_goes_through_usd():
    # 0.78 GBP per USD, 0.91 EUR per USD
    assert convert(78, "GBP", "EUR", RATES) == pytest.approx(91)


def test_convert_unknown_currency_returns_raw_amount(caplog):
    with caplog.at_level(logging.WARNING, logger="spendwise.currency"):
        assert convert(25, "XYZ", "USD", RATES) == 25
    assert "XYZ" in caplog.text


def test_can_convert_requires_non_zero_rates():
    rates = rate_table(apply_rate_overrides(DEFAULT_CURRENCIES, {"EUR": 0}))
    assert can_convert("USD", "GBP", rates)
    assert not can_convert("EUR", "USD", rates)
    assert not can_convert("XYZ", "USD", rates)
    assert can_convert("XYZ", "XYZ", rates)


def test_apply_rate_overrides_leaves_others_alone():
    rates = rate_table(apply_rate_overrides(DEFAULT_CURRENCIES, {"EUR": 0.5}))
    assert rates["EUR"].rate == 0.5
    assert rates["GBP"].rate == 0.78


def test_convert_cents_rounds_to_nearest_cent():
    assert convert_cents(10000, "EUR", "USD", RATES) == 10989
    assert convert_cents(10000, "USD", "USD", RATES) == 10000


def test_format_amount():
    assert format_amount(12.5, "EUR", RATES) == "€12.50"
    assert format_amount(3, "XYZ", RATES) == "$3.00"
