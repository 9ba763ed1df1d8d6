"""
Tests for display.py - formatting and parsing of human-readable amounts.
"""
from decimal import Decimal

import pytest

from rebase_ledger import (
    RebasingLedger, WrapperLedger, ConversionEngine, SCALE,
    format_units, format_cents, dollars_to_cents,
    value_cents, wrapped_value_cents, balance_report,
)


class TestFormatUnits:

    def test_whole_and_fraction(self):
        assert format_units(10_300_000) == "10.300000"

    def test_zero(self):
        assert format_units(0) == "0.000000"

    def test_sub_unit(self):
        assert format_units(7) == "0.000007"

    def test_negative(self):
        assert format_units(-1_500_000) == "-1.500000"


class TestFormatCents:

    def test_thousands_separator(self):
        assert format_cents(1_545_000) == "$15,450.00"

    def test_small(self):
        assert format_cents(5) == "$0.05"

    def test_negative(self):
        assert format_cents(-12_345) == "-$123.45"


class TestDollarsToCents:

    @pytest.mark.parametrize("text,cents", [
        ("$1,234.50", 123_450),
        ("100", 10_000),
        ("  $1.5 ", 150),
        ("0.005", 0),     # half-even rounds down to 0
        ("0.015", 2),     # half-even rounds up to 2
        ("-2.25", -225),
    ])
    def test_strings(self, text, cents):
        assert dollars_to_cents(text) == cents

    def test_numbers(self):
        assert dollars_to_cents(3) == 300
        assert dollars_to_cents(Decimal("1.50")) == 150
        assert dollars_to_cents(0.1) == 10

    @pytest.mark.parametrize("bad", ["abc", "", "$", "1.2.3", "NaN", "Infinity"])
    def test_malformed_rejected(self, bad):
        with pytest.raises(ValueError):
            dollars_to_cents(bad)

    def test_non_finite_float_rejected(self):
        with pytest.raises(ValueError):
            dollars_to_cents(float("inf"))

    @pytest.mark.parametrize("bad", [True, None, [1]])
    def test_unsupported_type(self, bad):
        with pytest.raises(TypeError):
            dollars_to_cents(bad)


class TestValues:

    def test_value_cents(self):
        assert value_cents(10_300_000, 5000) == 51_500

    def test_value_truncates(self):
        assert value_cents(1, 5000) == 0

    def test_wrapped_value_cents(self):
        assert wrapped_value_cents(4_000_000, 5000, 2_060_000) == 41_200


class TestBalanceReport:

    def test_report_lines(self):
        engine = ConversionEngine(
            RebasingLedger("TSLA", verbose=False),
            WrapperLedger("TSLA", contract_addresses=["0xC"], verbose=False),
        )
        engine.mint("0xU", 10)
        engine.interact("0xU", "0xC", 5 * SCALE)

        assert balance_report(engine.ledger, engine.wrapper, "0xU", "0xC") == [
            "Share price: $100.00",
            "TSLA balance of 0xU: 5.000000 tokens ($500.00)",
            "TSLA balance in wrapper: 5.000000 tokens ($500.00)",
            "owTSLA balance of 0xC: 5.000000 tokens ($500.00)",
            "Exchange rate: 1.000000",
        ]
