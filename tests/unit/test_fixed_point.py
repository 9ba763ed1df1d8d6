"""
Tests for the fixed-point primitive and core value types.

Tests cover:
1. scale_multiply_divide truncation and exactness
2. Zero-denominator and type errors
3. Split / Dividend / CashDividend validation
4. Exception hierarchy
"""
import pytest

from rebase_ledger import (
    SCALE, scale_multiply_divide, to_raw_units,
    Split, Dividend, CashDividend,
    LedgerError, LedgerArithmeticError, InvalidOperationError,
    InsufficientBalanceError,
)


class TestScaleMultiplyDivide:

    def test_exact_product(self):
        assert scale_multiply_divide(5_000_000, SCALE, SCALE) == 5_000_000

    def test_truncates(self):
        # 10 * 2 / 3 = 6.67
        assert scale_multiply_divide(10, 2, 3) == 6

    def test_no_overflow_on_huge_intermediates(self):
        x = 2 ** 200
        assert scale_multiply_divide(x, 3 * SCALE, SCALE) == 3 * x

    def test_zero_numerator(self):
        assert scale_multiply_divide(123, 0, 7) == 0

    def test_zero_denominator_raises(self):
        with pytest.raises(LedgerArithmeticError):
            scale_multiply_divide(1, 1, 0)

    def test_zero_denominator_is_builtin_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            scale_multiply_divide(1, 1, 0)

    @pytest.mark.parametrize("bad", [1.5, "1", None, True])
    def test_non_int_rejected(self, bad):
        with pytest.raises(TypeError):
            scale_multiply_divide(bad, 1, 1)

    def test_to_raw_units(self):
        assert to_raw_units(10) == 10_000_000
        assert to_raw_units(0) == 0


class TestSplit:

    def test_valid(self):
        assert Split(2).multiplier == 2

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(InvalidOperationError):
            Split(bad)

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            Split(1.5)

    def test_immutable(self):
        split = Split(2)
        with pytest.raises(AttributeError):
            split.multiplier = 3


class TestDividend:

    def test_share_ratio(self):
        # $1.50 at $100.00 -> 0.015 shares per share
        assert Dividend(150, 10_000).share_ratio() == 15_000

    def test_share_ratio_truncates(self):
        # $1.00 at $3.00 -> 0.333333...
        assert Dividend(100, 300).share_ratio() == 333_333

    def test_zero_price_fails_on_use(self):
        div = Dividend(150, 0)
        with pytest.raises(LedgerArithmeticError):
            div.share_ratio()

    def test_negative_price_fails_on_use(self):
        with pytest.raises(LedgerArithmeticError):
            Dividend(150, -5).share_ratio()

    def test_negative_cash_rejected(self):
        with pytest.raises(InvalidOperationError):
            Dividend(-1, 100)

    def test_cash_dividend_wraps_dividend(self):
        div = Dividend(150, 5_000)
        assert CashDividend(div).dividend is div


class TestErrorHierarchy:

    @pytest.mark.parametrize("exc", [
        InsufficientBalanceError, LedgerArithmeticError, InvalidOperationError,
    ])
    def test_all_are_ledger_errors(self, exc):
        assert issubclass(exc, LedgerError)
