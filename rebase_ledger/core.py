"""
Core types and pure functions for the rebasing ledger system.

This module provides the foundational pieces every other module builds on:
1. Fixed-point arithmetic: SCALE and scale_multiply_divide
2. Exceptions: LedgerError and domain-specific error types
3. Immutable corporate-action values: Split, Dividend, CashDividend
4. Type aliases: Address, BalanceMap, CorporateAction
5. Validation helpers shared by the ledgers

All ledger math is integer math. Every derived quantity is computed through
scale_multiply_divide so that the rounding policy (truncation toward zero for
the non-negative values the ledgers hold) lives in exactly one place.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Union


# ============================================================================
# CONSTANTS
# ============================================================================

# Raw units per whole share. Balances, supplies and exchange rates are all
# expressed as integers in this scale.
SCALE = 1_000_000

# Number of decimal places implied by SCALE.
DECIMAL_PLACES = 6

# Reference share price used when a ledger is created without one ($100.00).
DEFAULT_SHARE_PRICE_CENTS = 10_000


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Opaque account identifier.
Address = str

# Mapping from address to raw-unit balance.
BalanceMap = Dict[Address, int]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class InsufficientBalanceError(LedgerError):
    """Raised when a debit would exceed the available balance."""
    pass


class LedgerArithmeticError(LedgerError, ArithmeticError):
    """Raised on a zero or invalid divisor (zero share price, zero exchange rate)."""
    pass


class InvalidOperationError(LedgerError):
    """Raised when a request is structurally invalid."""
    pass


# ============================================================================
# FIXED-POINT ARITHMETIC
# ============================================================================

def _require_int(name: str, value: int) -> None:
    # bool is an int subclass; a True/False operand is always a caller bug.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


def scale_multiply_divide(x: int, numerator: int, denominator: int) -> int:
    """
    Compute floor(x * numerator / denominator) with exact integer arithmetic.

    Python ints are unbounded, so the intermediate product never overflows.
    This is the single rounding primitive of the ledger: every derived
    amount (wrapped amounts, dividend shares, exchange rates) is expressed
    through it.

    Args:
        x: Value to scale
        numerator: Multiplier
        denominator: Divisor (must be non-zero)

    Returns:
        The floored quotient

    Raises:
        LedgerArithmeticError: If denominator is zero
        TypeError: If any operand is not an int
    """
    _require_int("x", x)
    _require_int("numerator", numerator)
    _require_int("denominator", denominator)
    if denominator == 0:
        raise LedgerArithmeticError(
            f"Division by zero in scale_multiply_divide({x}, {numerator}, 0)"
        )
    return (x * numerator) // denominator


def to_raw_units(shares: int) -> int:
    """Convert a whole-share count to raw units."""
    _require_int("shares", shares)
    return shares * SCALE


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def validate_address(address: Address) -> None:
    """Reject empty or non-string addresses."""
    if not isinstance(address, str) or not address.strip():
        raise InvalidOperationError(f"Address must be a non-empty string, got {address!r}")


def validate_amount(amount: int, what: str = "amount") -> None:
    """Reject non-integer or negative amounts."""
    _require_int(what, amount)
    if amount < 0:
        raise InvalidOperationError(f"{what} must be non-negative, got {amount}")


# ============================================================================
# CORPORATE ACTIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Split:
    """
    A forward stock split: every balance is multiplied by `multiplier`.

    The multiplier is an integer count, so the transform is exact.
    """
    multiplier: int

    def __post_init__(self):
        _require_int("multiplier", self.multiplier)
        if self.multiplier <= 0:
            raise InvalidOperationError(
                f"Split multiplier must be positive, got {self.multiplier}"
            )

    def __repr__(self) -> str:
        return f"Split({self.multiplier}:1)"


@dataclass(frozen=True, slots=True)
class Dividend:
    """
    A cash dividend, reinvested as shares at the given price.

    Attributes:
        cash_amount_cents: Dividend per share in cents (e.g., $1.50 = 150)
        share_price_cents: Reinvestment price per share in cents; must be
            positive when the dividend is applied
    """
    cash_amount_cents: int
    share_price_cents: int

    def __post_init__(self):
        _require_int("cash_amount_cents", self.cash_amount_cents)
        _require_int("share_price_cents", self.share_price_cents)
        if self.cash_amount_cents < 0:
            raise InvalidOperationError(
                f"Dividend cash amount must be non-negative, got {self.cash_amount_cents}"
            )

    def share_ratio(self) -> int:
        """
        Fractional shares received per share held, in raw units.

        A $1.50 dividend at $100.00 gives 0.015 shares per share, i.e. 15000.

        Raises:
            LedgerArithmeticError: If the share price is not positive
        """
        if self.share_price_cents <= 0:
            raise LedgerArithmeticError(
                f"Dividend share price must be positive, got {self.share_price_cents}"
            )
        return scale_multiply_divide(SCALE, self.cash_amount_cents, self.share_price_cents)


@dataclass(frozen=True, slots=True)
class CashDividend:
    """Corporate action wrapping a Dividend."""
    dividend: Dividend

    def __repr__(self) -> str:
        d = self.dividend
        return f"CashDividend({d.cash_amount_cents}c @ {d.share_price_cents}c)"


# Closed set of corporate actions. Adding a kind means adding a dataclass
# here and a branch in every dispatch site (RebasingLedger.apply_corporate_action).
CorporateAction = Union[Split, CashDividend]
