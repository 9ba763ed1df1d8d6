"""
actions.py - Corporate Action Math

=== SPLIT MODEL ===

A Split has:
    multiplier: int   - 2 for a 2-for-1 split

Every balance becomes balance * multiplier. The multiplier is an integer
count, so there is no rounding: each holder's raw balance scales exactly.

=== CASH DIVIDEND MODEL ===

A Dividend has:
    cash_amount_cents: int   - dividend per share
    share_price_cents: int   - reinvestment price

The dividend is paid in shares, not cash:
    share_ratio     = floor(SCALE * cash / price)
    dividend_shares = floor(balance * share_ratio / SCALE)   (per holder)

Each holder's award is truncated independently. The remainders are credited
to nobody, so the distribution leaks less than one raw unit per holder. The
leak is reported as `unallocated` so callers can reconcile it.

=== PURE FUNCTIONS ===

    compute_split(balances, multiplier) -> [SplitAdjustment, ...]
    compute_dividend_distribution(balances, dividend) -> DividendDistribution

Both take a read-only balance mapping and return a description of the change.
RebasingLedger applies the result; nothing here mutates state.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from .core import (
    SCALE, Address, Dividend,
    InvalidOperationError,
    scale_multiply_divide,
)


@dataclass(frozen=True, slots=True)
class SplitAdjustment:
    """Instruction to rescale one balance for a split."""
    address: Address
    old_balance: int
    new_balance: int

    @property
    def adjustment(self) -> int:
        return self.new_balance - self.old_balance


@dataclass(frozen=True, slots=True)
class DividendDistribution:
    """
    Result of distributing a cash dividend as shares.

    Attributes:
        share_ratio: Raw-unit shares awarded per whole share held
        awards: {address: dividend shares in raw units}, one entry per holder
        total_awarded: Sum of awards (the amount total supply grows by)
        unallocated: Raw units lost to per-holder truncation, measured against
            distributing the pooled balance in one step. Always
            0 <= unallocated < number of holders.
    """
    share_ratio: int
    awards: Dict[Address, int] = field(default_factory=dict)
    total_awarded: int = 0
    unallocated: int = 0


# =============================================================================
# PURE FUNCTIONS
# =============================================================================

def compute_split(balances: Mapping[Address, int], multiplier: int) -> List[SplitAdjustment]:
    """
    Compute every balance after a split. Pure function.

    Args:
        balances: Current balances {address: raw units}
        multiplier: Positive integer split factor

    Returns:
        One SplitAdjustment per existing balance entry, sorted by address.
        Zero balances are included so the result mirrors the ledger's keys.

    Example (2-for-1 split):
        alice 5_000_000 -> 10_000_000
        bob     250_000 ->    500_000
    """
    if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier <= 0:
        raise InvalidOperationError(f"Split multiplier must be a positive int, got {multiplier!r}")

    return [
        SplitAdjustment(address=address, old_balance=balance, new_balance=balance * multiplier)
        for address, balance in sorted(balances.items())
    ]


def compute_dividend_distribution(
    balances: Mapping[Address, int],
    dividend: Dividend,
) -> DividendDistribution:
    """
    Compute dividend shares for every holder. Pure function.

    Args:
        balances: Current balances {address: raw units}
        dividend: Cash amount and reinvestment price, both in cents

    Returns:
        DividendDistribution with per-holder awards and the truncation leak

    Raises:
        LedgerArithmeticError: If dividend.share_price_cents is not positive

    Example ($1.50 at $50.00, ratio 0.03):
        alice 10_000_000 -> award 300_000
        bob          333 -> award       9  (9.99 truncated)
    """
    share_ratio = dividend.share_ratio()

    awards: Dict[Address, int] = {}
    for address, balance in sorted(balances.items()):
        awards[address] = scale_multiply_divide(balance, share_ratio, SCALE)

    total_awarded = sum(awards.values())
    pooled = scale_multiply_divide(sum(balances.values()), share_ratio, SCALE)

    return DividendDistribution(
        share_ratio=share_ratio,
        awards=awards,
        total_awarded=total_awarded,
        unallocated=pooled - total_awarded,
    )
