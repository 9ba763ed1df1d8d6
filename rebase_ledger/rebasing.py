"""
rebasing.py - Rebasing Share Ledger

The RebasingLedger is the primary token: one raw-unit balance per address,
rescaled in place by corporate actions.

Key responsibilities:
    - Mints shares into balances and total supply
    - Moves balances between addresses (all-or-nothing)
    - Applies corporate actions (Split, CashDividend) to every balance
    - Keeps total_supply equal to the sum of balances after every operation
    - Protects reserved (custody) addresses from ordinary debits
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Set, TYPE_CHECKING, Union

from .core import (
    # Types
    Address, BalanceMap, CorporateAction, Split, CashDividend,
    # Constants
    SCALE, DEFAULT_SHARE_PRICE_CENTS,
    # Exceptions
    InsufficientBalanceError, InvalidOperationError,
    # Helpers
    to_raw_units, validate_address, validate_amount,
)
from .actions import (
    SplitAdjustment, DividendDistribution,
    compute_split, compute_dividend_distribution,
)

if TYPE_CHECKING:
    from .conversion import TransferReceipt
    from .wrapper import WrapperLedger


class RebasingLedger:
    """
    Rebasing equity ledger with integer fixed-point balances.

    Balances are raw units (1 share = SCALE). Corporate actions rewrite every
    balance in place; they do not touch any WrapperLedger. After an action
    that changes the custody balance, the wrapper's exchange rate is stale
    until WrapperLedger.update_exchange_rate() is called.

    Thread Safety:
        Not thread-safe. Use ConversionEngine to share a ledger pair
        between threads.

    Example:
        tsla = RebasingLedger("TSLA")
        tsla.mint("alice", 10)
        tsla.transfer("alice", "bob", 2 * SCALE)
        tsla.apply_corporate_action(Split(2))
        tsla.balance_of("bob")   # 4_000_000
    """

    def __init__(
        self,
        symbol: str,
        name: Optional[str] = None,
        share_price_cents: int = DEFAULT_SHARE_PRICE_CENTS,
        verbose: bool = True,
    ):
        """
        Create an empty ledger.

        Args:
            symbol: Ticker of the token (e.g., "TSLA")
            name: Human-readable name (default: symbol)
            share_price_cents: Reference price used by display adapters
            verbose: Print a line for every applied operation (default: True)
        """
        if not symbol or not symbol.strip():
            raise InvalidOperationError("Ledger symbol cannot be empty")
        validate_amount(share_price_cents, "share_price_cents")
        self.symbol = symbol
        self.name = name or symbol
        self.balances: BalanceMap = {}
        self.total_supply: int = 0
        self.rebase_multiplier: int = 1
        self.share_price_cents: int = share_price_cents
        self.reserved_addresses: Set[Address] = set()
        self.action_log: List[CorporateAction] = []
        self.verbose = verbose

    # ========================================================================
    # READS
    # ========================================================================

    def balance_of(self, address: Address) -> int:
        """Return the raw balance of an address (0 if never credited)."""
        return self.balances.get(address, 0)

    def positions(self) -> BalanceMap:
        """Return all non-zero balances."""
        return {a: b for a, b in self.balances.items() if b != 0}

    def holders(self) -> List[Address]:
        """Return every address with a balance entry, sorted."""
        return sorted(self.balances)

    def is_reserved(self, address: Address) -> bool:
        return address in self.reserved_addresses

    def verify_supply(self) -> Dict[str, Any]:
        """
        Check that total_supply equals the sum of all balances.

        Returns:
            Dict with keys:
            - 'valid': bool - True if the invariant holds
            - 'total_supply': int - Recorded supply
            - 'sum_of_balances': int - Sum over all entries
            - 'difference': int - total_supply - sum_of_balances
        """
        sum_of_balances = sum(self.balances[a] for a in sorted(self.balances))
        return {
            'valid': sum_of_balances == self.total_supply,
            'total_supply': self.total_supply,
            'sum_of_balances': sum_of_balances,
            'difference': self.total_supply - sum_of_balances,
        }

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def reserve_address(self, address: Address) -> None:
        """
        Mark an address as reserved.

        Reserved addresses can be credited by transfer but not minted to, and
        can only be debited by unwrap/claim. Used for wrapper custody accounts.
        """
        validate_address(address)
        self.reserved_addresses.add(address)

    def set_share_price(self, share_price_cents: int) -> None:
        """Update the reference share price (informational only)."""
        validate_amount(share_price_cents, "share_price_cents")
        self.share_price_cents = share_price_cents

    # ========================================================================
    # BALANCE OPERATIONS (Mutating)
    # ========================================================================

    def mint(self, address: Address, share_count: int) -> int:
        """
        Issue whole shares to an address.

        Args:
            address: Recipient
            share_count: Whole shares to issue (0 is a no-op)

        Returns:
            Raw units credited

        Raises:
            InvalidOperationError: If address is reserved
        """
        validate_address(address)
        validate_amount(share_count, "share_count")
        if self.is_reserved(address):
            raise InvalidOperationError(
                f"{address} is a reserved {self.symbol} address and cannot be minted to"
            )
        if share_count == 0:
            return 0

        amount = to_raw_units(share_count)
        self._credit(address, amount)
        self.total_supply += amount
        if self.verbose:
            print(f"Minted {share_count} {self.symbol} ({amount} raw) to {address}")
        return amount

    def transfer(self, source: Address, dest: Address, amount: int) -> None:
        """
        Move raw units between two addresses.

        Raises:
            InsufficientBalanceError: If source holds less than amount
            InvalidOperationError: If source is reserved or inputs are invalid
        """
        validate_address(source)
        validate_address(dest)
        validate_amount(amount)
        if self.is_reserved(source):
            raise InvalidOperationError(
                f"{source} is a reserved {self.symbol} address and cannot be debited by transfer"
            )
        self.check_balance(source, amount)

        self._move(source, dest, amount)
        if self.verbose:
            print(f"Transferred {amount} raw {self.symbol}: {source} -> {dest}")

    def interact(
        self,
        source: Address,
        dest: Address,
        amount: int,
        wrapper: 'WrapperLedger',
    ) -> 'TransferReceipt':
        """
        Transfer to any address, auto-wrapping when dest is a contract.

        If `wrapper` recognises `dest` as a contract address, `amount` is
        wrapped for `source` and the resulting wrapped tokens are sent to
        `dest`. Otherwise this is an ordinary transfer.

        This is the unlocked path: it does not take a ConversionEngine's
        lock. Use ConversionEngine.interact for a pair shared between threads.
        """
        from .conversion import interact
        return interact(self, wrapper, source, dest, amount)

    def check_balance(self, address: Address, amount: int) -> None:
        """Raise InsufficientBalanceError if address cannot cover amount."""
        available = self.balance_of(address)
        if available < amount:
            raise InsufficientBalanceError(
                f"Insufficient {self.symbol} balance for {address}: {available} < {amount}"
            )

    def _credit(self, address: Address, amount: int) -> None:
        self.balances[address] = self.balances.get(address, 0) + amount

    def _move(self, source: Address, dest: Address, amount: int) -> None:
        """
        Apply a validated move. Callers check the balance first.

        Both entries are written together; nothing between them can raise.
        """
        self.balances[source] = self.balances.get(source, 0) - amount
        self._credit(dest, amount)

    # ========================================================================
    # CORPORATE ACTIONS (Mutating)
    # ========================================================================

    def apply_corporate_action(
        self, action: CorporateAction
    ) -> Union[List[SplitAdjustment], DividendDistribution]:
        """
        Apply a Split or CashDividend to every balance.

        Returns:
            List[SplitAdjustment] for a Split,
            DividendDistribution for a CashDividend

        Raises:
            LedgerArithmeticError: If a dividend's share price is not positive
            InvalidOperationError: If action is not a known corporate action
        """
        if isinstance(action, Split):
            result = self._apply_split(action)
        elif isinstance(action, CashDividend):
            result = self._apply_dividend(action)
        else:
            raise InvalidOperationError(
                f"Unknown corporate action {type(action).__name__}"
            )
        self.action_log.append(action)
        return result

    def _apply_split(self, split: Split) -> List[SplitAdjustment]:
        adjustments = compute_split(self.balances, split.multiplier)

        for adj in adjustments:
            self.balances[adj.address] = adj.new_balance
        self.total_supply *= split.multiplier
        # Cumulative: a 2:1 followed by a 3:1 records 6.
        self.rebase_multiplier *= split.multiplier
        self.share_price_cents //= split.multiplier

        if self.verbose:
            print(
                f"Split {split.multiplier}:1 applied to {len(adjustments)} {self.symbol} "
                f"balances (cumulative multiplier {self.rebase_multiplier})"
            )
        return adjustments

    def _apply_dividend(self, action: CashDividend) -> DividendDistribution:
        # compute first: a zero share price raises before anything changes
        distribution = compute_dividend_distribution(self.balances, action.dividend)

        for address, award in distribution.awards.items():
            self.balances[address] += award
        self.total_supply += distribution.total_awarded

        if self.verbose:
            d = action.dividend
            print(
                f"Dividend {d.cash_amount_cents}c at {d.share_price_cents}c "
                f"(ratio {distribution.share_ratio}/{SCALE}): {distribution.total_awarded} raw "
                f"{self.symbol} awarded, {distribution.unallocated} raw unallocated"
            )
        return distribution

    def __repr__(self) -> str:
        return (
            f"RebasingLedger({self.symbol}, supply={self.total_supply}, "
            f"holders={len(self.balances)}, multiplier={self.rebase_multiplier})"
        )
