"""
wrapper.py - Non-Rebasing Wrapper Ledger

A WrapperLedger issues a wrapped token whose balances never change on a
corporate action. The value accrues to the exchange rate instead:

    exchange_rate = custody_balance * SCALE / wrapped_total_supply

where custody_balance is the underlying RebasingLedger balance held at the
wrapper's custody address. The rate starts at SCALE (1:1) and is recomputed
only when update_exchange_rate() is called.

Contract addresses are registered explicitly. A primary-token transfer to a
registered contract is auto-wrapped (see conversion.interact), and only
contract balances can be claimed back to end users (see conversion.claim).
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Set, TYPE_CHECKING

from .core import (
    Address, BalanceMap,
    SCALE,
    InsufficientBalanceError, InvalidOperationError, LedgerArithmeticError,
    scale_multiply_divide, validate_address, validate_amount,
)

if TYPE_CHECKING:
    from .rebasing import RebasingLedger


class WrapperLedger:
    """
    Wrapped-token ledger backed by a custody balance in a RebasingLedger.

    The WrapperLedger owns wrapped balances, wrapped supply and the exchange
    rate. It does not own the custody balance; it only reads it when the
    rate is recomputed.

    IMPORTANT: the rate is never refreshed implicitly. After any corporate
    action on the underlying ledger, call update_exchange_rate() (or use
    ConversionEngine.rebase) or later conversions run at the stale rate.

    Example:
        tsla = RebasingLedger("TSLA")
        ow = WrapperLedger("TSLA", contract_addresses=["0xCONTRACT"])
        ow.symbol            # "owTSLA"
        ow.custody_address   # "owTSLA"
        ow.exchange_rate     # 1_000_000
    """

    def __init__(
        self,
        underlying_symbol: str,
        symbol: Optional[str] = None,
        custody_address: Optional[Address] = None,
        contract_addresses: Iterable[Address] = (),
        verbose: bool = True,
    ):
        """
        Create an empty wrapper.

        Args:
            underlying_symbol: Symbol of the RebasingLedger being wrapped
            symbol: Wrapped token symbol (default: "ow" + underlying_symbol)
            custody_address: Underlying-ledger account holding the collateral
                (default: the wrapped symbol)
            contract_addresses: Addresses treated as contracts
            verbose: Print a line for every applied operation (default: True)
        """
        if not underlying_symbol or not underlying_symbol.strip():
            raise InvalidOperationError("Underlying symbol cannot be empty")
        self.underlying_symbol = underlying_symbol
        self.symbol = symbol or f"ow{underlying_symbol}"
        self.custody_address: Address = self.symbol if custody_address is None else custody_address
        validate_address(self.custody_address)
        self.contract_addresses: Set[Address] = set()
        self.balances: BalanceMap = {}
        self.total_supply: int = 0
        self.exchange_rate: int = SCALE
        self.verbose = verbose

        for address in contract_addresses:
            self.register_contract(address)

    # ========================================================================
    # READS
    # ========================================================================

    def balance_of(self, address: Address) -> int:
        """Return the wrapped balance of an address (0 if never credited)."""
        return self.balances.get(address, 0)

    def is_contract(self, address: Address) -> bool:
        return address in self.contract_addresses

    def holders(self) -> List[Address]:
        return sorted(self.balances)

    def to_wrapped(self, underlying_amount: int) -> int:
        """Quote the wrapped amount for underlying units at the current rate."""
        validate_amount(underlying_amount)
        return scale_multiply_divide(underlying_amount, SCALE, self.exchange_rate)

    def to_underlying(self, wrapped_amount: int) -> int:
        """Quote the underlying units for a wrapped amount at the current rate."""
        validate_amount(wrapped_amount)
        return scale_multiply_divide(wrapped_amount, self.exchange_rate, SCALE)

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def register_contract(self, address: Address) -> None:
        """
        Register a contract address.

        Raises:
            InvalidOperationError: If address is the custody address
        """
        validate_address(address)
        if address == self.custody_address:
            raise InvalidOperationError(
                f"{address} is the {self.symbol} custody address and cannot be a contract"
            )
        self.contract_addresses.add(address)

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def transfer(self, source: Address, dest: Address, amount: int) -> None:
        """
        Move wrapped units between two addresses.

        Raises:
            InsufficientBalanceError: If source holds less than amount
        """
        validate_address(source)
        validate_address(dest)
        validate_amount(amount)
        self.check_balance(source, amount)

        self._debit(source, amount)
        self._credit(dest, amount)
        if self.verbose:
            print(f"Transferred {amount} raw {self.symbol}: {source} -> {dest}")

    def update_exchange_rate(self, ledger: 'RebasingLedger') -> int:
        """
        Recompute the exchange rate from the custody balance.

        With zero wrapped supply the rate is left as is; nothing is
        outstanding, so there is nothing to price.

        Args:
            ledger: The underlying RebasingLedger holding the custody balance

        Returns:
            The exchange rate in effect after the call

        Raises:
            LedgerArithmeticError: If the custody balance is too small to
                yield a positive rate (the rate is left unchanged)
        """
        if ledger.symbol != self.underlying_symbol:
            raise InvalidOperationError(
                f"{self.symbol} wraps {self.underlying_symbol}, not {ledger.symbol}"
            )
        if self.total_supply == 0:
            return self.exchange_rate

        custody_balance = ledger.balance_of(self.custody_address)
        new_rate = scale_multiply_divide(custody_balance, SCALE, self.total_supply)
        if new_rate <= 0:
            raise LedgerArithmeticError(
                f"{self.symbol} exchange rate would be zero: custody holds "
                f"{custody_balance} against {self.total_supply} wrapped"
            )

        old_rate = self.exchange_rate
        self.exchange_rate = new_rate
        if self.verbose:
            print(f"{self.symbol} exchange rate {old_rate} -> {new_rate}")
        return new_rate

    def check_balance(self, address: Address, amount: int) -> None:
        """Raise InsufficientBalanceError if address cannot cover amount."""
        available = self.balance_of(address)
        if available < amount:
            raise InsufficientBalanceError(
                f"Insufficient {self.symbol} balance for {address}: {available} < {amount}"
            )

    def _credit(self, address: Address, amount: int) -> None:
        self.balances[address] = self.balances.get(address, 0) + amount

    def _debit(self, address: Address, amount: int) -> None:
        self.balances[address] = self.balances.get(address, 0) - amount

    def _mint(self, address: Address, amount: int) -> None:
        self._credit(address, amount)
        self.total_supply += amount

    def _burn(self, address: Address, amount: int) -> None:
        self._debit(address, amount)
        self.total_supply -= amount

    def __repr__(self) -> str:
        return (
            f"WrapperLedger({self.symbol}, supply={self.total_supply}, "
            f"rate={self.exchange_rate}, custody={self.custody_address})"
        )
