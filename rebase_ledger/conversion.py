"""
conversion.py - Moving Value Between a RebasingLedger and its WrapperLedger

Four operations cross the two ledgers:

    wrap      underlying(source) -> custody,  mint wrapped to source
    unwrap    burn wrapped(holder),           custody -> underlying(recipient)
    claim     unwrap from a contract address, clamped to what it holds
    interact  transfer that auto-wraps when the recipient is a contract

Conversion math (all through scale_multiply_divide, so all truncating):

    wrapped    = underlying * SCALE / exchange_rate
    underlying = wrapped * exchange_rate / SCALE

Truncation always favours the custody pool, so a wrap followed by an unwrap
never returns more underlying than went in.

Each operation checks every precondition on both ledgers before touching
either one. An exception therefore leaves both ledgers exactly as they were.

ConversionEngine binds one ledger pair behind a single lock for callers that
share the pair between threads.
"""

from __future__ import annotations
from dataclasses import dataclass
import threading
from typing import List, Optional, Union

from .core import (
    Address, CorporateAction,
    SCALE,
    InvalidOperationError,
    scale_multiply_divide, validate_address, validate_amount,
)
from .actions import SplitAdjustment, DividendDistribution
from .rebasing import RebasingLedger
from .wrapper import WrapperLedger


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True, slots=True)
class ClaimResult:
    """
    Outcome of a claim.

    Attributes:
        requested: Wrapped amount the caller asked for
        wrapped_amount: Wrapped amount actually burned (clamped to the balance)
        underlying_amount: Underlying units credited to the recipient
        exchange_rate: Rate used for the conversion
    """
    requested: int
    wrapped_amount: int
    underlying_amount: int
    exchange_rate: int

    @property
    def clamped(self) -> bool:
        return self.wrapped_amount < self.requested


@dataclass(frozen=True, slots=True)
class TransferReceipt:
    """
    Outcome of interact().

    Attributes:
        dest: Recipient address
        symbol: Symbol of the ledger that credited dest
        amount: Raw units credited to dest in that ledger
        auto_wrapped: True if the transfer went through the wrapper
    """
    dest: Address
    symbol: str
    amount: int
    auto_wrapped: bool


# ============================================================================
# VALIDATION
# ============================================================================

def _check_pair(ledger: RebasingLedger, wrapper: WrapperLedger) -> None:
    """
    Check that wrapper wraps ledger and reserve the custody address.

    Every conversion passes through here before custody is first credited,
    so the collateral is protected whether or not a ConversionEngine is used.
    """
    if ledger.symbol != wrapper.underlying_symbol:
        raise InvalidOperationError(
            f"{wrapper.symbol} wraps {wrapper.underlying_symbol}, not {ledger.symbol}"
        )
    ledger.reserve_address(wrapper.custody_address)


# ============================================================================
# OPERATIONS
# ============================================================================

def wrap(ledger: RebasingLedger, wrapper: WrapperLedger, source: Address, amount: int) -> int:
    """
    Convert underlying units held by source into wrapped units.

    Args:
        ledger: Underlying ledger
        wrapper: Wrapper ledger
        source: Address wrapping its balance
        amount: Underlying raw units to wrap

    Returns:
        Wrapped raw units minted to source

    Raises:
        InsufficientBalanceError: If source holds less than amount
        InvalidOperationError: If a positive amount would wrap to zero
    """
    _check_pair(ledger, wrapper)
    validate_address(source)
    validate_amount(amount)
    if source == wrapper.custody_address:
        raise InvalidOperationError(f"Custody address {source} cannot wrap")
    ledger.check_balance(source, amount)

    wrapped_amount = scale_multiply_divide(amount, SCALE, wrapper.exchange_rate)
    if amount > 0 and wrapped_amount == 0:
        raise InvalidOperationError(
            f"{amount} raw {ledger.symbol} is worth less than one raw {wrapper.symbol} "
            f"at rate {wrapper.exchange_rate}"
        )

    ledger._move(source, wrapper.custody_address, amount)
    wrapper._mint(source, wrapped_amount)

    if wrapper.verbose:
        print(
            f"Wrapped {amount} raw {ledger.symbol} -> {wrapped_amount} raw {wrapper.symbol} "
            f"for {source} at rate {wrapper.exchange_rate}"
        )
    return wrapped_amount


def unwrap(
    ledger: RebasingLedger,
    wrapper: WrapperLedger,
    holder: Address,
    wrapped_amount: int,
    recipient: Optional[Address] = None,
) -> int:
    """
    Burn wrapped units and release the underlying from custody.

    Args:
        ledger: Underlying ledger
        wrapper: Wrapper ledger
        holder: Address whose wrapped units are burned
        wrapped_amount: Wrapped raw units to burn
        recipient: Address credited with the underlying (default: holder)

    Returns:
        Underlying raw units credited to recipient

    Raises:
        InsufficientBalanceError: If holder holds less than wrapped_amount, or
            custody cannot cover the underlying at the current rate
    """
    _check_pair(ledger, wrapper)
    recipient = holder if recipient is None else recipient
    validate_address(holder)
    validate_address(recipient)
    validate_amount(wrapped_amount)
    wrapper.check_balance(holder, wrapped_amount)

    underlying_amount = scale_multiply_divide(wrapped_amount, wrapper.exchange_rate, SCALE)
    # Only reachable with a stale rate set above what custody now holds.
    ledger.check_balance(wrapper.custody_address, underlying_amount)

    wrapper._burn(holder, wrapped_amount)
    ledger._move(wrapper.custody_address, recipient, underlying_amount)

    if wrapper.verbose:
        print(
            f"Unwrapped {wrapped_amount} raw {wrapper.symbol} from {holder} -> "
            f"{underlying_amount} raw {ledger.symbol} to {recipient} at rate {wrapper.exchange_rate}"
        )
    return underlying_amount


def claim(
    ledger: RebasingLedger,
    wrapper: WrapperLedger,
    source: Address,
    recipient: Address,
    requested: int,
) -> ClaimResult:
    """
    Unwrap wrapped units held by a contract directly to a recipient.

    A request larger than the contract's wrapped balance is clamped to that
    balance rather than rejected: the recipient gets whatever is available.

    Args:
        ledger: Underlying ledger
        wrapper: Wrapper ledger
        source: Registered contract address holding the wrapped units
        recipient: Address credited with the underlying
        requested: Wrapped raw units asked for

    Returns:
        ClaimResult with the clamped amount and the underlying paid out

    Raises:
        InvalidOperationError: If source is not a registered contract
    """
    _check_pair(ledger, wrapper)
    validate_address(source)
    validate_amount(requested, "requested")
    if not wrapper.is_contract(source):
        raise InvalidOperationError(
            f"Can only claim from {wrapper.symbol} contract addresses, not {source}"
        )

    available = wrapper.balance_of(source)
    wrapped_amount = requested
    if requested > available:
        if wrapper.verbose:
            print(
                f"Claim of {requested} raw {wrapper.symbol} exceeds {source} balance; "
                f"clamping to {available}"
            )
        wrapped_amount = available

    rate = wrapper.exchange_rate
    underlying_amount = unwrap(ledger, wrapper, source, wrapped_amount, recipient=recipient)
    return ClaimResult(
        requested=requested,
        wrapped_amount=wrapped_amount,
        underlying_amount=underlying_amount,
        exchange_rate=rate,
    )


def interact(
    ledger: RebasingLedger,
    wrapper: WrapperLedger,
    source: Address,
    dest: Address,
    amount: int,
) -> TransferReceipt:
    """
    Send underlying units to dest, auto-wrapping if dest is a contract.

    For a contract recipient the underlying is wrapped for source and the
    freshly minted wrapped units are moved to dest in the wrapper. Any other
    recipient gets an ordinary RebasingLedger transfer.

    Raises:
        InsufficientBalanceError: If source holds less than amount
        InvalidOperationError: As for wrap() and RebasingLedger.transfer()
    """
    _check_pair(ledger, wrapper)
    validate_address(dest)

    if not wrapper.is_contract(dest):
        ledger.transfer(source, dest, amount)
        return TransferReceipt(dest=dest, symbol=ledger.symbol, amount=amount, auto_wrapped=False)

    if ledger.verbose:
        print(f"{dest} is a {wrapper.symbol} contract; auto-wrapping {amount} raw {ledger.symbol}")
    wrapped_amount = wrap(ledger, wrapper, source, amount)
    # source was just credited wrapped_amount, so this cannot fail
    wrapper.transfer(source, dest, wrapped_amount)
    return TransferReceipt(dest=dest, symbol=wrapper.symbol, amount=wrapped_amount, auto_wrapped=True)


# ============================================================================
# ENGINE
# ============================================================================

class ConversionEngine:
    """
    A RebasingLedger and its WrapperLedger behind one lock.

    Every method holds the same re-entrant lock, so no caller can observe an
    intermediate state such as a rebased custody balance with the old rate
    (when the action and the rate update go through rebase()).

    The custody address is reserved in the underlying ledger on construction
    (the bare conversion functions reserve it on first use): from then on it
    can only be debited by unwrap/claim, and cannot be minted to.

    Example:
        engine = ConversionEngine(
            RebasingLedger("TSLA", verbose=False),
            WrapperLedger("TSLA", contract_addresses=["0xCONTRACT"], verbose=False),
        )
        engine.mint("0xREECE", 10)
        engine.interact("0xREECE", "0xCONTRACT", 5 * SCALE)
        engine.rebase(Split(2))
        engine.claim("0xCONTRACT", "0xREECE", SCALE)
    """

    def __init__(self, ledger: RebasingLedger, wrapper: WrapperLedger):
        _check_pair(ledger, wrapper)
        self.ledger = ledger
        self.wrapper = wrapper
        self._lock = threading.RLock()

    @property
    def exchange_rate(self) -> int:
        with self._lock:
            return self.wrapper.exchange_rate

    @property
    def custody_balance(self) -> int:
        with self._lock:
            return self.ledger.balance_of(self.wrapper.custody_address)

    def mint(self, address: Address, share_count: int) -> int:
        with self._lock:
            return self.ledger.mint(address, share_count)

    def transfer(self, source: Address, dest: Address, amount: int) -> None:
        with self._lock:
            self.ledger.transfer(source, dest, amount)

    def transfer_wrapped(self, source: Address, dest: Address, amount: int) -> None:
        with self._lock:
            self.wrapper.transfer(source, dest, amount)

    def interact(self, source: Address, dest: Address, amount: int) -> TransferReceipt:
        with self._lock:
            return interact(self.ledger, self.wrapper, source, dest, amount)

    def wrap(self, source: Address, amount: int) -> int:
        with self._lock:
            return wrap(self.ledger, self.wrapper, source, amount)

    def unwrap(self, holder: Address, wrapped_amount: int, recipient: Optional[Address] = None) -> int:
        with self._lock:
            return unwrap(self.ledger, self.wrapper, holder, wrapped_amount, recipient)

    def claim(self, source: Address, recipient: Address, requested: int) -> ClaimResult:
        with self._lock:
            return claim(self.ledger, self.wrapper, source, recipient, requested)

    def apply_corporate_action(
        self, action: CorporateAction
    ) -> Union[List[SplitAdjustment], DividendDistribution]:
        """Apply an action to the underlying ledger only. The rate goes stale."""
        with self._lock:
            return self.ledger.apply_corporate_action(action)

    def update_exchange_rate(self) -> int:
        with self._lock:
            return self.wrapper.update_exchange_rate(self.ledger)

    def rebase(
        self, action: CorporateAction
    ) -> Union[List[SplitAdjustment], DividendDistribution]:
        """Apply an action and recompute the exchange rate as one step."""
        with self._lock:
            result = self.ledger.apply_corporate_action(action)
            self.wrapper.update_exchange_rate(self.ledger)
            return result
