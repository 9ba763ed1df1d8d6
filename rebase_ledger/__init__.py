"""
rebase_ledger - Rebasing Share Ledger with a Non-Rebasing Wrapper

Fixed-point (10^6) integer ledgers for a rebasing equity token and the
wrapped token that tracks it through splits and cash dividends.

Usage:
    from rebase_ledger import (
        RebasingLedger, WrapperLedger, ConversionEngine,
        Split, CashDividend, Dividend, SCALE,
    )

    tsla = RebasingLedger("TSLA")
    ow = WrapperLedger("TSLA", contract_addresses=["0xCONTRACT"])
    engine = ConversionEngine(tsla, ow)

    engine.mint("0xREECE", 10)
    engine.interact("0xREECE", "0xCONTRACT", 5 * SCALE)   # auto-wraps

    # Corporate action, then the explicit rate refresh
    engine.apply_corporate_action(Split(2))
    engine.update_exchange_rate()

    engine.claim("0xCONTRACT", "0xREECE", 1 * SCALE)
"""

# Core types
from .core import (
    SCALE,
    DECIMAL_PLACES,
    DEFAULT_SHARE_PRICE_CENTS,
    Address,
    BalanceMap,
    LedgerError,
    InsufficientBalanceError,
    LedgerArithmeticError,
    InvalidOperationError,
    scale_multiply_divide,
    to_raw_units,
    Split,
    Dividend,
    CashDividend,
    CorporateAction,
)

# Corporate action math
from .actions import (
    SplitAdjustment,
    DividendDistribution,
    compute_split,
    compute_dividend_distribution,
)

# Ledgers
from .rebasing import RebasingLedger
from .wrapper import WrapperLedger

# Conversions
from .conversion import (
    ClaimResult,
    TransferReceipt,
    ConversionEngine,
    wrap,
    unwrap,
    claim,
    interact,
)

# Display adapters
from .display import (
    format_units,
    format_cents,
    dollars_to_cents,
    value_cents,
    wrapped_value_cents,
    balance_report,
)

__all__ = [
    # Core
    'SCALE', 'DECIMAL_PLACES', 'DEFAULT_SHARE_PRICE_CENTS',
    'Address', 'BalanceMap',
    'LedgerError', 'InsufficientBalanceError', 'LedgerArithmeticError',
    'InvalidOperationError',
    'scale_multiply_divide', 'to_raw_units',
    'Split', 'Dividend', 'CashDividend', 'CorporateAction',
    # Actions
    'SplitAdjustment', 'DividendDistribution',
    'compute_split', 'compute_dividend_distribution',
    # Ledgers
    'RebasingLedger', 'WrapperLedger',
    # Conversions
    'ClaimResult', 'TransferReceipt', 'ConversionEngine',
    'wrap', 'unwrap', 'claim', 'interact',
    # Display
    'format_units', 'format_cents', 'dollars_to_cents',
    'value_cents', 'wrapped_value_cents', 'balance_report',
]

__version__ = '1.0.0'
