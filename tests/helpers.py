"""
helpers.py - Test Helpers for rebase_ledger

Shared addresses and state-capture helpers used by fixtures and tests.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from rebase_ledger import RebasingLedger, WrapperLedger


USER = "0xREECE"
OTHER = "0xALICE"
CONTRACT = "0xCONTRACT"


def snapshot(ledger: RebasingLedger, wrapper: Optional[WrapperLedger] = None) -> Dict[str, Any]:
    """Capture every mutable field of a ledger pair for later comparison."""
    state = {
        "balances": dict(ledger.balances),
        "total_supply": ledger.total_supply,
        "rebase_multiplier": ledger.rebase_multiplier,
        "share_price_cents": ledger.share_price_cents,
        "action_log": list(ledger.action_log),
    }
    if wrapper is not None:
        state.update({
            "wrapped_balances": dict(wrapper.balances),
            "wrapped_supply": wrapper.total_supply,
            "exchange_rate": wrapper.exchange_rate,
        })
    return state


def nonzero(balances: Dict[str, int]) -> Dict[str, int]:
    """Drop zero entries; a zero balance is equivalent to an absent one."""
    return {a: b for a, b in balances.items() if b != 0}
