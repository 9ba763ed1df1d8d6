#!/usr/bin/env python3
"""
demo.py - Walkthrough: a Rebasing Stock and its Wrapped Token

Follows one shareholder and one contract through the life of a stock token:

  1: Mint          - 10 TSLA shares issued to 0xREECE
  2: Auto-wrap     - 5 shares sent to a contract arrive as owTSLA
  3: Split         - 2:1 split, then the explicit exchange-rate refresh
  4: Dividend      - $1.50 cash dividend reinvested as shares
  5: Claim         - the contract's owTSLA unwrapped back to 0xREECE

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from rebase_ledger import (
    RebasingLedger, WrapperLedger, ConversionEngine,
    Split, CashDividend, Dividend,
    SCALE,
    balance_report, dollars_to_cents, format_cents, format_units,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass(frozen=True)
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    ticker: str = "TSLA"
    user: str = "0xREECE"
    contract: str = "0xCONTRACT"
    initial_price: str = "$100.00"

    minted_shares: int = 10
    wrapped_shares: int = 5
    split_multiplier: int = 2
    dividend: str = "$1.50"
    claim_shares: int = 1


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}\n")


def show(engine: ConversionEngine):
    print()
    for line in balance_report(engine.ledger, engine.wrapper, CONFIG.user, CONFIG.contract):
        print(line)


# ============================================================================
# STEPS
# ============================================================================

def step_1_mint() -> ConversionEngine:
    step_header(1, "Mint")
    stock = RebasingLedger(CONFIG.ticker, share_price_cents=dollars_to_cents(CONFIG.initial_price))
    wrapped = WrapperLedger(CONFIG.ticker, contract_addresses=[CONFIG.contract])
    engine = ConversionEngine(stock, wrapped)

    engine.mint(CONFIG.user, CONFIG.minted_shares)
    show(engine)
    return engine


def step_2_auto_wrap(engine: ConversionEngine):
    step_header(2, "Auto-wrap on transfer to a contract")
    receipt = engine.interact(CONFIG.user, CONFIG.contract, CONFIG.wrapped_shares * SCALE)
    print(f"{receipt.dest} received {format_units(receipt.amount)} {receipt.symbol}")
    show(engine)


def step_3_split(engine: ConversionEngine):
    step_header(3, f"{CONFIG.split_multiplier}:1 stock split")
    engine.apply_corporate_action(Split(CONFIG.split_multiplier))
    print(f"Rate before refresh (stale): {format_units(engine.exchange_rate)}")
    engine.update_exchange_rate()
    show(engine)


def step_4_dividend(engine: ConversionEngine):
    step_header(4, f"{CONFIG.dividend} cash dividend")
    price = engine.ledger.share_price_cents
    dividend = Dividend(cash_amount_cents=dollars_to_cents(CONFIG.dividend), share_price_cents=price)
    distribution = engine.rebase(CashDividend(dividend))
    print(
        f"{format_cents(dividend.cash_amount_cents)} at {format_cents(price)} = "
        f"{format_units(distribution.share_ratio)} shares per share"
    )
    show(engine)


def step_5_claim(engine: ConversionEngine):
    step_header(5, "Claim from the contract")
    result = engine.claim(CONFIG.contract, CONFIG.user, CONFIG.claim_shares * SCALE)
    print(
        f"Claimed {format_units(result.wrapped_amount)} {engine.wrapper.symbol} -> "
        f"{format_units(result.underlying_amount)} {engine.ledger.symbol} "
        f"at rate {format_units(result.exchange_rate)}"
    )
    show(engine)

    check = engine.ledger.verify_supply()
    print(f"\nSupply check: {'OK' if check['valid'] else 'MISMATCH'} "
          f"({format_units(check['total_supply'])} {engine.ledger.symbol})")


def main():
    """Run the complete walkthrough."""
    engine = step_1_mint()
    wait_for_enter()
    step_2_auto_wrap(engine)
    wait_for_enter()
    step_3_split(engine)
    wait_for_enter()
    step_4_dividend(engine)
    wait_for_enter()
    step_5_claim(engine)


if __name__ == "__main__":
    main()
