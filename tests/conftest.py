"""
conftest.py - Shared pytest fixtures for rebase_ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Empty and funded ledgers
- Wrapper ledgers with a registered contract
- A ConversionEngine over a funded pair
"""

import pytest

from rebase_ledger import (
    RebasingLedger, WrapperLedger, ConversionEngine,
    SCALE,
)

from tests.helpers import USER, OTHER, CONTRACT


# =============================================================================
# LEDGER FIXTURES
# =============================================================================

@pytest.fixture
def stock():
    """Empty TSLA ledger."""
    return RebasingLedger("TSLA", verbose=False)


@pytest.fixture
def funded_stock(stock):
    """TSLA ledger with 10 shares for USER and 4 for OTHER."""
    stock.mint(USER, 10)
    stock.mint(OTHER, 4)
    return stock


@pytest.fixture
def wrapper():
    """owTSLA wrapper with CONTRACT registered."""
    return WrapperLedger("TSLA", contract_addresses=[CONTRACT], verbose=False)


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def engine(funded_stock, wrapper):
    """ConversionEngine over the funded pair."""
    return ConversionEngine(funded_stock, wrapper)


@pytest.fixture
def wrapped_engine(engine):
    """Engine after USER auto-wrapped 5 shares into CONTRACT at 1:1."""
    engine.interact(USER, CONTRACT, 5 * SCALE)
    return engine
