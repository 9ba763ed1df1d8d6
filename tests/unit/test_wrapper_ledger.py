"""
Tests for WrapperLedger.

Tests cover:
1. Construction defaults and contract registry
2. Wrapped transfers
3. Exchange-rate updates (no-op on zero supply, staleness, positivity)
4. Rate quotes
"""
import pytest

from rebase_ledger import (
    RebasingLedger, WrapperLedger, SCALE,
    Split, CashDividend, Dividend,
    InsufficientBalanceError, InvalidOperationError, LedgerArithmeticError,
)
from tests.helpers import USER, CONTRACT


class TestConstruction:

    def test_defaults(self):
        ow = WrapperLedger("TSLA", verbose=False)
        assert ow.symbol == "owTSLA"
        assert ow.custody_address == "owTSLA"
        assert ow.exchange_rate == SCALE
        assert ow.total_supply == 0
        assert ow.contract_addresses == set()

    def test_explicit_custody_and_contracts(self):
        ow = WrapperLedger(
            "TSLA", symbol="wTSLA", custody_address="vault",
            contract_addresses=["c1", "c2"], verbose=False,
        )
        assert ow.symbol == "wTSLA"
        assert ow.custody_address == "vault"
        assert ow.is_contract("c1") and ow.is_contract("c2")
        assert not ow.is_contract("vault")

    def test_empty_custody_rejected(self):
        with pytest.raises(InvalidOperationError):
            WrapperLedger("TSLA", custody_address="", verbose=False)

    def test_contract_recognition_is_exact(self, wrapper):
        # no prefix matching: look-alike user addresses are not contracts
        assert wrapper.is_contract(CONTRACT)
        assert not wrapper.is_contract(CONTRACT + "_USER")

    def test_register_contract(self, wrapper):
        wrapper.register_contract("0xPOOL")
        assert wrapper.is_contract("0xPOOL")

    def test_custody_cannot_be_contract(self, wrapper):
        with pytest.raises(InvalidOperationError):
            wrapper.register_contract(wrapper.custody_address)


class TestTransfer:

    def test_transfer(self, wrapper):
        wrapper._mint(USER, 3 * SCALE)
        wrapper.transfer(USER, CONTRACT, SCALE)
        assert wrapper.balance_of(USER) == 2 * SCALE
        assert wrapper.balance_of(CONTRACT) == SCALE
        assert wrapper.total_supply == 3 * SCALE

    def test_insufficient(self, wrapper):
        with pytest.raises(InsufficientBalanceError):
            wrapper.transfer(USER, CONTRACT, 1)
        assert wrapper.balances == {}


class TestUpdateExchangeRate:

    def test_zero_supply_is_noop(self, wrapper, funded_stock):
        funded_stock.transfer(USER, wrapper.custody_address, SCALE)
        assert wrapper.update_exchange_rate(funded_stock) == SCALE
        assert wrapper.exchange_rate == SCALE

    def test_rate_follows_custody(self, wrapped_engine):
        stock, ow = wrapped_engine.ledger, wrapped_engine.wrapper
        stock.apply_corporate_action(Split(2))
        assert ow.exchange_rate == SCALE  # stale until refreshed
        assert ow.update_exchange_rate(stock) == 2 * SCALE

    def test_rate_after_dividend(self, wrapped_engine):
        stock, ow = wrapped_engine.ledger, wrapped_engine.wrapper
        stock.apply_corporate_action(CashDividend(Dividend(150, 10_000)))
        # custody 5_000_000 -> 5_075_000 against 5_000_000 wrapped
        assert ow.update_exchange_rate(stock) == 1_015_000

    def test_zero_rate_rejected(self, wrapper, stock):
        wrapper._mint(USER, 10 * SCALE)
        with pytest.raises(LedgerArithmeticError):
            wrapper.update_exchange_rate(stock)
        assert wrapper.exchange_rate == SCALE

    def test_wrong_ledger_rejected(self, wrapper):
        with pytest.raises(InvalidOperationError):
            wrapper.update_exchange_rate(RebasingLedger("AAPL", verbose=False))


class TestQuotes:

    def test_quotes_at_par(self, wrapper):
        assert wrapper.to_wrapped(5 * SCALE) == 5 * SCALE
        assert wrapper.to_underlying(5 * SCALE) == 5 * SCALE

    def test_quotes_at_rate(self, wrapper):
        wrapper.exchange_rate = 2_060_000
        assert wrapper.to_underlying(SCALE) == 2_060_000
        # 1_000_000 / 2.06 = 485_436.89
        assert wrapper.to_wrapped(SCALE) == 485_436
