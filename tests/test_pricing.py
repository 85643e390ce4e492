"""
tests/test_pricing.py
Tests for the pricing adapter (market quantities <-> LMSR engine).
"""

import pytest

from core.errors import InvalidLiquidity, InvalidOutcome
from domain.models import Outcome, OutcomeQuantities
from services.pricing import (
    execute_buy,
    execute_sell,
    market_maker,
    preview_bet,
    quote,
    validate_liquidity,
)

EMPTY = OutcomeQuantities()


class TestValidateLiquidity:
    def test_accepts_positive(self):
        assert validate_liquidity(250) == 250.0

    @pytest.mark.parametrize("bad", [0, -1, float("nan"), float("inf"), None])
    def test_rejects_invalid(self, bad):
        with pytest.raises(InvalidLiquidity):
            validate_liquidity(bad)

    def test_market_maker_is_permissive_by_default(self):
        assert market_maker(0).b == 100.0

    def test_market_maker_honours_strict_setting(self, override_settings):
        override_settings(LMSR_STRICT_LIQUIDITY="true")
        with pytest.raises(InvalidLiquidity):
            market_maker(0)


class TestQuantities:
    def test_with_shares(self):
        after = EMPTY.with_shares("yes", 12.5)
        assert after == OutcomeQuantities(q_yes=12.5, q_no=0)
        assert EMPTY == OutcomeQuantities(q_yes=0, q_no=0)

    def test_invalid_outcome(self):
        with pytest.raises(InvalidOutcome):
            EMPTY.with_shares("draw", 1)


class TestQuoteAndPreview:
    def test_quote_empty_market(self):
        state = quote(EMPTY, 100, total_volume=0)
        assert state.price_yes == 0.5
        assert state.price_no == 0.5

    def test_preview_matches_engine(self):
        quantities = OutcomeQuantities(q_yes=20, q_no=5)
        sim = preview_bet(quantities, 100, 30, "no")
        assert sim == market_maker(100).simulate_bet(20, 5, 30, "no")


class TestExecuteBuy:
    def test_buy_updates_quantities(self):
        trade = execute_buy(EMPTY, 100, 50, "yes")
        assert trade.outcome is Outcome.YES
        assert trade.shares > 50
        assert trade.cost == pytest.approx(50, abs=1e-3)
        assert trade.quantities_before == EMPTY
        assert trade.quantities_after == OutcomeQuantities(q_yes=trade.shares, q_no=0)
        assert trade.price_yes_before == 0.5
        assert trade.price_yes_after > 0.5
        assert trade.price_yes_after + trade.price_no_after == pytest.approx(1.0)
        assert trade.average_price == pytest.approx(trade.cost / trade.shares)

    def test_zero_amount_buys_nothing(self):
        trade = execute_buy(EMPTY, 100, 0, "no")
        assert trade.shares == 0.0
        assert trade.cost == 0.0
        assert trade.average_price == 0.0
        assert trade.quantities_after == EMPTY

    def test_invalid_outcome(self):
        with pytest.raises(InvalidOutcome):
            execute_buy(EMPTY, 100, 10, "perhaps")


class TestExecuteSell:
    def test_sell_back_everything(self):
        bought = execute_buy(EMPTY, 100, 40, "no")
        sold = execute_sell(bought.quantities_after, 100, bought.shares, "no")
        assert sold.cost == pytest.approx(bought.cost, abs=1e-9)
        assert sold.quantities_after.q_no == pytest.approx(0.0, abs=1e-9)
        assert sold.price_yes_after == pytest.approx(0.5)

    def test_oversell_rejected(self):
        with pytest.raises(ValueError, match="outstanding"):
            execute_sell(OutcomeQuantities(q_yes=5, q_no=0), 100, 6, "yes")

    def test_negative_shares_rejected(self):
        with pytest.raises(ValueError):
            execute_sell(OutcomeQuantities(q_yes=5, q_no=0), 100, -1, "yes")
