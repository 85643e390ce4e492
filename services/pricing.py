"""
services/pricing.py
Pricing adapter between market-level values and the LMSR engine.

Maps a market's outstanding quantities and liquidity onto core/lmsr.py and
packages the results as records the caller can store next to a bet. The
LMSR math itself stays in core/lmsr.py; this module only composes it.
"""

import logging
import math

from core.errors import InvalidLiquidity
from core.lmsr import LMSR, BetSimulation, MarketState
from domain.models import Outcome, OutcomeQuantities, TradeExecution

logger = logging.getLogger(__name__)


def validate_liquidity(liquidity: float) -> float:
    """
    Market-creation check for the liquidity parameter.

    Unlike LMSR construction, this never substitutes a default: a market
    must not be created with a liquidity the engine would silently replace.
    """
    if liquidity is None or not math.isfinite(liquidity) or liquidity <= 0:
        raise InvalidLiquidity(liquidity)
    return float(liquidity)


def market_maker(liquidity: float | None) -> LMSR:
    """Build an LMSR engine for a market, honouring the configured strictness."""
    return LMSR(liquidity)


def quote(quantities: OutcomeQuantities, liquidity: float, total_volume: float = 0.0) -> MarketState:
    """Current prices for a market."""
    return market_maker(liquidity).market_state(quantities.q_yes, quantities.q_no, total_volume)


def preview_bet(
    quantities: OutcomeQuantities,
    liquidity: float,
    amount: float,
    outcome: Outcome | str,
) -> BetSimulation:
    """Read-only preview of spending `amount` on `outcome`."""
    return market_maker(liquidity).simulate_bet(quantities.q_yes, quantities.q_no, amount, outcome)


def execute_buy(
    quantities: OutcomeQuantities,
    liquidity: float,
    amount: float,
    outcome: Outcome | str,
) -> TradeExecution:
    """
    Spend `amount` currency on `outcome`.

    Returns the shares issued, the exact cost of those shares and the new
    quantity pair. The caller persists all three in one transaction.
    """
    outcome = Outcome.parse(outcome)
    lmsr = market_maker(liquidity)

    shares = lmsr.shares_for_cost(quantities.q_yes, quantities.q_no, amount, outcome)
    cost = lmsr.cost_to_buy(quantities.q_yes, quantities.q_no, shares, outcome) if shares > 0 else 0.0
    price_yes_before = lmsr.price_yes(quantities.q_yes, quantities.q_no)
    after = quantities.with_shares(outcome, shares)
    price_yes_after = lmsr.price_yes(after.q_yes, after.q_no)

    logger.info(
        "Buy %s: amount=%.4f shares=%.4f cost=%.4f price_yes %.4f -> %.4f",
        outcome.value, amount, shares, cost, price_yes_before, price_yes_after,
    )

    return TradeExecution(
        outcome=outcome,
        shares=shares,
        cost=cost,
        average_price=cost / shares if shares > 0 else 0.0,
        quantities_before=quantities,
        quantities_after=after,
        price_yes_before=price_yes_before,
        price_yes_after=price_yes_after,
        price_no_after=1.0 - price_yes_after,
    )


def execute_sell(
    quantities: OutcomeQuantities,
    liquidity: float,
    shares: float,
    outcome: Outcome | str,
) -> TradeExecution:
    """
    Return `shares` of `outcome` to the market maker.

    `cost` on the result is the proceeds paid out to the seller.
    """
    outcome = Outcome.parse(outcome)
    if shares < 0:
        raise ValueError(f"shares must be non-negative, got {shares}")

    outstanding = quantities.get(outcome)
    if shares > outstanding:
        logger.warning(
            "Sell of %.4f %s shares exceeds %.4f outstanding",
            shares, outcome.value, outstanding,
        )
        raise ValueError(
            f"Cannot sell {shares} {outcome.value} shares; only {outstanding} outstanding"
        )

    lmsr = market_maker(liquidity)
    proceeds = lmsr.cost_to_sell(quantities.q_yes, quantities.q_no, shares, outcome)
    after = quantities.with_shares(outcome, -shares)
    price_yes_after = lmsr.price_yes(after.q_yes, after.q_no)

    logger.info(
        "Sell %s: shares=%.4f proceeds=%.4f price_yes -> %.4f",
        outcome.value, shares, proceeds, price_yes_after,
    )

    return TradeExecution(
        outcome=outcome,
        shares=shares,
        cost=proceeds,
        average_price=proceeds / shares if shares > 0 else 0.0,
        quantities_before=quantities,
        quantities_after=after,
        price_yes_before=lmsr.price_yes(quantities.q_yes, quantities.q_no),
        price_yes_after=price_yes_after,
        price_no_after=1.0 - price_yes_after,
    )
