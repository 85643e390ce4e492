"""
core/lmsr.py
Logarithmic Market Scoring Rule (LMSR) market maker for binary markets.

Hanson's LMSR gives:
  - bounded loss for the market maker: b * ln(2) for two outcomes
  - always-available liquidity
  - prices that read directly as probabilities

Every method is a pure read of the quantities passed in. Nothing here
mutates market state; callers persist trades and new quantities themselves.
"""

import logging
import math
from dataclasses import dataclass

from core.config import get_settings
from core.errors import InvalidLiquidity
from domain.models import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketState:
    """Snapshot of an LMSR market."""
    q_yes: float
    q_no: float
    price_yes: float
    price_no: float
    total_volume: float = 0.0


@dataclass(frozen=True)
class BetSimulation:
    """Read-only preview of spending `cost` on one outcome."""
    shares_received: float
    cost: float
    new_price_yes: float
    new_price_no: float
    price_impact: float        # Change in YES price caused by the bet
    average_price: float
    potential_payout: float    # Each share redeems for 1.0 if its outcome wins


def _is_valid_liquidity(liquidity: float | None) -> bool:
    return liquidity is not None and math.isfinite(liquidity) and liquidity > 0


class LMSR:
    """
    Binary LMSR market maker.

    Parameters
    ----------
    liquidity : float | None
        The liquidity parameter b. Higher b = more stable prices and a
        larger worst-case loss. Non-positive values are replaced with
        settings.LMSR_DEFAULT_LIQUIDITY unless strict mode is on.
    strict : bool | None
        Raise InvalidLiquidity instead of substituting the default.
        Defaults to settings.LMSR_STRICT_LIQUIDITY.
    max_iterations, tolerance, upper_bound_multiplier, max_bracket_doublings
        Bisection controls for shares_for_cost; default to settings.
    """

    def __init__(
        self,
        liquidity: float | None = None,
        *,
        strict: bool | None = None,
        max_iterations: int | None = None,
        tolerance: float | None = None,
        upper_bound_multiplier: float | None = None,
        max_bracket_doublings: int | None = None,
    ):
        settings = get_settings()
        if strict is None:
            strict = settings.LMSR_STRICT_LIQUIDITY

        if not _is_valid_liquidity(liquidity):
            if strict:
                raise InvalidLiquidity(liquidity)
            if liquidity is not None:
                logger.warning(
                    "Invalid liquidity %r, substituting default %.2f",
                    liquidity, settings.LMSR_DEFAULT_LIQUIDITY,
                )
            liquidity = settings.LMSR_DEFAULT_LIQUIDITY

        if max_iterations is None:
            max_iterations = settings.LMSR_BISECTION_MAX_ITERATIONS
        if tolerance is None:
            tolerance = settings.LMSR_BISECTION_TOLERANCE
        if upper_bound_multiplier is None:
            upper_bound_multiplier = settings.LMSR_UPPER_BOUND_MULTIPLIER
        if max_bracket_doublings is None:
            max_bracket_doublings = settings.LMSR_MAX_BRACKET_DOUBLINGS

        self.b = float(liquidity)
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.upper_bound_multiplier = upper_bound_multiplier
        self.max_bracket_doublings = max_bracket_doublings

    def __repr__(self) -> str:
        return f"LMSR(b={self.b})"

    # ------------------------------------------------------------------
    # Cost function and prices
    # ------------------------------------------------------------------

    def cost(self, q_yes: float, q_no: float) -> float:
        """
        C(q) = b * ln(exp(q_yes/b) + exp(q_no/b)).

        Log-sum-exp: factor out the larger quantity so the remaining
        exponent is <= 0 and never overflows.
        """
        max_q = max(q_yes, q_no)
        gap = abs(q_yes - q_no) / self.b
        return max_q + self.b * math.log1p(math.exp(-gap))

    def price_yes(self, q_yes: float, q_no: float) -> float:
        """Instantaneous YES price: dC/dq_yes = softmax(q/b)[yes]."""
        if q_yes >= q_no:
            return 1.0 / (1.0 + math.exp((q_no - q_yes) / self.b))
        exp_yes = math.exp((q_yes - q_no) / self.b)
        return exp_yes / (1.0 + exp_yes)

    def price_no(self, q_yes: float, q_no: float) -> float:
        return 1.0 - self.price_yes(q_yes, q_no)

    def price(self, outcome: Outcome | str, q_yes: float, q_no: float) -> float:
        """Current price (implied probability) of `outcome`."""
        if Outcome.parse(outcome) is Outcome.YES:
            return self.price_yes(q_yes, q_no)
        return self.price_no(q_yes, q_no)

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    def cost_to_buy(self, q_yes: float, q_no: float, shares: float, outcome: Outcome | str) -> float:
        """Currency paid to buy `shares` of `outcome`: C(q_new) - C(q)."""
        if Outcome.parse(outcome) is Outcome.YES:
            new_cost = self.cost(q_yes + shares, q_no)
        else:
            new_cost = self.cost(q_yes, q_no + shares)
        return new_cost - self.cost(q_yes, q_no)

    def cost_to_sell(self, q_yes: float, q_no: float, shares: float, outcome: Outcome | str) -> float:
        """Proceeds returned for selling `shares` of `outcome`."""
        return -self.cost_to_buy(q_yes, q_no, -shares, outcome)

    def shares_for_cost(self, q_yes: float, q_no: float, cost: float, outcome: Outcome | str) -> float:
        """
        Invert cost_to_buy: how many shares of `outcome` `cost` buys.

        Bisection over [0, upper_bound_multiplier * cost]. The upper bound
        doubles while its cost is still below the target, so cheap
        liquidity or a lopsided market still brackets the root. Stops once
        the bracket is narrower than `tolerance` shares.
        """
        outcome = Outcome.parse(outcome)
        if cost <= 0:
            return 0.0

        low = 0.0
        high = cost * self.upper_bound_multiplier
        doublings = 0
        while self.cost_to_buy(q_yes, q_no, high, outcome) < cost:
            if doublings >= self.max_bracket_doublings:
                logger.warning(
                    "shares_for_cost: bracket still below target after %d doublings "
                    "(b=%.4f, cost=%.4f), returning upper bound",
                    doublings, self.b, cost,
                )
                return high
            low = high
            high *= 2.0
            doublings += 1

        # Converge on bracket width, not cost residual: on the cheap side of
        # a market a tiny residual still hides a large share error.
        for _ in range(self.max_iterations):
            mid = (low + high) / 2.0
            if high - low < self.tolerance:
                return mid

            mid_cost = self.cost_to_buy(q_yes, q_no, mid, outcome)
            if mid_cost == cost:
                return mid
            if mid_cost < cost:
                low = mid
            else:
                high = mid

        logger.debug(
            "shares_for_cost: hit %d iterations (b=%.4f, cost=%.4f)",
            self.max_iterations, self.b, cost,
        )
        return (low + high) / 2.0

    def new_probability_after_bet(
        self, q_yes: float, q_no: float, amount: float, outcome: Outcome | str
    ) -> float:
        """YES price after spending `amount` on `outcome`."""
        outcome = Outcome.parse(outcome)
        shares = self.shares_for_cost(q_yes, q_no, amount, outcome)
        if outcome is Outcome.YES:
            return self.price_yes(q_yes + shares, q_no)
        return self.price_yes(q_yes, q_no + shares)

    def max_loss(self) -> float:
        """Worst-case market maker loss for a binary market: b * ln(2)."""
        return self.b * math.log(2)

    # ------------------------------------------------------------------
    # Previews
    # ------------------------------------------------------------------

    def market_state(self, q_yes: float, q_no: float, total_volume: float = 0.0) -> MarketState:
        price_yes = self.price_yes(q_yes, q_no)
        return MarketState(
            q_yes=q_yes,
            q_no=q_no,
            price_yes=price_yes,
            price_no=1.0 - price_yes,
            total_volume=total_volume,
        )

    def simulate_bet(self, q_yes: float, q_no: float, amount: float, outcome: Outcome | str) -> BetSimulation:
        """Show what spending `amount` on `outcome` would do, without doing it."""
        outcome = Outcome.parse(outcome)
        current_price_yes = self.price_yes(q_yes, q_no)
        shares = self.shares_for_cost(q_yes, q_no, amount, outcome)

        if outcome is Outcome.YES:
            new_price_yes = self.price_yes(q_yes + shares, q_no)
        else:
            new_price_yes = self.price_yes(q_yes, q_no + shares)

        return BetSimulation(
            shares_received=shares,
            cost=amount,
            new_price_yes=new_price_yes,
            new_price_no=1.0 - new_price_yes,
            price_impact=new_price_yes - current_price_yes,
            average_price=amount / shares if shares > 0 else 0.0,
            potential_payout=shares,
        )
