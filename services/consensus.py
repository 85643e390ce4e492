"""
services/consensus.py
Swarm consensus: reputation-weighted aggregation of agent bets.

Each bet contributes reputation * confidence * amount_weight, where
amount_weight = ln(amount + 1) / ln(100) normalises a 100-unit bet to ~1.0
and gives larger stakes diminishing returns.
"""

import logging
import math
from collections.abc import Iterable, Mapping

from core.config import get_settings
from core.constants import AMOUNT_WEIGHT_BASE, NEUTRAL_PROBABILITY
from core.errors import UnresolvedAgentReference
from domain.models import (
    AgentId,
    AgentPrediction,
    AgentProfile,
    BetRecord,
    ConsensusBreakdown,
    ConsensusReport,
    Outcome,
)

logger = logging.getLogger(__name__)


def amount_weight(amount: float) -> float:
    """Diminishing-returns stake weight: ln(amount + 1) / ln(100)."""
    return math.log(amount + 1) / math.log(AMOUNT_WEIGHT_BASE)


def bet_weight(reputation: float, confidence: float, amount: float) -> float:
    return reputation * confidence * amount_weight(amount)


def _resolve_agent(agents: Mapping[AgentId, AgentProfile], agent_id: AgentId) -> AgentProfile:
    try:
        return agents[agent_id]
    except KeyError:
        raise UnresolvedAgentReference(agent_id) from None


def calculate_swarm_consensus(
    bets: Iterable[BetRecord],
    agents: Mapping[AgentId, AgentProfile],
    market_id: int | str | None = None,
) -> ConsensusReport:
    """
    Aggregate every bet on a market into a weighted consensus probability.

    Parameters
    ----------
    bets : Iterable[BetRecord]
        All agent bets on the market, in placement order.
    agents : Mapping[AgentId, AgentProfile]
        Profiles keyed by agent id. Bets whose agent is missing are
        orphaned: counted in total_bets, excluded from every other aggregate.
    market_id : int | str | None
        Echoed back on the report.

    Returns
    -------
    ConsensusReport
        Neutral (0.5, zero counts) when there is nothing to aggregate.
    """
    bets = list(bets)
    if not bets:
        return ConsensusReport(market_id=market_id)

    weighted_yes_sum = 0.0
    weighted_no_sum = 0.0
    total_confidence = 0.0
    total_reputation = 0.0
    yes_count = no_count = 0
    yes_amount = no_amount = 0.0
    resolved_bets = 0
    orphaned = 0

    unique_agents: set[AgentId] = set()
    predictions: list[AgentPrediction] = []

    for bet in bets:
        try:
            agent = _resolve_agent(agents, bet.agent_id)
        except UnresolvedAgentReference as exc:
            logger.debug("Skipping orphaned bet: %s", exc)
            orphaned += 1
            continue

        unique_agents.add(agent.agent_id)
        resolved_bets += 1

        weight = bet_weight(agent.reputation, bet.confidence, bet.amount)

        if bet.outcome is Outcome.YES:
            weighted_yes_sum += weight
            yes_count += 1
            yes_amount += bet.amount
        else:
            weighted_no_sum += weight
            no_count += 1
            no_amount += bet.amount

        total_confidence += bet.confidence
        total_reputation += agent.reputation

        predictions.append(AgentPrediction(
            agent_name=agent.name,
            outcome=bet.outcome,
            amount=bet.amount,
            confidence=bet.confidence,
            reputation=agent.reputation,
            weight=weight,
            reasoning=bet.reasoning,
        ))

    total_weight = weighted_yes_sum + weighted_no_sum
    if total_weight > 0:
        consensus_probability = weighted_yes_sum / total_weight
    else:
        consensus_probability = NEUTRAL_PROBABILITY

    # sorted() is stable, so equal weights keep placement order
    top_n = get_settings().SWARM_TOP_PREDICTORS
    top_predictors = sorted(predictions, key=lambda p: p.weight, reverse=True)[:top_n]

    avg_confidence = total_confidence / resolved_bets if resolved_bets else 0.0
    avg_reputation = total_reputation / resolved_bets if resolved_bets else 0.0

    logger.info(
        "Swarm consensus market=%s: p=%.4f agents=%d bets=%d orphaned=%d",
        market_id, consensus_probability, len(unique_agents), resolved_bets, orphaned,
    )

    return ConsensusReport(
        market_id=market_id,
        consensus_probability=consensus_probability,
        total_agents=len(unique_agents),
        total_bets=len(bets),
        total_wagered=yes_amount + no_amount,
        average_confidence=avg_confidence,
        average_reputation=avg_reputation,
        breakdown=ConsensusBreakdown(
            yes_count=yes_count,
            no_count=no_count,
            yes_weight=weighted_yes_sum,
            no_weight=weighted_no_sum,
            yes_amount=yes_amount,
            no_amount=no_amount,
        ),
        top_predictors=top_predictors,
    )
