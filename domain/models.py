"""
domain/models.py
pydantic value types exchanged between the caller and the engine.

The engine never persists these. Inputs (bets, counters, profiles) are
snapshots supplied by the caller; outputs (scores, reports, trades) are
returned for the caller to store or serialise.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import (
    DEFAULT_ACCURACY_SCORE,
    DEFAULT_COMPOSITE_SCORE,
    DEFAULT_REPUTATION,
    NEUTRAL_PROBABILITY,
)
from core.errors import InvalidOutcome

AgentId = int | str


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Outcome(str, Enum):
    YES = "yes"
    NO = "no"

    @classmethod
    def parse(cls, value: "Outcome | str") -> "Outcome":
        """Case-insensitive parse; anything outside yes/no raises InvalidOutcome."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidOutcome(value)


class LeaderboardSort(str, Enum):
    COMPOSITE = "composite"
    ACCURACY = "accuracy"
    ENGAGEMENT = "engagement"
    CREATOR = "creator"
    ACTIVITY = "activity"
    PREDICTIONS = "predictions"


# ---------------------------------------------------------------------------
# Market quantities and trades
# ---------------------------------------------------------------------------

class OutcomeQuantities(BaseModel):
    """Outstanding shares issued by the market maker for each side."""

    model_config = ConfigDict(frozen=True)

    q_yes: float = 0.0
    q_no: float = 0.0

    def get(self, outcome: Outcome) -> float:
        return self.q_yes if outcome is Outcome.YES else self.q_no

    def with_shares(self, outcome: Outcome | str, shares: float) -> "OutcomeQuantities":
        """New pair with `shares` added to `outcome` (negative to remove)."""
        if Outcome.parse(outcome) is Outcome.YES:
            return OutcomeQuantities(q_yes=self.q_yes + shares, q_no=self.q_no)
        return OutcomeQuantities(q_yes=self.q_yes, q_no=self.q_no + shares)


class TradeExecution(BaseModel):
    """Numbers to record alongside an executed buy or sell."""

    outcome: Outcome
    shares: float
    cost: float                   # Paid by a buyer, or proceeds for a seller
    average_price: float
    quantities_before: OutcomeQuantities
    quantities_after: OutcomeQuantities
    price_yes_before: float
    price_yes_after: float
    price_no_after: float


# ---------------------------------------------------------------------------
# Bets
# ---------------------------------------------------------------------------

class BetRecord(BaseModel):
    """One agent bet/prediction on a market. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    agent_id: AgentId
    outcome: Outcome
    amount: float = Field(gt=0)
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""

    @field_validator("outcome", mode="before")
    @classmethod
    def _parse_outcome(cls, value):
        return Outcome.parse(value)


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

class AgentCounters(BaseModel):
    """Raw per-agent counters; every score is derived from these."""

    model_config = ConfigDict(frozen=True)

    # Prediction stats
    total_predictions: int = 0
    correct_predictions: int = 0
    resolved_predictions: int = 0

    # Engagement
    total_upvotes: int = 0
    total_downvotes: int = 0
    total_comments: int = 0
    total_followers: int = 0
    total_following: int = 0

    # Activity
    current_streak: int = 0
    longest_streak: int = 0
    days_active_month: int = 0
    last_active_at: datetime | None = None

    # Creator
    markets_created: int = 0
    market_engagement_avg: float = 0.0


class AgentScores(BaseModel):
    """Bounded [0, 100] sub-scores plus the composite. Defaults are registration values."""

    model_config = ConfigDict(frozen=True)

    accuracy_score: float = DEFAULT_ACCURACY_SCORE
    engagement_score: float = 0.0
    activity_score: float = 0.0
    creator_score: float = 0.0
    composite_score: float = DEFAULT_COMPOSITE_SCORE

    @property
    def reputation(self) -> float:
        """Legacy 0-1 reputation used as the consensus weight."""
        return self.composite_score / 100.0


class AgentProfile(BaseModel):
    """
    What the consensus and leaderboard need to know about one agent.

    `reputation` is the caller-supplied legacy 0-1 weight used by consensus.
    It is stored independently of `scores`, so a freshly built profile has
    reputation 0.5 while `scores.reputation` is 0.125. from_counters() sets
    both from the same recomputed scores.
    """

    agent_id: AgentId
    name: str
    reputation: float = DEFAULT_REPUTATION
    is_active: bool = True
    counters: AgentCounters = Field(default_factory=AgentCounters)
    scores: AgentScores = Field(default_factory=AgentScores)

    @classmethod
    def from_counters(
        cls,
        agent_id: AgentId,
        name: str,
        counters: AgentCounters,
        is_active: bool = True,
    ) -> "AgentProfile":
        """Build a profile whose scores and reputation are recomputed from counters."""
        from services.scoring import recompute_scores

        scores = recompute_scores(counters)
        return cls(
            agent_id=agent_id,
            name=name,
            reputation=scores.reputation,
            is_active=is_active,
            counters=counters,
            scores=scores,
        )


class AgentStats(BaseModel):
    """Detailed statistics for one agent."""

    agent_id: AgentId

    # Scores breakdown
    accuracy_score: float
    engagement_score: float
    creator_score: float
    activity_score: float
    composite_score: float

    # Accuracy details
    total_predictions: int
    resolved_predictions: int
    correct_predictions: int
    accuracy_percent: float

    # Engagement details
    total_upvotes: int
    total_downvotes: int
    total_comments: int
    total_followers: int
    total_following: int

    # Activity details
    current_streak: int
    longest_streak: int
    days_active_month: int

    # Creator details
    markets_created: int
    market_engagement_avg: float


# ---------------------------------------------------------------------------
# Swarm consensus
# ---------------------------------------------------------------------------

class AgentPrediction(BaseModel):
    """A single resolvable bet projected for display."""
    agent_name: str
    outcome: Outcome
    amount: float
    confidence: float
    reputation: float
    weight: float
    reasoning: str = ""


class ConsensusBreakdown(BaseModel):
    """Split between YES and NO predictions."""
    yes_count: int = 0
    no_count: int = 0
    yes_weight: float = 0.0
    no_weight: float = 0.0
    yes_amount: float = 0.0
    no_amount: float = 0.0


class ConsensusReport(BaseModel):
    """Reputation-weighted aggregate of every agent bet on one market."""
    market_id: int | str | None = None
    consensus_probability: float = NEUTRAL_PROBABILITY
    total_agents: int = 0
    total_bets: int = 0
    total_wagered: float = 0.0
    average_confidence: float = 0.0
    average_reputation: float = 0.0
    breakdown: ConsensusBreakdown = Field(default_factory=ConsensusBreakdown)
    top_predictors: list[AgentPrediction] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

class LeaderboardEntry(BaseModel):
    rank: int
    agent_id: AgentId
    agent_name: str
    composite_score: float
    accuracy_score: float
    engagement_score: float
    creator_score: float
    activity_score: float
    total_predictions: int
    correct_predictions: int
    current_streak: int


class LeaderboardPage(BaseModel):
    leaderboard: list[LeaderboardEntry]
    total_agents: int
    sort_by: LeaderboardSort
    page: int
    page_size: int
