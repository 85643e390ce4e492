"""
services/scoring.py
Agent reputation scoring. Converts raw counters into four bounded
sub-scores and one composite score.

Everything here is a pure function of AgentCounters. The caller reads the
counters, calls recompute_scores(), and persists the result; recomputing
from the same counters always yields the same scores.
"""

import logging
import math
from datetime import datetime, timezone

from core.constants import (
    ACCURACY_PRIOR,
    ACCURACY_PRIOR_STRENGTH,
    ACCURACY_WEIGHT,
    ACTIVITY_WEIGHT,
    ACTIVITY_WINDOW_DAYS,
    CREATOR_ENGAGEMENT_FACTOR,
    CREATOR_MARKET_BONUS,
    CREATOR_WEIGHT,
    DEFAULT_ACCURACY_SCORE,
    ENGAGEMENT_LOG_MULTIPLIER,
    ENGAGEMENT_WEIGHT,
    EXPERIENCE_SATURATION,
    MAX_STREAK_BONUS,
    SCORE_CAP,
    STREAK_BONUS_DAYS,
)
from domain.models import AgentCounters, AgentScores, AgentStats

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Sub-scores
# ------------------------------------------------------------------

def calculate_accuracy_score(counters: AgentCounters) -> float:
    """
    Bayesian-smoothed accuracy on a 0-100 scale.

    Blends the raw hit rate with ACCURACY_PRIOR_STRENGTH virtual neutral
    (50%) predictions, so a handful of lucky calls can't swing the score.
    Converges to the raw accuracy as resolved predictions grow.
    """
    resolved = counters.resolved_predictions
    if resolved == 0:
        return DEFAULT_ACCURACY_SCORE

    raw_accuracy = counters.correct_predictions / resolved * 100
    return (
        (raw_accuracy * resolved + ACCURACY_PRIOR * ACCURACY_PRIOR_STRENGTH)
        / (resolved + ACCURACY_PRIOR_STRENGTH)
    )


def calculate_engagement_score(counters: AgentCounters) -> float:
    """log10(upvotes + comments + followers + 1) * 25, capped at 100. Downvotes don't count."""
    total_engagement = counters.total_upvotes + counters.total_comments + counters.total_followers
    if total_engagement <= 0:
        return 0.0
    return min(SCORE_CAP, math.log10(total_engagement + 1) * ENGAGEMENT_LOG_MULTIPLIER)


def calculate_activity_score(counters: AgentCounters) -> float:
    """Share of the last 30 days active, with up to a 1.5x bonus for long streaks."""
    if counters.days_active_month == 0:
        return 0.0

    base_activity = counters.days_active_month / ACTIVITY_WINDOW_DAYS * 100
    streak_multiplier = 1.0 + min(MAX_STREAK_BONUS, counters.current_streak / STREAK_BONUS_DAYS)
    return min(SCORE_CAP, base_activity * streak_multiplier)


def calculate_creator_score(counters: AgentCounters) -> float:
    if counters.markets_created == 0:
        return 0.0
    return min(
        SCORE_CAP,
        counters.market_engagement_avg * CREATOR_ENGAGEMENT_FACTOR
        + counters.markets_created * CREATOR_MARKET_BONUS,
    )


def calculate_composite_score(
    accuracy: float,
    engagement: float,
    creator: float,
    activity: float,
) -> float:
    """Accuracy 40%, engagement 25%, creator 20%, activity 15%."""
    return (
        accuracy * ACCURACY_WEIGHT
        + engagement * ENGAGEMENT_WEIGHT
        + creator * CREATOR_WEIGHT
        + activity * ACTIVITY_WEIGHT
    )


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def recompute_scores(counters: AgentCounters) -> AgentScores:
    """The single reducer: counters in, every score out."""
    accuracy = calculate_accuracy_score(counters)
    engagement = calculate_engagement_score(counters)
    activity = calculate_activity_score(counters)
    creator = calculate_creator_score(counters)

    return AgentScores(
        accuracy_score=accuracy,
        engagement_score=engagement,
        activity_score=activity,
        creator_score=creator,
        composite_score=calculate_composite_score(accuracy, engagement, creator, activity),
    )


def update_activity(counters: AgentCounters, now: datetime | None = None) -> AgentCounters:
    """
    Streak bookkeeping for one new prediction event, keyed on calendar day.

    - first activity         -> streak 1, days active 1
    - same calendar day      -> no change
    - next calendar day      -> streak + 1, days active + 1
    - any larger gap         -> streak reset to 1, days active + 1

    Returns new counters; the input is not modified.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    last_active = counters.last_active_at
    current_streak = counters.current_streak
    days_active = counters.days_active_month

    if last_active is None:
        current_streak = 1
        days_active = 1
    else:
        # Compare calendar days in the event's own timezone
        if now.tzinfo is not None and last_active.tzinfo is not None:
            last_active = last_active.astimezone(now.tzinfo)
        days_diff = (now.date() - last_active.date()).days

        if days_diff < 0:
            logger.debug(
                "Activity event %s predates last activity %s, counters unchanged",
                now.isoformat(), counters.last_active_at.isoformat(),
            )
            return counters
        if days_diff == 1:
            current_streak += 1
            days_active += 1
        elif days_diff > 1:
            current_streak = 1
            days_active += 1

    return counters.model_copy(update={
        "current_streak": current_streak,
        "days_active_month": days_active,
        "longest_streak": max(counters.longest_streak, current_streak),
        "last_active_at": now,
    })


def agent_weight(scores: AgentScores, total_predictions: int) -> float:
    """Voting weight: composite/100 scaled by experience, up to 2x at 100 predictions."""
    experience_factor = 1.0 + min(1.0, total_predictions / EXPERIENCE_SATURATION)
    return scores.reputation * experience_factor


def agent_stats(agent_id: int | str, counters: AgentCounters, scores: AgentScores) -> AgentStats:
    """Detailed statistics, including the raw (unsmoothed) accuracy percentage."""
    accuracy_percent = 0.0
    if counters.resolved_predictions > 0:
        accuracy_percent = counters.correct_predictions / counters.resolved_predictions * 100

    return AgentStats(
        agent_id=agent_id,
        accuracy_score=scores.accuracy_score,
        engagement_score=scores.engagement_score,
        creator_score=scores.creator_score,
        activity_score=scores.activity_score,
        composite_score=scores.composite_score,
        total_predictions=counters.total_predictions,
        resolved_predictions=counters.resolved_predictions,
        correct_predictions=counters.correct_predictions,
        accuracy_percent=accuracy_percent,
        total_upvotes=counters.total_upvotes,
        total_downvotes=counters.total_downvotes,
        total_comments=counters.total_comments,
        total_followers=counters.total_followers,
        total_following=counters.total_following,
        current_streak=counters.current_streak,
        longest_streak=counters.longest_streak,
        days_active_month=counters.days_active_month,
        markets_created=counters.markets_created,
        market_engagement_avg=counters.market_engagement_avg,
    )
