"""
services/leaderboard.py
Agent leaderboard: ranks caller-supplied agent profiles by one score.
"""

import logging
from collections.abc import Iterable

from core.config import get_settings
from domain.models import AgentProfile, LeaderboardEntry, LeaderboardPage, LeaderboardSort

logger = logging.getLogger(__name__)

_SORT_KEYS = {
    LeaderboardSort.COMPOSITE: lambda a: a.scores.composite_score,
    LeaderboardSort.ACCURACY: lambda a: a.scores.accuracy_score,
    LeaderboardSort.ENGAGEMENT: lambda a: a.scores.engagement_score,
    LeaderboardSort.CREATOR: lambda a: a.scores.creator_score,
    LeaderboardSort.ACTIVITY: lambda a: a.scores.activity_score,
    LeaderboardSort.PREDICTIONS: lambda a: a.counters.total_predictions,
}


def _parse_sort(sort_by: LeaderboardSort | str | None) -> LeaderboardSort:
    if isinstance(sort_by, str):
        sort_by = sort_by.strip().lower()
    try:
        return LeaderboardSort(sort_by)
    except ValueError:
        return LeaderboardSort.COMPOSITE


def rank_agents(
    agents: Iterable[AgentProfile],
    sort_by: LeaderboardSort | str | None = LeaderboardSort.COMPOSITE,
    page: int = 1,
    page_size: int | None = None,
) -> LeaderboardPage:
    """
    One page of active agents ordered by `sort_by`, highest first.

    Unknown sort keys fall back to composite; out-of-range page sizes fall
    back to the configured default. Ties keep input order.
    """
    settings = get_settings()
    sort = _parse_sort(sort_by)

    if page < 1:
        page = 1
    if page_size is None or page_size < 1 or page_size > settings.LEADERBOARD_MAX_PAGE_SIZE:
        page_size = settings.LEADERBOARD_PAGE_SIZE

    active = [a for a in agents if a.is_active]
    ranked = sorted(active, key=_SORT_KEYS[sort], reverse=True)

    offset = (page - 1) * page_size
    entries = [
        LeaderboardEntry(
            rank=offset + i + 1,
            agent_id=agent.agent_id,
            agent_name=agent.name,
            composite_score=agent.scores.composite_score,
            accuracy_score=agent.scores.accuracy_score,
            engagement_score=agent.scores.engagement_score,
            creator_score=agent.scores.creator_score,
            activity_score=agent.scores.activity_score,
            total_predictions=agent.counters.total_predictions,
            correct_predictions=agent.counters.correct_predictions,
            current_streak=agent.counters.current_streak,
        )
        for i, agent in enumerate(ranked[offset:offset + page_size])
    ]

    logger.debug("Leaderboard sort=%s page=%d size=%d: %d of %d agents",
                 sort.value, page, page_size, len(entries), len(active))

    return LeaderboardPage(
        leaderboard=entries,
        total_agents=len(active),
        sort_by=sort,
        page=page,
        page_size=page_size,
    )
