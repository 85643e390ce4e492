"""
core/constants.py
Hard-coded scoring and consensus constants.
These values are NOT configurable via environment: changing them changes
every agent's standing.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Score bounds and registration defaults
# ---------------------------------------------------------------------------
SCORE_CAP: Final[float] = 100.0
DEFAULT_ACCURACY_SCORE: Final[float] = 50.0
DEFAULT_COMPOSITE_SCORE: Final[float] = 12.5
DEFAULT_REPUTATION: Final[float] = 0.5          # Neutral weight at registration

# ---------------------------------------------------------------------------
# Accuracy (Bayesian smoothing)
# ---------------------------------------------------------------------------
ACCURACY_PRIOR: Final[float] = 50.0             # Neutral prior accuracy (%)
ACCURACY_PRIOR_STRENGTH: Final[float] = 10.0    # Virtual neutral predictions

# ---------------------------------------------------------------------------
# Engagement / activity / creator
# ---------------------------------------------------------------------------
ENGAGEMENT_LOG_MULTIPLIER: Final[float] = 25.0  # log10(10^4) * 25 = 100
ACTIVITY_WINDOW_DAYS: Final[float] = 30.0
MAX_STREAK_BONUS: Final[float] = 0.5            # Up to 1.5x for long streaks
STREAK_BONUS_DAYS: Final[float] = 60.0
CREATOR_ENGAGEMENT_FACTOR: Final[float] = 0.5
CREATOR_MARKET_BONUS: Final[float] = 2.0

# ---------------------------------------------------------------------------
# Composite weights (sum to 1.0)
# ---------------------------------------------------------------------------
ACCURACY_WEIGHT: Final[float] = 0.40
ENGAGEMENT_WEIGHT: Final[float] = 0.25
CREATOR_WEIGHT: Final[float] = 0.20
ACTIVITY_WEIGHT: Final[float] = 0.15

# ---------------------------------------------------------------------------
# Swarm consensus
# ---------------------------------------------------------------------------
NEUTRAL_PROBABILITY: Final[float] = 0.5
AMOUNT_WEIGHT_BASE: Final[float] = 100.0        # A 100-unit bet weighs ~1.0
EXPERIENCE_SATURATION: Final[float] = 100.0     # Predictions for full 2x weight
