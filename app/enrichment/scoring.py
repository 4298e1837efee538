"""
Importance score for inspiration posts.

More topics and more recent publication both push the score up:

    topic   = min(topic_count / 5, 1) * 0.4
    recency = max(0, 1 - ceil(days since published) / 30) * 0.6

A future-dated article gives a negative day count, which is not clamped and
lifts recency above 0.6.
"""

import math
from datetime import datetime
from typing import Optional

from app.enrichment.constants import (
    RECENCY_WEIGHT,
    RECENCY_WINDOW_DAYS,
    TOPIC_SATURATION,
    TOPIC_WEIGHT,
)

SECONDS_PER_DAY = 60 * 60 * 24


def topic_score(topic_count: int) -> float:
    return min(topic_count / TOPIC_SATURATION, 1) * TOPIC_WEIGHT


def days_since(published_at: datetime, now: datetime) -> int:
    """Whole days between the two instants, rounded up."""
    return math.ceil((now - published_at).total_seconds() / SECONDS_PER_DAY)


def recency_score(published_at: Optional[datetime], now: datetime) -> float:
    if published_at is None:
        return 0.0
    return max(0, 1 - days_since(published_at, now) / RECENCY_WINDOW_DAYS) * RECENCY_WEIGHT


def importance(topic_count: int, published_at: Optional[datetime], now: datetime) -> float:
    return topic_score(topic_count) + recency_score(published_at, now)
