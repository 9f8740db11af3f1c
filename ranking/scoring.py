"""
Popularity scores.

Two decay formulas are used by different feeds and weight likes
differently. They are kept apart on purpose; see DESIGN.md.
"""
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional

from ranking.records import SupportEventRecord, VideoRecord
from ranking.windowing import utc_now

DECAY_EXPONENT = 1.3
AGE_OFFSET_HOURS = 2.0

HOT_LIKE_WEIGHT = 4
FEED_LIKE_WEIGHT = 20
FEED_MIN_AGE_HOURS = 1.0

SUPPORT_WEIGHT = 50
SUPPORT_LIKE_WEIGHT = 3
SUPPORT_VIEW_WEIGHT = 0.001

Scorer = Callable[[VideoRecord, datetime], float]


def age_hours(record: VideoRecord, now: datetime) -> float:
    return (now - record.published_at).total_seconds() / 3600


def hot_score(record: VideoRecord, now: Optional[datetime] = None) -> float:
    """Search "hot" score: (views + 4*likes) / (age_h + 2) ** 1.3, age clamped at 0"""
    now = now or utc_now()
    age = max(0.0, age_hours(record, now))
    return (record.views + HOT_LIKE_WEIGHT * record.likes) / (age + AGE_OFFSET_HOURS) ** DECAY_EXPONENT


def feed_trending_score(record: VideoRecord, now: Optional[datetime] = None) -> float:
    """Feed "trending" score: (views + 20*likes) / (age_h + 2) ** 1.3, age at least 1h"""
    now = now or utc_now()
    age = max(FEED_MIN_AGE_HOURS, age_hours(record, now))
    return (record.views + FEED_LIKE_WEIGHT * record.likes) / (age + AGE_OFFSET_HOURS) ** DECAY_EXPONENT


def support_weighted_score(record: VideoRecord, support_points: int) -> float:
    return (
        support_points * SUPPORT_WEIGHT
        + record.likes * SUPPORT_LIKE_WEIGHT
        + record.views * SUPPORT_VIEW_WEIGHT
    )


def aggregate_support_points(events: Iterable[SupportEventRecord],
                             since: Optional[datetime] = None) -> Dict[str, int]:
    """Sum support amounts per video, 1 per event when amount is absent"""
    totals: Dict[str, int] = defaultdict(int)
    for event in events:
        if since is not None and event.created_at < since:
            continue
        totals[event.video_id] += event.points
    return dict(totals)


def count_support_events(events: Iterable[SupportEventRecord],
                         since: Optional[datetime] = None) -> Dict[str, int]:
    """Number of support events per video"""
    counts: Dict[str, int] = defaultdict(int)
    for event in events:
        if since is not None and event.created_at < since:
            continue
        counts[event.video_id] += 1
    return dict(counts)
