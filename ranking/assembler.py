"""
Ranking assembly: order candidates for a sort mode, put pinned items first
and cut one page.

Everything here is pure. Candidates arrive already windowed and
shorts-filtered; persistence reads happen before `assemble` is called.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ranking.records import VideoRecord
from ranking.scoring import Scorer, hot_score, support_weighted_score
from ranking.windowing import utc_now

DEFAULT_MAX_TOTAL = 1000

SUPPORT = "support"
SUPPORT_WEIGHTED = "support_weighted"
NEW = "new"
COUNTER_MODES = ("views", "likes")


@dataclass
class RankedItem:
    record: VideoRecord
    rank: int = 0
    trending_score: Optional[float] = None
    support_points: Optional[int] = None


@dataclass
class RankedPage:
    items: List[RankedItem]
    page: int
    page_size: int
    total: int


def _rank_by_support(candidates: Sequence[VideoRecord],
                     support_points: Dict[str, int]) -> List[RankedItem]:
    by_id = {r.id: r for r in candidates}
    ordered = sorted(support_points.items(), key=lambda kv: kv[1], reverse=True)
    return [
        RankedItem(record=by_id[video_id], support_points=points)
        for video_id, points in ordered
        if video_id in by_id
    ]


def _rank_by_support_weight(candidates: Sequence[VideoRecord],
                            support_points: Dict[str, int]) -> List[RankedItem]:
    items = []
    for record in candidates:
        points = support_points.get(record.id, 0)
        items.append(RankedItem(
            record=record,
            support_points=points,
            trending_score=support_weighted_score(record, points),
        ))
    items.sort(key=lambda item: item.trending_score, reverse=True)
    return items


def _rank_by_counter(candidates: Sequence[VideoRecord], counter: str) -> List[RankedItem]:
    # Secondary key first; the stable primary sort keeps it for ties
    ordered = sorted(candidates, key=lambda r: r.published_at, reverse=True)
    ordered.sort(key=lambda r: getattr(r, counter), reverse=True)
    return [RankedItem(record=r) for r in ordered]


def rank_candidates(candidates: Sequence[VideoRecord], mode: str, *,
                    support_points: Optional[Dict[str, int]] = None,
                    now: Optional[datetime] = None,
                    scorer: Scorer = hot_score) -> List[RankedItem]:
    """
    Order candidates for a sort mode and number them from 1.

    Modes:
        support: by windowed support count, only videos that have one
        support_weighted: support*50 + likes*3 + views*0.001
        new: newest first
        views / likes: that counter, newest first on ties
        anything else: `scorer` descending, input order on ties
    """
    if mode == SUPPORT:
        items = _rank_by_support(candidates, support_points or {})
    elif mode == SUPPORT_WEIGHTED:
        items = _rank_by_support_weight(candidates, support_points or {})
    elif mode == NEW:
        items = [RankedItem(record=r) for r in
                 sorted(candidates, key=lambda r: r.published_at, reverse=True)]
    elif mode in COUNTER_MODES:
        items = _rank_by_counter(candidates, mode)
    else:
        now = now or utc_now()
        items = [RankedItem(record=r, trending_score=scorer(r, now)) for r in candidates]
        items.sort(key=lambda item: item.trending_score, reverse=True)

    for position, item in enumerate(items, start=1):
        item.rank = position
    return items


def merge_pinned(ranked: Sequence[RankedItem], pinned_ids: Sequence[str],
                 limit: Optional[int] = None) -> List[RankedItem]:
    """
    Pinned items first, in the given order and without duplicates, then the
    ranked sequence minus anything already placed. Pinned ids with no
    matching record are skipped.
    """
    by_id = {item.record.id: item for item in ranked}
    merged: List[RankedItem] = []
    placed = set()

    for video_id in pinned_ids:
        if video_id in placed or video_id not in by_id:
            continue
        merged.append(by_id[video_id])
        placed.add(video_id)

    for item in ranked:
        if limit is not None and len(merged) >= limit:
            break
        if item.record.id in placed:
            continue
        merged.append(item)
        placed.add(item.record.id)

    if limit is not None:
        merged = merged[:limit]
    for position, item in enumerate(merged, start=1):
        item.rank = position
    return merged


def paginate(items: Sequence[RankedItem], page: int, page_size: int) -> List[RankedItem]:
    skip = (page - 1) * page_size
    return list(items[skip:skip + page_size])


def assemble(candidates: Sequence[VideoRecord], mode: str = "hot", page: int = 1,
             page_size: int = 24, pinned_ids: Optional[Sequence[str]] = None, *,
             support_points: Optional[Dict[str, int]] = None,
             now: Optional[datetime] = None,
             scorer: Scorer = hot_score,
             max_total: int = DEFAULT_MAX_TOTAL) -> RankedPage:
    """
    Rank, merge pinned items and paginate.

    Args:
        candidates: windowed and shorts-filtered records
        mode: sort mode, see `rank_candidates`
        page: 1-based page number
        page_size: items per page
        pinned_ids: ids forced to the front, in this order
        support_points: per-video support totals for the support modes
        now: reference instant for age-based scores
        scorer: score function for the score-based modes
        max_total: cap on the reported total

    Returns:
        RankedPage: one page plus the capped total
    """
    ranked = rank_candidates(candidates, mode, support_points=support_points,
                             now=now, scorer=scorer)
    if pinned_ids:
        ranked = merge_pinned(ranked, pinned_ids)

    total = min(len(ranked), max_total)
    ranked = ranked[:max_total]
    return RankedPage(
        items=paginate(ranked, page, page_size),
        page=page,
        page_size=page_size,
        total=total,
    )
