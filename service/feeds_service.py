"""Feed services: search, trending, listing and the support-weighted ranking"""
import logging
import time
from datetime import datetime
from typing import List, Optional

from core.config import Settings
from ranking.assembler import RankedPage, assemble
from ranking.records import VideoRecord
from ranking.scoring import aggregate_support_points, feed_trending_score, hot_score
from ranking.shorts import filter_shorts, resolve_shorts_mode
from ranking.windowing import (
    LISTING_RANGES,
    RANKING_RANGES,
    SEARCH_RANGES,
    TRENDING_WINDOWS,
    Window,
    civil_midnight_window,
    resolve_token,
    rolling_window,
    utc_now,
    widen,
)
from service.dto import (
    EffectiveWindowDTO,
    ListingResponseDTO,
    RankingResponseDTO,
    SearchResponseDTO,
    TrendingResponseDTO,
    VideoSummaryDTO,
    WindowDTO,
)
from service.params import clamp_int
from store.video_store import VideoStore

logger = logging.getLogger(__name__)

SEARCH_SORTS = ("hot", "new", "support")
TRENDING_SORTS = ("views", "likes", "trend")
LISTING_SORTS = ("trending", "new")

SEARCH_MAX_TAKE = 50
TRENDING_MAX_TAKE = 50
LISTING_MAX_TAKE = 100
RANKING_MAX_TAKE = 100
# Candidate pool for the support-weighted ranking
RANKING_POOL = 120


def _items(ranked: RankedPage) -> List[VideoSummaryDTO]:
    return [VideoSummaryDTO.from_ranked(item) for item in ranked.items]


def _latency_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def _windowed_candidates(store: VideoStore, window: Window, shorts: str,
                         settings: Settings, query: Optional[str] = None) -> List[VideoRecord]:
    candidates = store.find_published_since(
        window.since, query=query, limit=settings.max_candidates
    )
    return filter_shorts(candidates, shorts)


def search_videos(
    store: VideoStore,
    *,
    settings: Settings,
    trace_id: str,
    q: Optional[str] = None,
    range_: Optional[str] = None,
    sort: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SearchResponseDTO:
    """
    Free-text search over a rolling window.

    `hot` ranks by the search hot score, `new` by publish time and
    `support` by the number of support events inside the window.
    """
    start_time = time.time()
    now = now or utc_now()
    query = (q or "").strip() or None
    window = rolling_window(resolve_token(range_, SEARCH_RANGES, "7d"), now)
    sort_mode = resolve_token(sort, SEARCH_SORTS, "hot")
    shorts_mode = resolve_shorts_mode(shorts)
    page_no = clamp_int(page, 1, 1, 10000)
    page_size = clamp_int(take, 24, 1, SEARCH_MAX_TAKE)

    logger.info("Search requested", extra={
        "trace_id": trace_id,
        "endpoint": "search",
        "window": window.range,
        "sort": sort_mode,
        "shorts": shorts_mode,
    })

    candidates = _windowed_candidates(store, window, shorts_mode, settings, query)

    support_points = None
    if sort_mode == "support" and candidates:
        support_points = store.support_counts_since(
            window.since, video_ids=[c.id for c in candidates]
        )

    ranked = assemble(
        candidates, sort_mode, page_no, page_size,
        support_points=support_points, now=now, scorer=hot_score,
        max_total=settings.max_candidates,
    )

    logger.info("Search completed", extra={
        "trace_id": trace_id,
        "endpoint": "search",
        "total": ranked.total,
        "returned": len(ranked.items),
        "latency_ms": _latency_ms(start_time),
    })

    return SearchResponseDTO(
        items=_items(ranked),
        page=ranked.page,
        take=ranked.page_size,
        total=ranked.total,
        sort=sort_mode,
        window=WindowDTO.from_window(window),
    )


def trending_videos(
    store: VideoStore,
    *,
    settings: Settings,
    trace_id: str,
    window_: Optional[str] = None,
    sort: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    no_fallback: bool = False,
    now: Optional[datetime] = None,
) -> TrendingResponseDTO:
    """
    Trending feed over a rolling window.

    An empty 24h window is retried once as 48h unless `no_fallback` is set;
    the response reports the window actually used.
    """
    start_time = time.time()
    now = now or utc_now()
    requested = rolling_window(resolve_token(window_, TRENDING_WINDOWS, "24h"), now)
    sort_mode = resolve_token(sort, TRENDING_SORTS, "views")
    shorts_mode = resolve_shorts_mode(shorts)
    page_no = clamp_int(page, 1, 1, 10000)
    page_size = clamp_int(take, 50, 1, TRENDING_MAX_TAKE)

    effective = requested
    candidates = _windowed_candidates(store, effective, shorts_mode, settings)

    wider = widen(requested.range)
    if not candidates and wider and not no_fallback:
        effective = rolling_window(wider, now)
        candidates = _windowed_candidates(store, effective, shorts_mode, settings)
        logger.info("Empty window widened", extra={
            "trace_id": trace_id,
            "endpoint": "trending",
            "window": requested.range,
            "effective_window": effective.range,
            "total": len(candidates),
        })

    ranked = assemble(
        candidates, sort_mode, page_no, page_size,
        now=now, scorer=feed_trending_score,
        max_total=settings.max_candidates,
    )
    widened = effective.range != requested.range

    logger.info("Trending completed", extra={
        "trace_id": trace_id,
        "endpoint": "trending",
        "window": requested.range,
        "effective_window": effective.range,
        "widened": widened,
        "sort": sort_mode,
        "total": ranked.total,
        "latency_ms": _latency_ms(start_time),
    })

    return TrendingResponseDTO(
        items=_items(ranked),
        page=ranked.page,
        take=ranked.page_size,
        total=ranked.total,
        sort=sort_mode,
        window=WindowDTO.from_window(requested),
        effective_window=EffectiveWindowDTO(
            range=effective.range,
            since=effective.since,
            hours=effective.hours,
            widened=widened,
        ),
    )


def list_videos(
    store: VideoStore,
    *,
    settings: Settings,
    trace_id: str,
    range_: Optional[str] = None,
    sort: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ListingResponseDTO:
    """Video listing: `trending` uses the feed trending score, `new` publish time"""
    start_time = time.time()
    now = now or utc_now()
    window = rolling_window(resolve_token(range_, LISTING_RANGES, "24h"), now)
    sort_mode = resolve_token(sort, LISTING_SORTS, "trending")
    shorts_mode = resolve_shorts_mode(shorts)
    page_no = clamp_int(page, 1, 1, 10000)
    page_size = clamp_int(take, 24, 1, LISTING_MAX_TAKE)

    candidates = _windowed_candidates(store, window, shorts_mode, settings)
    ranked = assemble(
        candidates, sort_mode, page_no, page_size,
        now=now, scorer=feed_trending_score,
        max_total=settings.max_candidates,
    )

    logger.info("Listing completed", extra={
        "trace_id": trace_id,
        "endpoint": "videos",
        "window": window.range,
        "sort": sort_mode,
        "total": ranked.total,
        "latency_ms": _latency_ms(start_time),
    })

    return ListingResponseDTO(
        items=_items(ranked),
        page=ranked.page,
        take=ranked.page_size,
        total=ranked.total,
    )


def support_weighted_ranking(
    store: VideoStore,
    *,
    settings: Settings,
    trace_id: str,
    range_: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RankingResponseDTO:
    """
    Ranking by support*50 + likes*3 + views*0.001.

    Support is summed over a civil-midnight window, so `1d` means the
    current local calendar day. The pool is the newest videos plus every
    video supported inside the window.
    """
    start_time = time.time()
    now = now or utc_now()
    window = civil_midnight_window(
        resolve_token(range_, RANKING_RANGES, "1d"), now, settings.local_utc_offset_hours
    )
    shorts_mode = resolve_shorts_mode(shorts)
    page_no = clamp_int(page, 1, 1, 10000)
    page_size = clamp_int(take, 50, 1, RANKING_MAX_TAKE)

    support_points = aggregate_support_points(store.find_support_events_since(window.since))
    pool = store.find_recent(RANKING_POOL)
    pooled_ids = {r.id for r in pool}
    missing = [video_id for video_id in support_points if video_id not in pooled_ids]
    if missing:
        pool.extend(store.get_by_ids(missing))

    candidates = filter_shorts(pool, shorts_mode)
    ranked = assemble(
        candidates, "support_weighted", page_no, page_size,
        support_points=support_points, now=now,
        max_total=settings.max_candidates,
    )

    logger.info("Support ranking completed", extra={
        "trace_id": trace_id,
        "endpoint": "ranking",
        "window": window.range,
        "total": ranked.total,
        "latency_ms": _latency_ms(start_time),
    })

    return RankingResponseDTO(
        items=_items(ranked),
        page=ranked.page,
        take=ranked.page_size,
        total=ranked.total,
        window=WindowDTO.from_window(window),
    )
