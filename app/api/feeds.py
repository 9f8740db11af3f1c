"""Search, trending, listing and ranking feeds"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.errors import translate_errors
from app.deps.common import get_app_settings, get_trace_id, get_video_store, no_store
from core.config import Settings
from service.dto import ListingResponseDTO, RankingResponseDTO, SearchResponseDTO, TrendingResponseDTO
from service.feeds_service import list_videos, search_videos, support_weighted_ranking, trending_videos
from service.params import is_truthy
from store.video_store import VideoStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["feeds"], dependencies=[Depends(no_store)])


@router.get("/search", response_model=SearchResponseDTO)
def search(
    q: Optional[str] = None,
    range_: Optional[str] = Query(None, alias="range"),
    sort: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> SearchResponseDTO:
    """Search videos published inside a rolling window"""
    with translate_errors(trace_id):
        return search_videos(
            store, settings=settings, trace_id=trace_id,
            q=q, range_=range_, sort=sort, shorts=shorts, page=page, take=take,
        )


@router.get("/trending", response_model=TrendingResponseDTO)
def trending(
    window: Optional[str] = None,
    range_: Optional[str] = Query(None, alias="range"),
    sort: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    shorts: Optional[str] = None,
    exclude_shorts: Optional[str] = Query(None, alias="excludeShorts"),
    page: Optional[str] = None,
    take: Optional[str] = None,
    no_fallback: Optional[str] = Query(None, alias="noFallback"),
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> TrendingResponseDTO:
    """Trending feed; an empty 24h window widens to 48h unless noFallback is given"""
    if is_truthy(exclude_shorts):
        shorts = "exclude"
    with translate_errors(trace_id):
        return trending_videos(
            store, settings=settings, trace_id=trace_id,
            window_=window or range_, sort=sort or sort_by, shorts=shorts,
            page=page, take=take, no_fallback=no_fallback is not None,
        )


@router.get("/videos", response_model=ListingResponseDTO)
def videos(
    range_: Optional[str] = Query(None, alias="range"),
    sort: Optional[str] = None,
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> ListingResponseDTO:
    with translate_errors(trace_id):
        return list_videos(
            store, settings=settings, trace_id=trace_id,
            range_=range_, sort=sort, shorts=shorts, page=page, take=take,
        )


@router.get("/ranking", response_model=RankingResponseDTO)
def ranking(
    range_: Optional[str] = Query(None, alias="range"),
    shorts: Optional[str] = None,
    page: Optional[str] = None,
    take: Optional[str] = None,
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> RankingResponseDTO:
    """Support-weighted ranking over the current local day(s)"""
    with translate_errors(trace_id):
        return support_weighted_ranking(
            store, settings=settings, trace_id=trace_id,
            range_=range_, shorts=shorts, page=page, take=take,
        )
