"""Hero carousel and single video lookups"""
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.errors import translate_errors
from app.deps.common import get_app_settings, get_trace_id, get_video_store, no_store
from core.config import Settings
from service.dto import VideoDetailResponseDTO, VideoListResponseDTO
from service.hero_service import get_hero
from service.videos_service import get_video_detail, get_videos_by_ids
from store.video_store import VideoStore

router = APIRouter(tags=["videos"], dependencies=[Depends(no_store)])


@router.get("/hero", response_model=VideoListResponseDTO)
def hero(
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> VideoListResponseDTO:
    with translate_errors(trace_id):
        return get_hero(store, settings.pinned_ids, trace_id=trace_id)


@router.get("/videos/by-ids", response_model=VideoListResponseDTO)
def videos_by_ids(
    ids: Optional[str] = None,
    store: VideoStore = Depends(get_video_store),
    trace_id: str = Depends(get_trace_id),
) -> VideoListResponseDTO:
    with translate_errors(trace_id):
        return get_videos_by_ids(store, ids)


@router.get("/videos/{video_id}", response_model=VideoDetailResponseDTO)
def video_detail(
    video_id: str,
    store: VideoStore = Depends(get_video_store),
    trace_id: str = Depends(get_trace_id),
) -> VideoDetailResponseDTO:
    """One video with related videos; falls back to lookup by platform video id"""
    with translate_errors(trace_id):
        return get_video_detail(store, video_id, trace_id=trace_id)
