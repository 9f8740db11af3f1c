"""Support action and support-count ranking"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.api.errors import translate_errors
from app.deps.common import get_app_settings, get_trace_id, get_video_store, no_store
from core.config import Settings
from service.dto import SupportRankingResponseDTO, SupportRequestDTO, SupportResponseDTO
from service.support_service import client_ip, give_support, support_ranking
from store.video_store import VideoStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/support", tags=["support"], dependencies=[Depends(no_store)])


@router.post("", response_model=SupportResponseDTO)
def post_support(
    body: SupportRequestDTO,
    request: Request,
    store: VideoStore = Depends(get_video_store),
    settings: Settings = Depends(get_app_settings),
    trace_id: str = Depends(get_trace_id),
) -> SupportResponseDTO:
    """Add support points to a video, once per client per local day"""
    peer = request.client.host if request.client else None
    with translate_errors(trace_id):
        return give_support(
            store, body, settings=settings, trace_id=trace_id,
            ip=client_ip(request.headers, peer),
            user_agent=request.headers.get("user-agent", ""),
        )


@router.get("/ranking", response_model=SupportRankingResponseDTO)
def get_support_ranking(
    range_: Optional[str] = Query(None, alias="range"),
    take: Optional[str] = None,
    store: VideoStore = Depends(get_video_store),
    trace_id: str = Depends(get_trace_id),
) -> SupportRankingResponseDTO:
    with translate_errors(trace_id):
        return support_ranking(store, trace_id=trace_id, range_=range_, take=take)
