"""Single video lookups"""
import logging
from typing import List, Optional

from core.errors import NotFoundError
from service.dto import VideoDetailResponseDTO, VideoListResponseDTO, VideoSummaryDTO
from store.video_store import VideoStore

logger = logging.getLogger(__name__)

RELATED_LIMIT = 12
RELATED_MIN = 8


def parse_ids(ids: Optional[str]) -> List[str]:
    return [s.strip() for s in (ids or "").split(",") if s.strip()]


def get_videos_by_ids(store: VideoStore, ids: Optional[str]) -> VideoListResponseDTO:
    """Videos for a comma separated id list, newest first"""
    video_ids = parse_ids(ids)
    if not video_ids:
        return VideoListResponseDTO(items=[])
    return VideoListResponseDTO(
        items=[VideoSummaryDTO.from_record(r) for r in store.get_by_ids(video_ids)]
    )


def get_video_detail(store: VideoStore, video_id: str, *, trace_id: str) -> VideoDetailResponseDTO:
    """
    One video plus related videos.

    Related videos come from the same channel first; when there are fewer
    than 8 the list is topped up with the newest other videos.

    Raises:
        NotFoundError: neither id nor platform video id matches
    """
    video = store.get(video_id)
    if video is None:
        raise NotFoundError(f"Video {video_id} not found")

    related = []
    if video.channel_title:
        related = store.find_by_channel(
            video.channel_title, exclude_id=video.id, limit=RELATED_LIMIT
        )
    if len(related) < RELATED_MIN:
        related += store.find_recent_excluding(
            [video.id] + [r.id for r in related], limit=RELATED_LIMIT - len(related)
        )

    logger.info("Video detail served", extra={
        "trace_id": trace_id,
        "video_id": video.id,
        "returned": len(related)
    })

    return VideoDetailResponseDTO(
        video=VideoSummaryDTO.from_record(video, support_points=video.support_total),
        related=[VideoSummaryDTO.from_record(r) for r in related],
    )
