"""Hero carousel: pinned videos first, topped up by support total"""
import logging
from typing import Sequence

from ranking.assembler import RankedItem, merge_pinned
from service.dto import VideoListResponseDTO, VideoSummaryDTO
from store.video_store import VideoStore

logger = logging.getLogger(__name__)

HERO_SIZE = 5


def get_hero(store: VideoStore, pinned_ids: Sequence[str], *, trace_id: str,
             size: int = HERO_SIZE) -> VideoListResponseDTO:
    pinned = store.get_by_ids(pinned_ids) if pinned_ids else []

    need = max(0, size - len(pinned))
    extra = store.find_top_supported(exclude_ids=[r.id for r in pinned], limit=need) if need else []

    ranked = [RankedItem(record=r, support_points=r.support_total) for r in pinned + extra]
    items = merge_pinned(ranked, pinned_ids, limit=size)

    logger.info("Hero assembled", extra={
        "trace_id": trace_id,
        "endpoint": "hero",
        "returned": len(items)
    })
    return VideoListResponseDTO(items=[VideoSummaryDTO.from_ranked(item) for item in items])
