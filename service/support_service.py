"""Support actions and the support-count ranking"""
import hashlib
import logging
import time
from datetime import datetime
from typing import Mapping, Optional

from core.config import Settings
from core.errors import DomainValidationError, NotFoundError
from ranking.assembler import assemble
from ranking.scoring import count_support_events
from ranking.windowing import LISTING_RANGES, resolve_token, rolling_window, start_of_today_local, utc_now
from service.dto import (
    SupportRankingItemDTO,
    SupportRankingResponseDTO,
    SupportRequestDTO,
    SupportResponseDTO,
    VideoSummaryDTO,
    WindowDTO,
)
from service.params import clamp_amount, clamp_int
from store.video_store import VideoStore

logger = logging.getLogger(__name__)

UNKNOWN_IP = "0.0.0.0"
SUPPORT_RANKING_MAX_TAKE = 100


def client_ip(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    """First X-Forwarded-For entry, then X-Real-IP, then the socket peer"""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return peer or UNKNOWN_IP


def fingerprint(ip: str, user_agent: str, salt: str) -> str:
    """Salted hash of IP and user agent, 32 hex chars"""
    return hashlib.sha256(f"{ip}#{user_agent}#{salt}".encode("utf-8")).hexdigest()[:32]


def give_support(
    store: VideoStore,
    request: SupportRequestDTO,
    *,
    settings: Settings,
    trace_id: str,
    ip: str,
    user_agent: str,
    now: Optional[datetime] = None,
) -> SupportResponseDTO:
    """
    Record one support action.

    A fingerprint may support a given video once per local calendar day;
    a repeat returns the current total with `already=True` and writes nothing.

    Raises:
        DomainValidationError: video_id missing
        NotFoundError: no such video
    """
    now = now or utc_now()
    video_id = (request.video_id or "").strip()
    if not video_id:
        raise DomainValidationError("video_id required", code="MISSING_PARAMETER")

    video = store.get(video_id)
    if video is None:
        raise NotFoundError(f"Video {video_id} not found")
    # Requests may name the platform video id; events always key on our id
    video_id = video.id

    amount = clamp_amount(request.amount)
    ip_hash = fingerprint(ip, user_agent, settings.support_salt)
    since = start_of_today_local(now, settings.local_utc_offset_hours)

    if store.has_supported_since(video_id, ip_hash, since):
        logger.info("Support already given today", extra={
            "trace_id": trace_id,
            "video_id": video_id
        })
        return SupportResponseDTO(points=store.support_total(video_id), already=True)

    points = store.record_support(
        video_id, amount, ip_hash=ip_hash, user_agent=user_agent, created_at=now
    )

    logger.info("Support recorded", extra={
        "trace_id": trace_id,
        "video_id": video_id,
        "total": points
    })
    return SupportResponseDTO(points=points)


def support_ranking(
    store: VideoStore,
    *,
    trace_id: str,
    range_: Optional[str] = None,
    take: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SupportRankingResponseDTO:
    """Videos by number of support events in a rolling window"""
    start_time = time.time()
    window = rolling_window(resolve_token(range_, LISTING_RANGES, "24h"), now or utc_now())
    page_size = clamp_int(take, 20, 1, SUPPORT_RANKING_MAX_TAKE)

    counts = count_support_events(store.find_support_events_since(window.since))
    top_ids = sorted(counts, key=lambda video_id: (-counts[video_id], video_id))[:page_size]
    counts = {video_id: counts[video_id] for video_id in top_ids}
    videos = store.get_by_ids(top_ids)
    ranked = assemble(videos, "support", 1, page_size, support_points=counts)

    logger.info("Support count ranking completed", extra={
        "trace_id": trace_id,
        "endpoint": "support_ranking",
        "window": window.range,
        "total": ranked.total,
        "latency_ms": int((time.time() - start_time) * 1000)
    })

    return SupportRankingResponseDTO(
        items=[
            SupportRankingItemDTO(
                video_id=item.record.id,
                support=item.support_points,
                rank=item.rank,
                video=VideoSummaryDTO.from_ranked(item),
            )
            for item in ranked.items
        ],
        window=WindowDTO.from_window(window),
    )
