"""Data Transfer Objects for service layer"""
from datetime import datetime
from typing import Optional, List

from pydantic import AliasChoices, BaseModel, Field

from ranking.assembler import RankedItem
from ranking.records import VideoRecord
from ranking.shorts import is_short
from ranking.windowing import Window


class VideoSummaryDTO(BaseModel):
    """One video as listed by the feeds"""
    id: str
    platform: str
    platform_video_id: str
    title: Optional[str] = None
    channel_title: Optional[str] = None
    url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_sec: Optional[int] = None
    published_at: datetime
    views: int = 0
    likes: int = 0
    is_short: bool = False
    support_points: Optional[int] = None
    trending_score: Optional[float] = None
    rank: Optional[int] = None

    @classmethod
    def from_record(cls, record: VideoRecord, **extra) -> "VideoSummaryDTO":
        return cls(
            id=record.id,
            platform=record.platform,
            platform_video_id=record.platform_video_id,
            title=record.title,
            channel_title=record.channel_title,
            url=record.url,
            thumbnail_url=record.thumbnail_url,
            duration_sec=record.duration_sec,
            published_at=record.published_at,
            views=record.views,
            likes=record.likes,
            is_short=is_short(record),
            **extra
        )

    @classmethod
    def from_ranked(cls, item: RankedItem) -> "VideoSummaryDTO":
        return cls.from_record(
            item.record,
            support_points=item.support_points,
            trending_score=item.trending_score,
            rank=item.rank,
        )


class WindowDTO(BaseModel):
    range: str
    since: datetime

    @classmethod
    def from_window(cls, window: Window) -> "WindowDTO":
        return cls(range=window.range, since=window.since)


class EffectiveWindowDTO(WindowDTO):
    hours: int
    widened: bool = False


class SearchResponseDTO(BaseModel):
    ok: bool = True
    items: List[VideoSummaryDTO] = Field(default_factory=list)
    page: int
    take: int
    total: int
    sort: str
    window: WindowDTO


class TrendingResponseDTO(BaseModel):
    ok: bool = True
    items: List[VideoSummaryDTO] = Field(default_factory=list)
    page: int
    take: int
    total: int
    sort: str
    window: WindowDTO
    effective_window: EffectiveWindowDTO


class ListingResponseDTO(BaseModel):
    ok: bool = True
    items: List[VideoSummaryDTO] = Field(default_factory=list)
    page: int
    take: int
    total: int


class RankingResponseDTO(ListingResponseDTO):
    window: WindowDTO


class SupportRankingItemDTO(BaseModel):
    video_id: str
    support: int
    rank: int
    video: VideoSummaryDTO


class SupportRankingResponseDTO(BaseModel):
    ok: bool = True
    items: List[SupportRankingItemDTO] = Field(default_factory=list)
    window: WindowDTO


class SupportRequestDTO(BaseModel):
    """Support action; amount is floored and clamped to 1..10"""
    video_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("video_id", "videoId"))
    amount: Optional[float] = None


class SupportResponseDTO(BaseModel):
    ok: bool = True
    points: int
    already: bool = False


class VideoListResponseDTO(BaseModel):
    ok: bool = True
    items: List[VideoSummaryDTO] = Field(default_factory=list)


class VideoDetailResponseDTO(BaseModel):
    ok: bool = True
    video: VideoSummaryDTO
    related: List[VideoSummaryDTO] = Field(default_factory=list)


class HealthResponseDTO(BaseModel):
    """Service layer DTO for health check responses"""
    ok: bool = True
    timestamp: Optional[str] = None
    version: Optional[str] = None
