"""Normalized video records shared by the store, fetcher and ranking code"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlparse, parse_qs

from pydantic import BaseModel, ConfigDict, field_validator


YOUTUBE = "youtube"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")

_DURATION_RE = re.compile(
    r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$", re.IGNORECASE
)
_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_VIDEO_ID_PREFIX_RE = re.compile(r"^[\w-]{11}")
_VIDEO_ID_ANYWHERE_RE = re.compile(r"([A-Za-z0-9_-]{11})")


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class VideoRecord(BaseModel):
    """Read-only view of one video, independent of where it came from"""
    model_config = ConfigDict(frozen=True)

    id: str
    platform: str = YOUTUBE
    platform_video_id: str
    title: Optional[str] = None
    channel_title: Optional[str] = None
    url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    duration_sec: Optional[int] = None
    published_at: datetime
    views: int = 0
    likes: int = 0
    support_total: int = 0

    @field_validator("published_at")
    @classmethod
    def _published_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("views", "likes", "support_total", mode="before")
    @classmethod
    def _counter_or_zero(cls, value: Any) -> int:
        return int(value or 0)


class SupportEventRecord(BaseModel):
    """One immutable support action"""
    model_config = ConfigDict(frozen=True)

    video_id: str
    amount: Optional[int] = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def points(self) -> int:
        return 1 if self.amount is None else self.amount


def iso8601_duration_to_seconds(duration: Optional[str]) -> Optional[int]:
    """Convert an ISO 8601 duration such as PT1H2M3S to seconds"""
    if not duration:
        return None
    match = _DURATION_RE.match(duration.strip())
    if not match:
        return None
    days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def best_thumbnail(thumbnails: Optional[Dict[str, Any]]) -> Optional[str]:
    for key in THUMBNAIL_PREFERENCE:
        url = ((thumbnails or {}).get(key) or {}).get("url")
        if url:
            return url
    return None


def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def to_youtube_id(value: Optional[str]) -> Optional[str]:
    """
    Extract an 11 character YouTube video ID from a raw ID or URL.

    Handles youtu.be/<id>, watch?v=<id>, /embed/<id> and /shorts/<id>,
    then falls back to the first 11 character run in the input.
    """
    if not value:
        return None
    if _VIDEO_ID_RE.match(value):
        return value

    parsed = urlparse(value)
    host = (parsed.hostname or "").removeprefix("www.")
    parts = [p for p in parsed.path.split("/") if p]

    if host == "youtu.be" and parts and _VIDEO_ID_PREFIX_RE.match(parts[0]):
        return parts[0][:11]

    if host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        v = (parse_qs(parsed.query).get("v") or [""])[0]
        if _VIDEO_ID_PREFIX_RE.match(v):
            return v[:11]
        for marker in ("embed", "shorts"):
            if marker in parts:
                i = parts.index(marker)
                if i + 1 < len(parts) and _VIDEO_ID_PREFIX_RE.match(parts[i + 1]):
                    return parts[i + 1][:11]

    match = _VIDEO_ID_ANYWHERE_RE.search(value)
    return match.group(1) if match else None


def normalize_youtube_item(item: Dict[str, Any], now: Optional[datetime] = None) -> VideoRecord:
    """
    Normalize one item of a YouTube Data API `videos` response.

    Missing publish time falls back to `now`; missing statistics become 0
    and a missing or unparseable duration stays unknown.

    Raises:
        KeyError: item has no id
    """
    video_id = item["id"]
    snippet = item.get("snippet") or {}
    statistics = item.get("statistics") or {}
    content_details = item.get("contentDetails") or {}

    published_raw = snippet.get("publishedAt")
    if published_raw:
        published_at = datetime.fromisoformat(published_raw.replace("Z", "+00:00"))
    else:
        published_at = now or datetime.now(timezone.utc)

    return VideoRecord(
        id=video_id,
        platform=YOUTUBE,
        platform_video_id=video_id,
        title=snippet.get("title", ""),
        channel_title=snippet.get("channelTitle", ""),
        description=snippet.get("description", ""),
        url=watch_url(video_id),
        thumbnail_url=best_thumbnail(snippet.get("thumbnails")),
        duration_sec=iso8601_duration_to_seconds(content_details.get("duration")),
        published_at=published_at,
        views=int(statistics.get("viewCount", 0)),
        likes=int(statistics.get("likeCount", 0)),
    )
