"""Record and row builders shared by the tests"""
from datetime import datetime, timedelta, timezone
from typing import Iterable

from core.models import SupportEvent, Video
from ranking.records import VideoRecord

# Wednesday 2025-01-15 03:00 UTC = 12:00 local (UTC+9)
NOW = datetime(2025, 1, 15, 3, 0, tzinfo=timezone.utc)


def make_video(video_id: str, *, hours_ago: float = 1, views: int = 0, likes: int = 0,
               duration_sec=300, url=None, channel_title="chan", title=None,
               support_total: int = 0, now: datetime = NOW) -> VideoRecord:
    """Build a record published `hours_ago` before `now`"""
    return VideoRecord(
        id=video_id,
        platform_video_id=f"yt_{video_id}",
        title=title or f"Video {video_id}",
        channel_title=channel_title,
        url=url or f"https://www.youtube.com/watch?v=yt_{video_id}",
        duration_sec=duration_sec,
        published_at=now - timedelta(hours=hours_ago),
        views=views,
        likes=likes,
        support_total=support_total,
    )


def insert_videos(session, records: Iterable[VideoRecord]) -> None:
    for r in records:
        session.add(Video(
            id=r.id,
            platform=r.platform,
            platform_video_id=r.platform_video_id,
            title=r.title,
            description=r.description,
            channel_title=r.channel_title,
            url=r.url,
            thumbnail_url=r.thumbnail_url,
            duration_sec=r.duration_sec,
            published_at=r.published_at,
            views=r.views,
            likes=r.likes,
            support_points=r.support_total,
        ))
    session.commit()


def insert_support(session, video_id: str, created_at: datetime, amount=None,
                   ip_hash: str = "h", count: int = 1) -> None:
    for _ in range(count):
        session.add(SupportEvent(
            video_id=video_id, amount=amount, ip_hash=ip_hash,
            user_agent="pytest", created_at=created_at,
        ))
    session.commit()


