import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Sequence

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import UpstreamUnavailable
from core.models import SupportEvent, Video
from ranking.records import YOUTUBE, SupportEventRecord, VideoRecord, as_utc

logger = logging.getLogger(__name__)


class VideoStore:
    """
    Read and write access to the videos and support_events tables.

    The session is owned by the caller; every query failure is raised as
    UpstreamUnavailable with the session rolled back.
    """

    def __init__(self, session: Session):
        self.db = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Video store {operation} failed: {e}", extra={
                "error_type": type(e).__name__
            })
            raise UpstreamUnavailable(f"Video store unavailable during {operation}") from e

    @staticmethod
    def _to_record(row: Video) -> VideoRecord:
        return VideoRecord(
            id=row.id,
            platform=row.platform,
            platform_video_id=row.platform_video_id,
            title=row.title,
            channel_title=row.channel_title,
            url=row.url,
            thumbnail_url=row.thumbnail_url,
            description=row.description,
            duration_sec=row.duration_sec,
            published_at=as_utc(row.published_at),
            views=row.views,
            likes=row.likes,
            support_total=row.support_points,
        )

    def _published_since_clause(self, since: datetime, platform: Optional[str],
                                query: Optional[str]):
        clauses = [Video.published_at >= since]
        if platform:
            clauses.append(Video.platform == platform)
        if query:
            pattern = f"%{query}%"
            clauses.append(or_(
                Video.title.ilike(pattern),
                Video.description.ilike(pattern),
                Video.channel_title.ilike(pattern),
            ))
        return clauses

    # Reads

    def find_published_since(self, since: datetime, *, platform: Optional[str] = YOUTUBE,
                             query: Optional[str] = None,
                             limit: Optional[int] = None) -> List[VideoRecord]:
        """Videos published at or after `since`, newest first"""
        stmt = (
            select(Video)
            .where(*self._published_since_clause(since, platform, query))
            .order_by(Video.published_at.desc(), Video.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._guard("find_published_since"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def find_recent(self, limit: int, *, platform: Optional[str] = None) -> List[VideoRecord]:
        """Newest videos regardless of publish window"""
        stmt = select(Video).order_by(Video.published_at.desc(), Video.id).limit(limit)
        if platform:
            stmt = stmt.where(Video.platform == platform)
        with self._guard("find_recent"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def get(self, video_id: str) -> Optional[VideoRecord]:
        """Look up by id, then by platform video id"""
        with self._guard("get"):
            row = self.db.get(Video, video_id)
            if row is None:
                row = self.db.execute(
                    select(Video).where(Video.platform_video_id == video_id).limit(1)
                ).scalars().first()
        return self._to_record(row) if row is not None else None

    def get_by_ids(self, video_ids: Sequence[str]) -> List[VideoRecord]:
        """Videos with the given ids, newest first; unknown ids are ignored"""
        if not video_ids:
            return []
        stmt = (
            select(Video)
            .where(Video.id.in_(list(video_ids)))
            .order_by(Video.published_at.desc(), Video.id)
        )
        with self._guard("get_by_ids"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def find_by_channel(self, channel_title: str, *, exclude_id: str, limit: int,
                        platform: str = YOUTUBE) -> List[VideoRecord]:
        stmt = (
            select(Video)
            .where(
                Video.channel_title == channel_title,
                Video.id != exclude_id,
                Video.platform == platform,
            )
            .order_by(Video.published_at.desc(), Video.id)
            .limit(limit)
        )
        with self._guard("find_by_channel"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def find_recent_excluding(self, exclude_ids: Sequence[str], *, limit: int,
                              platform: str = YOUTUBE) -> List[VideoRecord]:
        stmt = (
            select(Video)
            .where(Video.platform == platform, Video.id.not_in(list(exclude_ids)))
            .order_by(Video.published_at.desc(), Video.id)
            .limit(limit)
        )
        with self._guard("find_recent_excluding"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def find_top_supported(self, *, exclude_ids: Sequence[str], limit: int) -> List[VideoRecord]:
        """Videos by all-time support total, newest first on ties"""
        stmt = select(Video)
        if exclude_ids:
            stmt = stmt.where(Video.id.not_in(list(exclude_ids)))
        stmt = stmt.order_by(
            Video.support_points.desc(), Video.published_at.desc(), Video.id
        ).limit(limit)
        with self._guard("find_top_supported"):
            rows = self.db.execute(stmt).scalars().all()
        return [self._to_record(r) for r in rows]

    def support_counts_since(self, since: datetime, *,
                             video_ids: Optional[Sequence[str]] = None,
                             limit: Optional[int] = None) -> Dict[str, int]:
        """Support event count per video since `since`, highest first"""
        count = func.count(SupportEvent.id)
        stmt = (
            select(SupportEvent.video_id, count)
            .where(SupportEvent.created_at >= since)
            .group_by(SupportEvent.video_id)
            .order_by(count.desc(), SupportEvent.video_id)
        )
        if video_ids is not None:
            stmt = stmt.where(SupportEvent.video_id.in_(list(video_ids)))
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._guard("support_counts_since"):
            rows = self.db.execute(stmt).all()
        return {video_id: int(n) for video_id, n in rows}

    def find_support_events_since(self, since: datetime) -> List[SupportEventRecord]:
        """Support events created at or after `since`, oldest first"""
        stmt = (
            select(SupportEvent)
            .where(SupportEvent.created_at >= since)
            .order_by(SupportEvent.created_at, SupportEvent.id)
        )
        with self._guard("find_support_events_since"):
            rows = self.db.execute(stmt).scalars().all()
        return [
            SupportEventRecord(video_id=r.video_id, amount=r.amount, created_at=r.created_at)
            for r in rows
        ]

    def has_supported_since(self, video_id: str, ip_hash: str, since: datetime) -> bool:
        stmt = (
            select(SupportEvent.id)
            .where(
                SupportEvent.video_id == video_id,
                SupportEvent.ip_hash == ip_hash,
                SupportEvent.created_at >= since,
            )
            .limit(1)
        )
        with self._guard("has_supported_since"):
            return self.db.execute(stmt).first() is not None

    def support_total(self, video_id: str) -> int:
        with self._guard("support_total"):
            value = self.db.execute(
                select(Video.support_points).where(Video.id == video_id)
            ).scalar_one_or_none()
        return int(value or 0)

    # Writes

    def record_support(self, video_id: str, amount: int, *, ip_hash: str,
                       user_agent: str, created_at: Optional[datetime] = None) -> int:
        """Append a support event and bump the running total in one transaction"""
        created_at = created_at or datetime.now(timezone.utc)
        with self._guard("record_support"):
            self.db.add(SupportEvent(
                video_id=video_id,
                amount=amount,
                ip_hash=ip_hash,
                user_agent=user_agent,
                created_at=created_at,
            ))
            self.db.execute(
                update(Video)
                .where(Video.id == video_id)
                .values(support_points=Video.support_points + amount)
            )
            self.db.commit()
        return self.support_total(video_id)

    def upsert_videos(self, records: Sequence[VideoRecord]) -> int:
        """Insert or update videos keyed by (platform, platform_video_id)"""
        if not records:
            return 0

        video_data = [{
            "id": uuid.uuid4().hex,
            "platform": r.platform,
            "platform_video_id": r.platform_video_id,
            "title": r.title,
            "description": r.description,
            "channel_title": r.channel_title,
            "url": r.url,
            "thumbnail_url": r.thumbnail_url,
            "duration_sec": r.duration_sec,
            "published_at": r.published_at,
            "views": r.views,
            "likes": r.likes,
            "support_points": 0,
        } for r in records]

        dialect = self.db.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = insert(Video).values(video_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["platform", "platform_video_id"],
            set_={
                "title": stmt.excluded.title,
                "description": stmt.excluded.description,
                "channel_title": stmt.excluded.channel_title,
                "url": stmt.excluded.url,
                "thumbnail_url": stmt.excluded.thumbnail_url,
                "duration_sec": stmt.excluded.duration_sec,
                "published_at": stmt.excluded.published_at,
                "views": stmt.excluded.views,
                "likes": stmt.excluded.likes,
                "updated_at": func.now(),
            }
        )
        with self._guard("upsert_videos"):
            self.db.execute(stmt)
            self.db.commit()
        return len(video_data)
