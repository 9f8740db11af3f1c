import uuid

from sqlalchemy import Column, String, Text, Integer, BIGINT, TIMESTAMP, Index, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from core.db import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Video(Base):
    """Video metadata table"""
    __tablename__ = "videos"

    id = Column(String, primary_key=True, default=_new_id, comment="Opaque video ID")
    platform = Column(String, nullable=False, default="youtube", comment="Source platform")
    platform_video_id = Column(String, nullable=False, comment="Video ID on the source platform")
    title = Column(Text, comment="Video title")
    description = Column(Text, comment="Video description")
    channel_title = Column(Text, comment="Channel name")
    url = Column(Text, comment="Canonical watch URL")
    thumbnail_url = Column(Text, comment="Best available thumbnail")
    duration_sec = Column(Integer, comment="Duration in seconds, null when unknown")
    published_at = Column(TIMESTAMP(timezone=True), nullable=False,
                          comment="Video publication time (UTC)")
    views = Column(BIGINT, default=0, comment="View count at last refresh")
    likes = Column(BIGINT, default=0, comment="Like count at last refresh")
    support_points = Column(Integer, nullable=False, default=0,
                            comment="Running total of support amounts")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(),
                        onupdate=func.now())

    support_events = relationship("SupportEvent", back_populates="video")

    __table_args__ = (
        UniqueConstraint("platform", "platform_video_id", name="uq_videos_platform_video"),
        Index("idx_videos_published_at", "published_at"),
        Index("idx_videos_support_points", "support_points"),
    )
