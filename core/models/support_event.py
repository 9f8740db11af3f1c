from sqlalchemy import Column, String, Integer, BIGINT, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from core.db import Base


class SupportEvent(Base):
    """Append-only log of support actions"""
    __tablename__ = "support_events"

    id = Column(BIGINT().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    video_id = Column(String, ForeignKey("videos.id"), nullable=False,
                      comment="Reference to video")
    amount = Column(Integer, comment="Support amount, 1 when null")
    ip_hash = Column(String, comment="Hashed client fingerprint")
    user_agent = Column(String, comment="Client user agent")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False,
                        default=func.now(), comment="Event time (UTC)")

    video = relationship("Video", back_populates="support_events")

    __table_args__ = (
        Index("idx_support_events_video_created", "video_id", "created_at"),
        Index("idx_support_events_fingerprint", "ip_hash", "video_id", "created_at"),
    )
