#!/usr/bin/env python3
import logging
import argparse
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.db import create_db_engine, create_session_factory
from core.logging import setup_json_logging
from collection.clients.youtube import YouTubeClient
from ranking.records import to_youtube_id
from store.video_store import VideoStore

logger = logging.getLogger(__name__)


class VideoRefresher:
    """Re-fetch metadata for known video IDs and upsert it"""

    def __init__(self, session: Session, client: YouTubeClient):
        self.store = VideoStore(session)
        self.client = client

    def refresh(self, raw_ids: List[str], dry_run: bool = False) -> Tuple[int, int]:
        """Refresh the given IDs or URLs; returns (fetched, upserted)"""
        trace_id = f"refresh_videos_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        video_ids = [vid for vid in (to_youtube_id(raw) for raw in raw_ids) if vid]

        logger.info("Starting video refresh", extra={
            "trace_id": trace_id,
            "total": len(video_ids)
        })

        if not video_ids:
            logger.warning("No valid video IDs given", extra={"trace_id": trace_id})
            return 0, 0

        videos = self.client.fetch_details(video_ids)

        if dry_run:
            logger.info("Dry run mode - no database changes", extra={
                "trace_id": trace_id,
                "returned": len(videos)
            })
            return len(videos), 0

        upserted = self.store.upsert_videos(videos)

        logger.info("Video refresh completed", extra={
            "trace_id": trace_id,
            "total": len(video_ids),
            "returned": upserted
        })
        return len(videos), upserted


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None):
    parser = argparse.ArgumentParser(description="Refresh YouTube video metadata by ID or URL")
    parser.add_argument("ids", nargs="+", help="Video IDs or URLs (comma separated lists allowed)")
    parser.add_argument("--dry-run", action="store_true", help="Don't write to database")

    args = parser.parse_args(argv)
    settings = settings or get_settings()

    setup_json_logging(settings.log_level)

    raw_ids = [part.strip() for arg in args.ids for part in arg.split(",") if part.strip()]
    session_factory = create_session_factory(create_db_engine(settings.database_url))

    with session_factory() as session, YouTubeClient(settings) as client:
        fetched, upserted = VideoRefresher(session, client).refresh(raw_ids, args.dry_run)

    print(f"fetched={fetched} upserted={upserted}")


if __name__ == "__main__":
    main()
