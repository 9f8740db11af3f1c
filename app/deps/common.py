"""Common dependencies for FastAPI dependency injection"""
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Generator

from fastapi import Depends, Response
from sqlalchemy.orm import Session, sessionmaker

from core.config import Settings, get_settings
from core.db import create_db_engine, create_session_factory, session_scope
from store.video_store import VideoStore


@lru_cache
def _session_factory_for(database_url: str) -> sessionmaker:
    return create_session_factory(create_db_engine(database_url))


def get_app_settings() -> Settings:
    """Application settings dependency"""
    return get_settings()


def get_db_session(settings: Settings = Depends(get_app_settings)) -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields:
        Session: SQLAlchemy database session, closed after the request
    """
    yield from session_scope(_session_factory_for(settings.database_url))


def get_video_store(session: Session = Depends(get_db_session)) -> VideoStore:
    """Video store bound to the request session"""
    return VideoStore(session)


def get_trace_id() -> str:
    """
    Generate unique trace ID for request tracking.

    Returns:
        str: Unique trace ID
    """
    return f"api_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def no_store(response: Response) -> None:
    """Mark the response as uncacheable"""
    response.headers["Cache-Control"] = "no-store"
