from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Base class for models
Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create SQLAlchemy engine for the given URL"""
    if database_url.startswith("sqlite"):
        # In-memory sqlite needs a single shared connection
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Yield a session and always close it"""
    db = factory()
    try:
        yield db
    finally:
        db.close()
