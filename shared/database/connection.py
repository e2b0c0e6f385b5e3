"""
Shared database connection and session management for the fitness coach
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from coach_app.config.settings import settings

class Base(DeclarativeBase):
    """Base class for all models"""

def build_engine(database_url: str) -> Engine:
    """Create an engine for the given URL.

    Server databases get a pooled engine; SQLite gets a thread-shareable one
    because store calls run in worker threads.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=False,  # Set to True for SQL debugging
    )

engine = build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_connection(bind: Engine | None = None) -> bool:
    """Test database connectivity"""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False

def create_all_tables(bind: Engine | None = None) -> None:
    """Create all tables defined in models"""
    from . import models  # noqa: F401  registers the mappers
    Base.metadata.create_all(bind=bind or engine)

def drop_all_tables(bind: Engine | None = None) -> None:
    """Drop all tables (use with caution!)"""
    Base.metadata.drop_all(bind=bind or engine)
