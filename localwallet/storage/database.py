"""
Database engine and session management.

Provides the SQLAlchemy engine and session factory backing the storage slot.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from localwallet.config import settings
from localwallet.models.db import Base


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Create an engine for the given URL (defaults to settings.database_url).

    In-memory SQLite URLs share a single connection so every session
    sees the same database.
    """
    url = database_url or settings.database_url
    if echo is None:
        echo = settings.debug

    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(url, echo=echo, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to an engine."""
    return sessionmaker(engine, class_=Session, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models. Safe to call repeatedly.
    """
    Base.metadata.create_all(engine)


def drop_db(engine: Engine) -> None:
    """
    Drop all database tables.

    WARNING: Destroys all data. Use only for testing.
    """
    Base.metadata.drop_all(engine)
