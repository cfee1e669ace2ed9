"""Database configuration and session management."""

from typing import Any

from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from vdir.config import get_settings

settings = get_settings()


def _connect_args(url: str) -> dict[str, Any]:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.database_echo,
    connect_args=_connect_args(settings.database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def init_db(bind: Engine | Connection | None = None) -> None:
    """Initialize the database by creating all tables."""
    # Import all models here so they are registered with Base.metadata
    from vdir import models  # noqa: F401

    Base.metadata.create_all(bind=bind if bind is not None else engine)


def check_connection(db: Session) -> None:
    """Run a trivial query so connection problems surface before any command."""
    db.execute(text("select 1"))
