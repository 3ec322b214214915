"""Persistence Context - engine, session factory and schema bootstrap"""
import logging
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.config import settings

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(url: str) -> Engine:
    """Create the engine; SQLite needs cross-thread access for the threadpool."""
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory databases only live as long as their single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_session() -> Iterator[Session]:
    """FastAPI dependency: one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_db_and_tables() -> None:
    """Create the Fornecedor table and the identity schema if missing."""
    import infrastructure.models  # noqa: F401  (registers the mappers)

    Base.metadata.create_all(bind=engine)
    log.info("Database schema ready (%s)", engine.url.render_as_string(hide_password=True))


def drop_db_and_tables() -> None:
    import infrastructure.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
