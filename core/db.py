from __future__ import annotations

import logging

from sqlalchemy import create_engine  # type: ignore
from sqlalchemy.engine import Engine  # type: ignore
from sqlalchemy.orm import sessionmaker, declarative_base  # type: ignore
from sqlalchemy.pool import StaticPool  # type: ignore

from config import get_config
from shared.exceptions import RepositoryConnectionError


# DATABASE_URL example: postgresql+psycopg2://user:password@db:5432/bookstore
logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str, *, echo: bool = False) -> Engine | None:
    if not url:
        return None
    if url.startswith("sqlite"):
        # Single shared connection for in-memory databases so every
        # session sees the same tables
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, future=True, **kwargs)
    db = get_config().database
    return create_engine(
        url,
        pool_pre_ping=True,
        echo=echo,
        future=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    # Records are read after commit, so keep loaded state alive
    return sessionmaker(bind=bind, expire_on_commit=False, future=True)


def _make_engine() -> Engine | None:
    cfg = get_config().database
    try:
        return make_engine(cfg.url, echo=cfg.echo)
    except Exception as exc:
        logger.error("could not create database engine: %s", exc)
        return None


engine = _make_engine()
SessionLocal = make_session_factory(engine) if engine is not None else None


def get_session_factory() -> sessionmaker:
    """Session factory injected into repositories (FastAPI dependency)."""
    if SessionLocal is None:
        raise RepositoryConnectionError("database")
    return SessionLocal


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    # Registers every mapped class on Base.metadata
    import core.models  # noqa: F401

    target = bind if bind is not None else engine
    if target is None:
        logger.warning("DATABASE_URL not configured; skipping schema creation")
        return
    Base.metadata.create_all(bind=target)
