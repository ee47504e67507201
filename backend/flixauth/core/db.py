"""Database setup for SQLAlchemy sessions and engine."""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings, settings


def build_engine(cfg: Settings):
    url = make_url(cfg.sqlalchemy_url())
    if url.get_backend_name() == "sqlite":
        # In-memory SQLite lives inside one connection, so every session must share it.
        kwargs = {"connect_args": {"check_same_thread": False}}
        if not url.database or url.database == ":memory:":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, **kwargs)

    connect_args = {}
    if cfg.DB_SSL:
        # pymysql: no CA given means TLS without certificate verification.
        connect_args["ssl"] = {"check_hostname": False}
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=0,
        connect_args=connect_args,
        future=True,
    )


engine = build_engine(settings)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
