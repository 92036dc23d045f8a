import ssl
import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine, Column, DateTime, Uuid
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from freshtrack.config import get_settings

# Hosted Postgres providers that refuse plain-text connections
CLOUD_HOST_MARKERS = ("supabase", "neon.tech", "pooler")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def database_url(raw: str) -> str:
    """Point bare Postgres URLs at the psycopg v3 driver (not psycopg2)."""
    for prefix in ("postgresql://", "postgres://"):
        if raw.startswith(prefix):
            return "postgresql+psycopg://" + raw[len(prefix):]
    return raw


def is_cloud_url(url: str) -> bool:
    return any(marker in url for marker in CLOUD_HOST_MARKERS) or "sslmode=require" in url


def engine_connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        # Request handlers and the change feed run on different threads
        return {"check_same_thread": False}
    if is_cloud_url(url):
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return {"ssl": ctx}
    return {}


_db_url = database_url(get_settings().DATABASE_URL)
engine = create_engine(_db_url, connect_args=engine_connect_args(_db_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


class BaseMixin:
    """UUID primary key plus created/updated timestamps for every FreshTrack table."""

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


def get_db():
    """Request-scoped session; the route commits, this only closes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
