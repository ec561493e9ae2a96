"""
Engine and sessions for the resource state store (resource_states, audit_log).
One session per API request or per host call; the host commits after each lifecycle step.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jwt_provider.config import DATABASE_URL
from jwt_provider.models import Base


def _make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url)
    # Requests may be served on worker threads other than the one that opened the connection
    connect_args = {"check_same_thread": False}
    if url.startswith("sqlite:///:memory:"):
        # A single shared connection, otherwise every session would see its own empty store
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the state and audit tables if missing."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency: one state-store session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
