"""
Pytest configuration for jwt_provider. Use in-memory SQLite so tests don't touch the filesystem.
"""
import os

import pytest

# In-memory SQLite; database.py uses StaticPool so all connections share the same DB
os.environ["JWT_PROVIDER_DATABASE_URL"] = "sqlite:///:memory:"


@pytest.fixture
def fresh_db():
    """Empty state store for each test."""
    from jwt_provider.database import SessionLocal, engine, init_db
    from jwt_provider.models import Base

    Base.metadata.drop_all(bind=engine)
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
