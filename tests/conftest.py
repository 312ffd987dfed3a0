"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
# Shared record builders (tests/rx_factories.py)
tests_path = Path(__file__).parent
if str(tests_path) not in sys.path:
    sys.path.insert(0, str(tests_path))

from rx_factories import FakeLLM, three_tech_snapshot as build_three_tech_snapshot  # noqa: E402


@pytest.fixture
def fake_llm():
    return FakeLLM(reply="1. Pair new technicians with mentors.")


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine shared across threads (TestClient runs handlers in a threadpool)."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session. Uses api.config.Base for schema."""
    from api.config import Base
    import api.models.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def three_tech_snapshot():
    return build_three_tech_snapshot()
