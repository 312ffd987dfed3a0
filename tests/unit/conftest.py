"""
Unit test fixtures. No real LLM; DB-backed unit tests use the in-memory db_session
from the root conftest.
"""
import pytest

from api.models.models import ROLE_TECHNICIAN, TrainingModule, User as DbUser
from api.utils.jwt import get_password_hash


@pytest.fixture
def make_user(db_session):
    """Insert a user row; returns the ORM object."""

    def _make(email: str, *, full_name: str = "", role: str = ROLE_TECHNICIAN, password: str = "secret123"):
        user = DbUser(email=email.lower(), full_name=full_name, role=role, hashed_password=get_password_hash(password))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_module(db_session):
    def _make(module_id: str, title: str, order_index: int):
        m = TrainingModule(id=module_id, title=title, order_index=order_index)
        db_session.add(m)
        db_session.commit()
        return m

    return _make
