"""
Integration test fixtures. Overrides get_db with an in-memory DB and get_llm with a
scripted model so API tests never reach Ollama.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.models.models import QuizQuestion, ROLE_MANAGER, ROLE_TECHNICIAN, TrainingModule, User
from api.utils.jwt import get_password_hash

PASSWORD = "testpass123"


@pytest.fixture
def session_factory():
    """In-memory engine shared across threads; TestClient runs handlers in a threadpool."""
    from api.config import Base
    import api.models.models  # noqa: F401
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def db(session_factory):
    """Direct session for seeding and asserting on stored rows."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api_client(override_get_db, fake_llm):
    """FastAPI TestClient with in-memory DB and scripted LLM overrides."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.bootstrap import get_llm
    from api.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm] = lambda: fake_llm
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(email: str, *, full_name: str = "", role: str = ROLE_TECHNICIAN) -> User:
        user = User(
            email=email.lower(),
            full_name=full_name or email.split("@", 1)[0],
            role=role,
            hashed_password=get_password_hash(PASSWORD),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def login(api_client):
    """Log the shared client in as `email`; the access_token cookie replaces any previous one."""

    def _login(email: str, password: str = PASSWORD):
        response = api_client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return api_client

    return _login


@pytest.fixture
def technician(make_user):
    return make_user("tech@pharmacy.test", full_name="Taylor Tech")


@pytest.fixture
def manager(make_user):
    return make_user("lead.manager@pharmacy.test", full_name="Morgan Lead", role=ROLE_MANAGER)


@pytest.fixture
def modules(db):
    """m1 has a two-question quiz (correct answer is option 1 on both); m2 has none."""
    db.add_all([
        TrainingModule(id="m1", title="Sterile Compounding", order_index=1, content="# Sterile"),
        TrainingModule(id="m2", title="Inventory Control", order_index=2, content="# Inventory"),
        QuizQuestion(id="q1", module_id="m1", order_index=1, prompt="ISO class of a PEC?", options=["ISO 8", "ISO 5", "ISO 7"], correct_answer="ISO 5"),
        QuizQuestion(id="q2", module_id="m1", order_index=2, prompt="Garbing order starts with?", options=["Gloves", "Shoe covers"], correct_answer="Shoe covers"),
    ])
    db.commit()
    return ["m1", "m2"]
