import base64
import os
from uuid import uuid4

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "interview-access-test-secret-0123456789")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app
from app.models.interview import Interview
from app.utils.enums import PaymentStatus

OWNER_ID = "user-1"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def legacy_token(user_id: str = OWNER_ID) -> str:
    return base64.b64encode(f"{user_id}:1700000000000".encode()).decode()


def auth_headers(user_id: str = OWNER_ID) -> dict:
    return {"Authorization": f"Bearer {legacy_token(user_id)}"}


@pytest.fixture
def make_interview(db_session):
    def _make(**overrides) -> Interview:
        fields = {
            "id": str(uuid4()),
            "user_id": OWNER_ID,
            "candidate_name": "Jordan Lee",
            "language": "en",
            "interview_questions": ["Tell me about yourself."],
            "is_conducted": False,
            "payment_status": PaymentStatus.COMPLETED.value,
            "total_time_spent_minutes": 0,
            "session_count": 0,
        }
        fields.update(overrides)
        interview = Interview(**fields)
        db_session.add(interview)
        db_session.commit()
        db_session.refresh(interview)
        return interview

    return _make
