"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from dataclasses import replace
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from capstack_gateway.api.main import create_app
from capstack_gateway.api.dependencies import get_notification_client
from capstack_gateway.infrastructure.database.models import Base
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.domain.models import DEFAULT_PROFILE, FinancialProfile, RiskTolerance


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotificationClient:
    """Stand-in webhook client that records events instead of posting them"""

    def __init__(self):
        self.events = []

    async def send_alert(self, user_id, email, message, alert_type):
        self.events.append(("ALERT", user_id, email, message, alert_type))

    async def send_achievement(self, user_id, email, achievement, details):
        self.events.append(("ACHIEVEMENT", user_id, email, achievement, details))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> RecordingNotificationClient:
    return RecordingNotificationClient()


@pytest.fixture
def client(db: Session, notifier: RecordingNotificationClient) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_client] = lambda: notifier
    return TestClient(app)


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Register a user and return bearer headers for it"""
    response = client.post(
        "/v1/auth/register",
        json={"email": "asha@example.com", "password": "s3cret-pass", "name": "Asha"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def default_profile() -> FinancialProfile:
    return replace(DEFAULT_PROFILE)


@pytest.fixture
def strong_profile() -> FinancialProfile:
    """High earner with a large fund and no debt"""
    return FinancialProfile(
        monthly_income=150000,
        monthly_expenses=60000,
        emergency_fund=1200000,
        debt_amount=0,
        job_stability_score=9,
        risk_tolerance=RiskTolerance.HIGH,
        experience_years=10,
    )


@pytest.fixture
def fragile_profile() -> FinancialProfile:
    """Spending nearly all income with almost no buffer"""
    return FinancialProfile(
        monthly_income=30000,
        monthly_expenses=29000,
        emergency_fund=10000,
        debt_amount=200000,
        job_stability_score=3,
        risk_tolerance=RiskTolerance.LOW,
        location="tier2",
        industry="retail",
        experience_years=1,
    )
