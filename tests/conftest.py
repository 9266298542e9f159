"""
Shared fixtures for subscription tests.

The MySQL session dependency is replaced by an in-memory SQLite database so
route and service tests run without any external services.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from db.config import get_mysql_session
from db.migrations import run_migrations
from services.subscription_service import SubscriptionService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def subscription_service(session):
    return SubscriptionService(session)


@pytest.fixture
def client(engine):
    SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _override_session():
        session = SessionTesting()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_mysql_session] = _override_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def subscription_factory(subscription_service):
    """Factory fixture creating persisted subscriptions with sensible defaults."""

    def _create(
        user_id: str = "60601fee-2bf1-4721-ae6f-7636e79a0cba",
        service_name: str = "Yandex Plus",
        price: int = 400,
        start_date: date = date(2024, 1, 1),
        end_date: date = None,
    ) -> dict:
        return subscription_service.create_subscription(
            user_id=user_id,
            service_name=service_name,
            price=price,
            start_date=start_date,
            end_date=end_date,
        )

    return _create
