"""Pytest configuration and fixtures."""

import os

# Must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app import models  # noqa: F401
from app.main import app


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """Test client wired to the in-memory database."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
def customer(client) -> dict:
    """A saved customer."""
    response = client.post(
        "/api/customers/",
        json={"name": "Asha Verma", "phone": "9810012345", "address": "12 MG Road, Pune"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def policy(client, customer, today) -> dict:
    """A monthly policy of 1200 due in 20 days."""
    response = client.post(
        f"/api/customers/{customer['id']}/policies/",
        json={
            "policy_number": "LIC-100234",
            "plan_name": "Jeevan Anand",
            "premium": 1200,
            "mode": "Monthly",
            "due_date": (today + timedelta(days=20)).isoformat(),
            "sum_assured": 500000,
        },
    )
    assert response.status_code == 201
    return response.json()
