# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Safety check to prevent tests from running against production database
if os.getenv("TESTING") != "1":
    os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

# Create test database engine and session
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

from app.db.database import Base, get_db
from app.db import models
from app.app import app
from tests.test_helpers import create_user


@pytest.fixture(name="db_session", scope="function")
def db_session_fixture():
    """
    Creates a new database session for each test, with all tables created.
    """
    Base.metadata.create_all(bind=test_engine)

    db = TestSessionLocal()

    try:
        yield db
    finally:
        db.close()
        # Drop all tables after the test to ensure a clean slate
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(name="email_handlers")
def email_handlers_fixture(mocker):
    """
    Replaces every background email handler so no test talks to SendGrid.
    """
    return {
        name: mocker.patch(f"app.events.email_handlers.{name}")
        for name in (
            "send_welcome_email",
            "send_approval_email",
            "send_reset_password_email",
            "send_contact_email",
            "send_notification_email",
        )
    }


@pytest.fixture(name="client")
def client_fixture(db_session: Session, email_handlers):
    """
    Provides a FastAPI TestClient that overrides the get_db dependency
    to use the test database session.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="donor")
def donor_fixture(db_session: Session) -> models.User:
    return create_user(db_session, "donor", name="Alice Donor")


@pytest.fixture(name="ngo")
def ngo_fixture(db_session: Session) -> models.User:
    return create_user(db_session, "ngo", name="Bob", organization_name="Food Bank North")


@pytest.fixture(name="other_ngo")
def other_ngo_fixture(db_session: Session) -> models.User:
    return create_user(db_session, "ngo", name="Carol", organization_name="City Harvest")


@pytest.fixture(name="volunteer")
def volunteer_fixture(db_session: Session) -> models.User:
    return create_user(db_session, "volunteer", name="Victor Volunteer", organization_name="Food Bank North")


@pytest.fixture(name="admin")
def admin_fixture(db_session: Session) -> models.User:
    return create_user(db_session, "admin", name="Ada Admin")
