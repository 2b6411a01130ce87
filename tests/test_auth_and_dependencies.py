'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Jul 17 2025
# SPDX-License-Identifier: MIT
'''

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import crud_user
from app.db import models
from app.dependencies import create_access_token, verify_token
from app.errors import AuthenticationError
from app.utils.security import verify_password
from tests.test_helpers import DEFAULT_PASSWORD, auth_headers, create_user


def register_payload(**overrides) -> dict:
    payload = {
        "name": "New Donor",
        "email": "new.donor@example.com",
        "password": "secret123",
        "role": "donor",
    }
    payload.update(overrides)
    return payload


# --- Registration ---


def test_register_donor(client: TestClient, email_handlers):
    """
    Tests that a donor can register and starts unapproved.
    """
    response = client.post("/api/v1/register", json=register_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "donor"
    assert data["is_approved"] is False
    assert "password" not in data
    email_handlers["send_welcome_email"].assert_called_once_with(data["id"])


def test_register_existing_email(client: TestClient):
    """
    Tests registering with an email that is already registered.
    """
    assert client.post("/api/v1/register", json=register_payload()).status_code == 201

    response = client.post("/api/v1/register", json=register_payload(name="Someone Else"))

    assert response.status_code == 409
    assert response.json()["message"] == "Email already registered"


def test_register_admin_is_rejected(client: TestClient):
    response = client.post("/api/v1/register", json=register_payload(role="admin"))

    assert response.status_code == 400


def test_register_short_password(client: TestClient):
    response = client.post("/api/v1/register", json=register_payload(password="123"))

    assert response.status_code == 400
    assert response.json()["message"].startswith("password")


def test_register_ngo_requires_organization(client: TestClient):
    response = client.post("/api/v1/register", json=register_payload(role="ngo", email="ngo@example.com"))

    assert response.status_code == 400
    assert "organization_name" in response.json()["message"]


def test_register_volunteer_requires_known_ngo(client: TestClient, ngo):
    unknown = client.post(
        "/api/v1/register",
        json=register_payload(role="volunteer", email="v1@example.com", organization_name="Nobody Foods"),
    )
    known = client.post(
        "/api/v1/register",
        json=register_payload(role="volunteer", email="v2@example.com", organization_name="Food Bank North"),
    )

    assert unknown.status_code == 400
    assert known.status_code == 201
    assert known.json()["organization_name"] == "Food Bank North"


def test_organizations_lists_ngo_names(client: TestClient, ngo, other_ngo, volunteer):
    response = client.get("/api/v1/organizations")

    assert response.status_code == 200
    assert response.json() == ["City Harvest", "Food Bank North"]


# --- Login and tokens ---


def test_login_returns_token(client: TestClient, donor):
    response = client.post("/api/v1/login", data={"username": donor.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    token_data = verify_token(data["access_token"])
    assert token_data.user_id == donor.id
    assert token_data.role == "donor"


def test_login_invalid_credentials(client: TestClient, donor):
    """
    Tests login with non-existent email or incorrect password.
    """
    response = client.post("/api/v1/login", data={"username": "nobody@example.com", "password": "anypassword"})
    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect email or password"

    response = client.post("/api/v1/login", data={"username": donor.email, "password": "wrongpassword"})
    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect email or password"


def test_unapproved_user_can_still_log_in(client: TestClient, db_session: Session):
    pending = create_user(db_session, "donor", is_approved=False)

    response = client.post("/api/v1/login", data={"username": pending.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200


def test_create_access_token_with_custom_expiry():
    """Test create_access_token with custom expiry delta"""
    token = create_access_token({"sub": "1", "role": "donor"}, expires_delta=timedelta(minutes=60))

    assert isinstance(token, str)
    assert verify_token(token).user_id == 1


def test_verify_token_rejects_missing_claims():
    token = create_access_token({"sub": "1"})

    with pytest.raises(AuthenticationError):
        verify_token(token)


def test_verify_token_rejects_non_numeric_subject():
    token = create_access_token({"sub": "someone@example.com", "role": "donor"})

    with pytest.raises(AuthenticationError):
        verify_token(token)


def test_me_requires_token(client: TestClient):
    response = client.get("/api/v1/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Token missing"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_me_with_malformed_token(client: TestClient):
    response = client.get("/api/v1/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_with_expired_token(client: TestClient, donor):
    token = create_access_token(
        {"sub": str(donor.id), "role": donor.role}, expires_delta=timedelta(minutes=-5)
    )

    response = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_with_token_for_deleted_user(client: TestClient, db_session: Session, donor):
    headers = auth_headers(donor)
    crud_user.delete_user(db_session, donor)

    response = client.get("/api/v1/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_me_with_role_mismatch(client: TestClient, donor):
    token = create_access_token({"sub": str(donor.id), "role": "admin"})

    response = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_role_gate_forbids_other_roles(client: TestClient, volunteer):
    response = client.get("/api/v1/admin/users", headers=auth_headers(volunteer))

    assert response.status_code == 403
    assert "admin" in response.json()["message"]


# --- Profile ---


def test_read_me(client: TestClient, ngo):
    response = client.get("/api/v1/me", headers=auth_headers(ngo))

    assert response.status_code == 200
    assert response.json()["email"] == ngo.email
    assert response.json()["organization_name"] == "Food Bank North"


def test_update_me(client: TestClient, db_session: Session, donor):
    response = client.put(
        "/api/v1/me",
        json={"name": "Alice Baker", "contact_number": "555-0101", "password": "brandnew1"},
        headers=auth_headers(donor),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Alice Baker"
    assert response.json()["contact_number"] == "555-0101"
    db_session.refresh(donor)
    assert verify_password("brandnew1", donor.password)


# --- Password reset ---


def test_forgot_password_unknown_email(client: TestClient):
    response = client.post("/api/v1/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 404


def test_password_reset_flow(client: TestClient, db_session: Session, donor, email_handlers):
    response = client.post("/api/v1/forgot-password", json={"email": donor.email})
    assert response.status_code == 200

    db_session.refresh(donor)
    token = donor.reset_password_token
    assert token
    email_handlers["send_reset_password_email"].assert_called_once_with(
        donor.email, f"{settings.frontend_url}/reset-password/{token}"
    )

    response = client.post(f"/api/v1/reset-password/{token}", json={"password": "fresh-pass"})
    assert response.status_code == 200

    login = client.post("/api/v1/login", data={"username": donor.email, "password": "fresh-pass"})
    assert login.status_code == 200

    # tokens are single use
    reused = client.post(f"/api/v1/reset-password/{token}", json={"password": "another-pass"})
    assert reused.status_code == 400
    assert reused.json()["message"] == "Invalid or expired token"


def test_expired_reset_token_is_rejected(client: TestClient, db_session: Session, donor):
    token = crud_user.issue_reset_token(db_session, donor, expires_in=timedelta(minutes=60))
    donor.reset_password_expires = models.utcnow() - timedelta(seconds=1)
    db_session.commit()

    response = client.post(f"/api/v1/reset-password/{token}", json={"password": "fresh-pass"})

    assert response.status_code == 400
