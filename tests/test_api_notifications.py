# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.crud import crud_notification
from app.services.lifecycle import DonationLifecycle
from tests.test_helpers import actor_for, auth_headers, donation_create


def test_send_notification(client: TestClient, ngo, volunteer, email_handlers):
    response = client.post(
        "/api/v1/notifications/",
        json={"recipient_id": volunteer.id, "message": "Pickup moved to 17:00"},
        headers=auth_headers(ngo),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["recipient_id"] == volunteer.id
    assert data["is_read"] is False
    email_handlers["send_notification_email"].assert_not_called()


def test_send_notification_with_email_copy(client: TestClient, ngo, volunteer, email_handlers):
    response = client.post(
        "/api/v1/notifications/",
        json={"recipient_id": volunteer.id, "message": "Pickup moved", "email": volunteer.email},
        headers=auth_headers(ngo),
    )

    assert response.status_code == 201
    email_handlers["send_notification_email"].assert_called_once_with(volunteer.email, "Pickup moved")


def test_send_notification_unknown_recipient(client: TestClient, ngo):
    response = client.post(
        "/api/v1/notifications/",
        json={"recipient_id": 9999, "message": "Hello"},
        headers=auth_headers(ngo),
    )

    assert response.status_code == 404


def test_send_notification_unknown_donation(client: TestClient, db_session: Session, ngo, volunteer):
    response = client.post(
        "/api/v1/notifications/",
        json={"recipient_id": volunteer.id, "message": "hi", "donation_id": 9999},
        headers=auth_headers(ngo),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Donation not found"
    assert crud_notification.get_notifications_for_user(db_session, volunteer.id) == []


def test_send_notification_about_existing_donation(client: TestClient, db_session: Session, donor, ngo, volunteer):
    donation = DonationLifecycle(db_session).create(actor_for(donor), donation_create())

    response = client.post(
        "/api/v1/notifications/",
        json={"recipient_id": volunteer.id, "message": "Bread is ready", "donation_id": donation.id},
        headers=auth_headers(ngo),
    )

    assert response.status_code == 201
    assert response.json()["donation_id"] == donation.id


def test_read_notifications_newest_first(client: TestClient, db_session: Session, donor):
    first = crud_notification.create_notification(db_session, donor.id, "first")
    second = crud_notification.create_notification(db_session, donor.id, "second")

    response = client.get("/api/v1/notifications/", headers=auth_headers(donor))

    assert response.status_code == 200
    assert [n["id"] for n in response.json()] == [second.id, first.id]


def test_read_notifications_only_own(client: TestClient, db_session: Session, donor, ngo):
    crud_notification.create_notification(db_session, donor.id, "for the donor")

    response = client.get("/api/v1/notifications/", headers=auth_headers(ngo))

    assert response.json() == []


def test_mark_notification_as_read(client: TestClient, db_session: Session, donor):
    note = crud_notification.create_notification(db_session, donor.id, "hello")

    response = client.put(f"/api/v1/notifications/{note.id}/read", headers=auth_headers(donor))

    assert response.status_code == 200
    assert response.json()["is_read"] is True


def test_mark_someone_elses_notification(client: TestClient, db_session: Session, donor, ngo):
    note = crud_notification.create_notification(db_session, donor.id, "hello")

    response = client.put(f"/api/v1/notifications/{note.id}/read", headers=auth_headers(ngo))

    assert response.status_code == 403


def test_mark_unknown_notification(client: TestClient, donor):
    response = client.put("/api/v1/notifications/9999/read", headers=auth_headers(donor))

    assert response.status_code == 404
