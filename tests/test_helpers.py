# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import itertools
from typing import Optional

from sqlalchemy.orm import Session

from app.db import models
from app.dependencies import create_access_token_for_user
from app.schemas import schemas
from app.utils.security import get_password_hash

DEFAULT_PASSWORD = "password123"
# Hashed once and shared by every fixture user
DEFAULT_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)

_email_counter = itertools.count(1)


def create_user(
    db_session: Session,
    role: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    organization_name: Optional[str] = None,
    is_approved: bool = True,
) -> models.User:
    user = models.User(
        name=name or f"Test {role}",
        email=email or f"{role}{next(_email_counter)}@example.com",
        password=DEFAULT_PASSWORD_HASH,
        role=role,
        organization_name=organization_name,
        is_approved=is_approved,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def actor_for(user: models.User) -> schemas.Actor:
    return schemas.Actor.model_validate(user)


def auth_headers(user: models.User) -> dict:
    return {"Authorization": f"Bearer {create_access_token_for_user(user)}"}


def donation_payload(**overrides) -> dict:
    payload = {
        "title": "Bread",
        "description": "Fresh loaves from today's bake",
        "quantity": 10,
        "unit": "kg",
        "expiry_time": "2030-01-01T18:00:00",
        "pickup_window_start": "16:00",
        "pickup_window_end": "18:00",
        "pickup_location": "12 Baker Street",
        "temperature_requirements": "Room temperature",
        "dietary_info": "Contains gluten",
    }
    payload.update(overrides)
    return payload


def donation_create(**overrides) -> schemas.DonationCreate:
    return schemas.DonationCreate(**donation_payload(**overrides))
