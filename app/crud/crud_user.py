# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import models
from app.schemas import schemas
from app.utils.security import generate_reset_token, get_password_hash


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100, include_admins: bool = False):
    query = db.query(models.User)
    if not include_admins:
        query = query.filter(models.User.role != models.UserRole.ADMIN.value)
    return query.order_by(models.User.created_at.desc(), models.User.id.desc()).offset(skip).limit(limit).all()


def ngo_exists_for_organization(db: Session, organization_name: str) -> bool:
    return (
        db.query(models.User.id)
        .filter(
            models.User.role == models.UserRole.NGO.value,
            models.User.organization_name == organization_name,
        )
        .first()
        is not None
    )


def get_organization_names(db: Session) -> List[str]:
    """
    Returns the distinct organization names registered by NGOs.
    """
    rows = (
        db.query(models.User.organization_name)
        .filter(
            models.User.role == models.UserRole.NGO.value,
            models.User.organization_name.isnot(None),
        )
        .distinct()
        .order_by(models.User.organization_name)
        .all()
    )
    return [row.organization_name for row in rows]


def get_volunteers_for_organization(db: Session, organization_name: Optional[str]):
    """
    Approved volunteers linked to an NGO through the organization name.
    """
    if not organization_name:
        return []
    return (
        db.query(models.User)
        .filter(
            models.User.role == models.UserRole.VOLUNTEER.value,
            models.User.organization_name == organization_name,
            models.User.is_approved.is_(True),
        )
        .order_by(models.User.name)
        .all()
    )


def count_users_by_role(db: Session) -> Dict[str, int]:
    rows = db.query(models.User.role, func.count(models.User.id)).group_by(models.User.role).all()
    counts = {role.value: 0 for role in models.UserRole}
    counts.update({role: count for role, count in rows})
    return counts


def create_user(db: Session, user: schemas.UserCreate) -> Optional[models.User]:
    db_user = models.User(
        name=user.name,
        email=user.email,
        password=get_password_hash(user.password),
        role=user.role,
        organization_name=user.organization_name,
        contact_number=user.contact_number,
        is_approved=False,
    )
    return _save_new_user(db, db_user)


def create_admin(db: Session, name: str, email: str, password: str) -> Optional[models.User]:
    db_admin = models.User(
        name=name,
        email=email,
        password=get_password_hash(password),
        role=models.UserRole.ADMIN.value,
        is_approved=True,
    )
    return _save_new_user(db, db_admin)


def _save_new_user(db: Session, db_user: models.User) -> Optional[models.User]:
    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user
    except IntegrityError:
        db.rollback()
        return None  # Indicate that creation failed, likely due to duplicate email


def update_user(db: Session, db_user: models.User, changes: schemas.UserUpdate) -> models.User:
    update_data = changes.model_dump(exclude_unset=True, exclude={"password"})
    for key, value in update_data.items():
        setattr(db_user, key, value)

    if changes.password:
        db_user.password = get_password_hash(changes.password)

    db.commit()
    db.refresh(db_user)
    return db_user


def set_approval(db: Session, db_user: models.User, approved: bool) -> models.User:
    db_user.is_approved = approved
    db.commit()
    db.refresh(db_user)
    return db_user


def increment_completed_orders(db: Session, user_id: int) -> None:
    db.query(models.User).filter(models.User.id == user_id).update(
        {models.User.completed_orders: models.User.completed_orders + 1}, synchronize_session=False
    )
    db.commit()


def issue_reset_token(db: Session, db_user: models.User, expires_in: timedelta) -> str:
    token = generate_reset_token()
    db_user.reset_password_token = token
    db_user.reset_password_expires = models.utcnow() + expires_in
    db.commit()
    return token


def get_user_by_valid_reset_token(db: Session, token: str) -> Optional[models.User]:
    return (
        db.query(models.User)
        .filter(
            models.User.reset_password_token == token,
            models.User.reset_password_expires > models.utcnow(),
        )
        .first()
    )


def reset_password(db: Session, db_user: models.User, new_password: str) -> models.User:
    db_user.password = get_password_hash(new_password)
    db_user.reset_password_token = None
    db_user.reset_password_expires = None
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, db_user: models.User) -> None:
    db.delete(db_user)
    db.commit()
