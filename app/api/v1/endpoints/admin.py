# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from app.crud import crud_donation, crud_user
from app.db import models
from app.db.database import get_db
from app.dependencies import require_roles
from app.errors import ConflictError, NotFoundError
from app.events import email_handlers
from app.schemas import schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)


def _get_user_or_404(db: Session, user_id: int) -> models.User:
    db_user = crud_user.get_user(db, user_id)
    if db_user is None:
        raise NotFoundError("User does not exist")
    return db_user


@router.get("/users", response_model=List[schemas.User])
def read_users(
    skip: int = 0,
    limit: int = 100,
    admin: schemas.Actor = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    """
    Retrieves every non-admin account. (Admin access required)
    """
    return crud_user.get_users(db, skip=skip, limit=limit)


@router.put("/users/{user_id}/approve", response_model=schemas.User)
def approve_user(
    user_id: int,
    background_tasks: BackgroundTasks,
    admin: schemas.Actor = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    db_user = _get_user_or_404(db, user_id)
    if db_user.is_approved:
        raise ConflictError("User is already approved")

    db_user = crud_user.set_approval(db, db_user, True)
    logger.info("User %s approved by admin %s", user_id, admin.id)
    background_tasks.add_task(email_handlers.send_approval_email, db_user.id)
    return db_user


@router.put("/users/{user_id}/unapprove", response_model=schemas.User)
def unapprove_user(
    user_id: int,
    admin: schemas.Actor = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    db_user = _get_user_or_404(db, user_id)
    if not db_user.is_approved:
        raise ConflictError("User is not approved")

    db_user = crud_user.set_approval(db, db_user, False)
    logger.info("User %s unapproved by admin %s", user_id, admin.id)
    return db_user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    admin: schemas.Actor = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    """
    Permanently deletes an account. Admins cannot delete themselves, and an NGO
    or volunteer still on record for claimed donations cannot be deleted.
    Donations the user donated or already delivered are kept without the
    reference.
    """
    db_user = _get_user_or_404(db, user_id)
    if db_user.id == admin.id:
        raise ConflictError("Admins cannot delete their own account")
    if crud_donation.is_claiming_party(db, db_user.id):
        raise ConflictError("User is still the NGO or volunteer on record for donations")

    crud_donation.detach_user(db, db_user.id)
    crud_user.delete_user(db, db_user)
    logger.info("User %s deleted by admin %s", user_id, admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
