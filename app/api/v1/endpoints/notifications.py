# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.crud import crud_donation, crud_notification, crud_user
from app.db.database import get_db
from app.dependencies import get_current_actor
from app.errors import AuthorizationError, NotFoundError
from app.events import email_handlers
from app.schemas import schemas

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Notification, status_code=status.HTTP_201_CREATED)
def send_notification(
    notification: schemas.NotificationCreate,
    background_tasks: BackgroundTasks,
    actor: schemas.Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Sends a free-text notification to another user, optionally mailing a copy.
    """
    if crud_user.get_user(db, notification.recipient_id) is None:
        raise NotFoundError("Recipient not found")
    if notification.donation_id is not None and crud_donation.get_donation(db, notification.donation_id) is None:
        raise NotFoundError("Donation not found")

    db_notification = crud_notification.create_notification(
        db, notification.recipient_id, notification.message, notification.donation_id
    )
    if notification.email:
        background_tasks.add_task(email_handlers.send_notification_email, notification.email, notification.message)
    return db_notification


@router.get("/", response_model=List[schemas.Notification])
def read_notifications(
    skip: int = 0,
    limit: int = 100,
    actor: schemas.Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Retrieves the caller's notifications, newest first.
    """
    return crud_notification.get_notifications_for_user(db, actor.id, skip=skip, limit=limit)


@router.put("/{notification_id}/read", response_model=schemas.Notification)
def mark_notification_as_read(
    notification_id: int,
    actor: schemas.Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    db_notification = crud_notification.get_notification(db, notification_id)
    if db_notification is None:
        raise NotFoundError("Notification not found")
    if db_notification.recipient_id != actor.id:
        raise AuthorizationError("You can only mark your own notifications as read")
    return crud_notification.mark_as_read(db, db_notification)
