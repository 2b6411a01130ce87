"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.db import models


def create_notification(
    db: Session, recipient_id: int, message: str, donation_id: Optional[int] = None
) -> models.Notification:
    """
    Appends a notification for a recipient.
    """
    db_notification = models.Notification(
        recipient_id=recipient_id,
        donation_id=donation_id,
        message=message,
        is_read=False,
        created_at=models.utcnow(),
    )
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification


def get_notification(db: Session, notification_id: int) -> Optional[models.Notification]:
    return db.query(models.Notification).filter(models.Notification.id == notification_id).first()


def get_notifications_for_user(db: Session, recipient_id: int, skip: int = 0, limit: int = 100):
    """
    Retrieves a recipient's notifications, newest first.
    """
    return (
        db.query(models.Notification)
        .filter(models.Notification.recipient_id == recipient_id)
        .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_notifications_for_donation(db: Session, donation_id: int):
    return (
        db.query(models.Notification)
        .filter(models.Notification.donation_id == donation_id)
        .order_by(models.Notification.id)
        .all()
    )


def mark_as_read(db: Session, db_notification: models.Notification) -> models.Notification:
    db_notification.is_read = True
    db.commit()
    db.refresh(db_notification)
    return db_notification
