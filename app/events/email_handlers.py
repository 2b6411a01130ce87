"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 15 2025
# SPDX-License-Identifier: MIT
"""

import logging

from sqlalchemy.orm import Session

from app.crud import crud_user
from app.db.database import get_db
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


async def send_welcome_email(user_id: int):
    """
    Sends the registration welcome email.
    This function is designed to run as a background task.
    """
    db: Session = next(get_db())
    try:
        user = crud_user.get_user(db, user_id)
        if user:
            await EmailService().send_welcome_email(user)
        else:
            logger.warning("Background Task Warning: User with ID %s not found for welcome email.", user_id)
    finally:
        db.close()


async def send_approval_email(user_id: int):
    """
    Tells a user their account was approved.
    This function is designed to run as a background task.
    """
    db: Session = next(get_db())
    try:
        user = crud_user.get_user(db, user_id)
        if user:
            await EmailService().send_approval_email(user)
        else:
            logger.warning("Background Task Warning: User with ID %s not found for approval email.", user_id)
    finally:
        db.close()


async def send_reset_password_email(email: str, reset_link: str):
    await EmailService().send_reset_password_email(email, reset_link)


async def send_contact_email(name: str, email: str, subject: str, message: str):
    await EmailService().send_contact_email(name, email, subject, message)


async def send_notification_email(email: str, message: str):
    await EmailService().send_notification_email(email, message)
