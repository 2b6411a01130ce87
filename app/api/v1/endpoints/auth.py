"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

import logging
from datetime import timedelta
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import crud_user
from app.db import models
from app.db.database import get_db
from app.dependencies import create_access_token_for_user, get_current_user
from app.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.events import email_handlers
from app.schemas import schemas
from app.utils.security import verify_password

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Authentication"],
    responses={404: {"description": "Not found"}},
)


@router.post("/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register_user(
    user: schemas.UserCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Registers a donor, NGO or volunteer account. Accounts start unapproved.
    """
    if user.role in (models.UserRole.NGO.value, models.UserRole.VOLUNTEER.value) and not user.organization_name:
        raise ValidationError("organization_name is required for NGO and volunteer accounts")
    if user.role == models.UserRole.VOLUNTEER.value and not crud_user.ngo_exists_for_organization(
        db, user.organization_name
    ):
        raise ValidationError("organization_name must match a registered NGO")
    if crud_user.get_user_by_email(db, email=user.email):
        raise ConflictError("Email already registered")

    db_user = crud_user.create_user(db, user)
    if db_user is None:
        raise ConflictError("Email already registered")

    logger.info("Registered %s account %s", db_user.role, db_user.id)
    background_tasks.add_task(email_handlers.send_welcome_email, db_user.id)
    return db_user


@router.post("/login", response_model=schemas.Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)
):
    """
    Authenticates a user and returns an access token.
    """
    user = crud_user.get_user_by_email(db, email=form_data.username)
    if not user or not verify_password(form_data.password, user.password):
        raise AuthenticationError("Incorrect email or password")

    access_token = create_access_token_for_user(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/forgot-password", response_model=schemas.Message)
def forgot_password(
    request: schemas.ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Issues a single-use reset token valid for one hour and emails the link.
    """
    user = crud_user.get_user_by_email(db, email=request.email)
    if user is None:
        raise NotFoundError("No user with that email")

    token = crud_user.issue_reset_token(
        db, user, expires_in=timedelta(minutes=settings.reset_token_expire_minutes)
    )
    reset_link = f"{settings.frontend_url}/reset-password/{token}"
    background_tasks.add_task(email_handlers.send_reset_password_email, request.email, reset_link)
    return {"message": "Password reset link sent to your email"}


@router.post("/reset-password/{token}", response_model=schemas.Message)
def reset_password(token: str, request: schemas.ResetPasswordRequest, db: Session = Depends(get_db)):
    user = crud_user.get_user_by_valid_reset_token(db, token)
    if user is None:
        raise ValidationError("Invalid or expired token")

    crud_user.reset_password(db, user, request.password)
    return {"message": "Password has been reset successfully"}


@router.get("/organizations", response_model=List[str])
def read_organization_names(db: Session = Depends(get_db)):
    """
    Lists NGO organization names that volunteers can register under.
    """
    return crud_user.get_organization_names(db)


@router.get("/me", response_model=schemas.User)
def read_users_me(current_user: models.User = Depends(get_current_user)):
    """
    Retrieves the current authenticated user's profile.
    """
    return current_user


@router.put("/me", response_model=schemas.User)
def update_users_me(
    changes: schemas.UserUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Updates the current user's name, contact number or password.
    """
    return crud_user.update_user(db, current_user, changes)
