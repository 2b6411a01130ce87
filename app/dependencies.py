"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import crud_user
from app.db.database import get_db
from app.errors import AuthenticationError, AuthorizationError
from app.schemas import schemas


def verify_token(token: str) -> schemas.TokenData:
    """
    Verifies a JWT token and returns the token data.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        subject = payload.get("sub")
        role = payload.get("role")
        if subject is None or role is None:
            raise AuthenticationError("Invalid token")
        token_data = schemas.TokenData(user_id=int(subject), role=role)
    except (JWTError, ValueError):
        raise AuthenticationError("Invalid token")
    return token_data


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a JWT access token.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def create_access_token_for_user(user) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """
    FastAPI dependency to get the current authenticated user.
    """
    if not token:
        raise AuthenticationError("Token missing")
    token_data = verify_token(token)
    user = crud_user.get_user(db, user_id=token_data.user_id)
    if user is None or user.role != token_data.role:
        raise AuthenticationError("Invalid token")
    return user


def get_current_actor(current_user=Depends(get_current_user)) -> schemas.Actor:
    """
    FastAPI dependency resolving the caller into the identity passed to services.
    """
    return schemas.Actor.model_validate(current_user)


def require_roles(*roles: str) -> Callable[..., schemas.Actor]:
    """
    Builds a dependency that only lets the given roles through.
    """

    def dependency(actor: schemas.Actor = Depends(get_current_actor)) -> schemas.Actor:
        if actor.role not in roles:
            raise AuthorizationError(f"This action requires one of the roles: {', '.join(roles)}")
        return actor

    return dependency
