# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.endpoints import admin, auth, contact, donations, ngo, notifications
from app.config import settings
from app.db.database import get_db
from app.errors import UnexpectedError, register_exception_handlers
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info("Zero Hunger API starting up. Database migrations are managed by Alembic.")
    yield
    logger.info("Zero Hunger API shutting down.")


app = FastAPI(
    title="Zero Hunger Backend API",
    description="API for coordinating surplus food donations between donors, NGOs and volunteers.",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Configure CORS
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(donations.router, prefix="/api/v1")
app.include_router(ngo.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")
app.include_router(contact.router, prefix="/api/v1")


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Zero Hunger Backend API!"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        raise UnexpectedError("Database connection failed")
    return {"status": "ok", "database_connection": "successful"}
