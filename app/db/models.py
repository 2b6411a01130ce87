# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.database import Base


def utcnow() -> datetime:
    # Stored naive so SQLite and Postgres compare the same way.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserRole(str, enum.Enum):
    DONOR = "donor"
    NGO = "ngo"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


class DonationStatus(str, enum.Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(Enum(*[r.value for r in UserRole], name="user_role"), nullable=False)
    organization_name = Column(String(255), nullable=True, index=True)
    contact_number = Column(String(50), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    completed_orders = Column(Integer, nullable=False, default=0)
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_password_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    notifications = relationship("Notification", back_populates="recipient", cascade="all, delete-orphan")


class Donation(Base):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)
    expiry_time = Column(DateTime, nullable=False)
    pickup_window_start = Column(String(100), nullable=False)
    pickup_window_end = Column(String(100), nullable=False)
    pickup_location = Column(String(255), nullable=False)
    temperature_requirements = Column(String(255), nullable=True)
    dietary_info = Column(String(255), nullable=True)
    img = Column(String(1024), nullable=True)
    status = Column(
        Enum(*[s.value for s in DonationStatus], name="donation_status"),
        nullable=False,
        default=DonationStatus.AVAILABLE.value,
        index=True,
    )
    donor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    ngo_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    volunteer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    acceptance_time = Column(DateTime, nullable=True)
    delivered_time = Column(DateTime, nullable=True)

    donor = relationship("User", foreign_keys=[donor_id])
    ngo = relationship("User", foreign_keys=[ngo_id])
    volunteer = relationship("User", foreign_keys=[volunteer_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    donation_id = Column(Integer, ForeignKey("donations.id", ondelete="SET NULL"), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    recipient = relationship("User", back_populates="notifications")
