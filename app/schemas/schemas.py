# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

DonationStatusValue = Literal["available", "assigned", "in_progress", "completed", "cancelled"]
RoleValue = Literal["donor", "ngo", "volunteer", "admin"]


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: Optional[int] = None
    role: Optional[str] = None


class Actor(BaseModel):
    """
    The authenticated caller, passed explicitly into every lifecycle operation.
    """

    id: int
    role: RoleValue
    name: str
    organization_name: Optional[str] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def display_name(self) -> str:
        return self.organization_name or self.name


class Message(BaseModel):
    message: str


# --- Users ---


class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    organization_name: Optional[str] = None
    contact_number: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class UserCreate(UserBase):
    password: str = Field(min_length=6)
    role: Literal["donor", "ngo", "volunteer"]


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    contact_number: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)

    model_config = ConfigDict(str_strip_whitespace=True)


class User(UserBase):
    id: int
    role: RoleValue
    is_approved: bool
    completed_orders: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=6)


# --- Donations ---


class DonationBase(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1)
    expiry_time: datetime
    pickup_window_start: str = Field(min_length=1)
    pickup_window_end: str = Field(min_length=1)
    pickup_location: str = Field(min_length=1)
    temperature_requirements: Optional[str] = None
    dietary_info: Optional[str] = None
    img: Optional[str] = None


class DonationCreate(DonationBase):
    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("expiry_time")
    @classmethod
    def normalize_expiry_time(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class Donation(DonationBase):
    id: int
    status: DonationStatusValue
    donor_id: Optional[int] = None
    ngo_id: Optional[int] = None
    volunteer_id: Optional[int] = None
    created_at: datetime
    acceptance_time: Optional[datetime] = None
    delivered_time: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClaimRequest(BaseModel):
    food_id: int = Field(alias="foodId")

    model_config = ConfigDict(populate_by_name=True)


class AssignVolunteerRequest(BaseModel):
    food_id: int = Field(alias="foodId")
    volunteer_id: int = Field(alias="volunteerId")

    model_config = ConfigDict(populate_by_name=True)


class StatusUpdate(BaseModel):
    status: str


# --- Notifications ---


class NotificationCreate(BaseModel):
    recipient_id: int
    message: str = Field(min_length=1)
    donation_id: Optional[int] = None
    email: Optional[EmailStr] = None


class Notification(BaseModel):
    id: int
    recipient_id: int
    donation_id: Optional[int] = None
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Contact ---


class ContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True)
