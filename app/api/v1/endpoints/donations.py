# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Dict, List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.dependencies import get_current_actor, require_roles
from app.schemas import schemas
from app.services.lifecycle import DonationLifecycle

router = APIRouter(
    prefix="/donations",
    tags=["Donations"],
    responses={404: {"description": "Not found"}},
)


def get_lifecycle(db: Session = Depends(get_db)) -> DonationLifecycle:
    return DonationLifecycle(db)


@router.post("/", response_model=schemas.Donation, status_code=status.HTTP_201_CREATED)
def create_donation(
    donation: schemas.DonationCreate,
    actor: schemas.Actor = Depends(require_roles("donor")),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Lists a new donation as available. (Donor access required)
    """
    return lifecycle.create(actor, donation)


@router.get("/", response_model=List[schemas.Donation])
def read_donations(
    skip: int = 0,
    limit: int = 100,
    actor: schemas.Actor = Depends(get_current_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Retrieves the donations visible to the caller's role.
    """
    return lifecycle.list_for(actor, skip=skip, limit=limit)


@router.get("/available", response_model=List[schemas.Donation])
def read_available_donations(
    skip: int = 0, limit: int = 100, lifecycle: DonationLifecycle = Depends(get_lifecycle)
):
    """
    Public board of donations that no NGO has claimed yet.
    """
    return lifecycle.list_available(skip=skip, limit=limit)


@router.get("/stats", response_model=Dict[str, int])
def read_donation_stats(
    actor: schemas.Actor = Depends(get_current_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Dashboard counters for the caller's role.
    """
    return lifecycle.stats(actor)


@router.post("/claim", response_model=schemas.Donation)
def claim_donation(
    request: schemas.ClaimRequest,
    actor: schemas.Actor = Depends(require_roles("ngo")),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Claims an available donation for the calling NGO. (NGO access required)
    """
    return lifecycle.claim(actor, request.food_id)


@router.post("/assign", response_model=schemas.Donation)
def assign_volunteer(
    request: schemas.AssignVolunteerRequest,
    actor: schemas.Actor = Depends(require_roles("ngo")),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Assigns a volunteer to a donation the calling NGO has claimed.
    """
    return lifecycle.assign_volunteer(actor, request.food_id, request.volunteer_id)


@router.get("/{donation_id}", response_model=schemas.Donation)
def read_donation(
    donation_id: int,
    actor: schemas.Actor = Depends(get_current_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return lifecycle.get(actor, donation_id)


@router.put("/{donation_id}/status", response_model=schemas.Donation)
def update_donation_status(
    donation_id: int,
    update: schemas.StatusUpdate,
    actor: schemas.Actor = Depends(require_roles("donor", "ngo", "volunteer")),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Moves a donation to a new status. What is allowed depends on the caller's
    role and their part in the donation.
    """
    return lifecycle.update_status(actor, donation_id, update.status)


@router.delete("/{donation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_donation(
    donation_id: int,
    actor: schemas.Actor = Depends(require_roles("donor", "admin")),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """
    Permanently deletes a donation. Donors can only delete their own unclaimed
    donations; admins can delete any.
    """
    lifecycle.delete(actor, donation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
