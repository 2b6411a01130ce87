"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
"""

import logging
from typing import Any, Dict, FrozenSet, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import crud_donation, crud_notification, crud_user
from app.db import models
from app.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.schemas import schemas

logger = logging.getLogger(__name__)

Status = models.DonationStatus
Role = models.UserRole

# Moves reachable through update_status and the roles allowed to make them.
# available -> assigned only happens through claim().
TRANSITIONS: Dict[Tuple[Status, Status], FrozenSet[Role]] = {
    (Status.AVAILABLE, Status.CANCELLED): frozenset({Role.DONOR}),
    (Status.ASSIGNED, Status.CANCELLED): frozenset({Role.DONOR}),
    (Status.ASSIGNED, Status.AVAILABLE): frozenset({Role.NGO}),
    (Status.ASSIGNED, Status.IN_PROGRESS): frozenset({Role.VOLUNTEER}),
    (Status.ASSIGNED, Status.COMPLETED): frozenset({Role.NGO, Role.VOLUNTEER}),
    (Status.IN_PROGRESS, Status.COMPLETED): frozenset({Role.NGO, Role.VOLUNTEER}),
}

NO_VOLUNTEER = "no volunteer"


class DonationLifecycle:
    """
    Owns every write to a donation's status and participant references.

    Each mutating operation is a single conditional update on the donation row
    (compare-and-set on the prior status), so two concurrent writers can never
    both succeed. Notifications are emitted only after that update is committed
    and are best-effort: a failure to record one is logged and never undoes or
    fails the donation change.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Reads ---

    def get(self, actor: schemas.Actor, donation_id: int) -> models.Donation:
        donation = self._get_or_404(donation_id)
        if (
            Role(actor.role) == Role.ADMIN
            or donation.status == Status.AVAILABLE.value
            or self._is_participant(actor, donation)
        ):
            return donation
        raise AuthorizationError("You do not have access to this donation")

    def list_available(self, skip: int = 0, limit: int = 100):
        return crud_donation.get_available_donations(self.db, skip=skip, limit=limit)

    def list_for(self, actor: schemas.Actor, skip: int = 0, limit: int = 100):
        """
        Role-scoped listing: donors see their own donations, NGOs what they
        claimed (most recently accepted first), volunteers what they were
        assigned and admins everything.
        """
        role = Role(actor.role)
        if role == Role.DONOR:
            return crud_donation.get_donations_by_donor(self.db, actor.id, skip=skip, limit=limit)
        if role == Role.NGO:
            return crud_donation.get_donations_claimed_by_ngo(self.db, actor.id, skip=skip, limit=limit)
        if role == Role.VOLUNTEER:
            return crud_donation.get_donations_by_volunteer(self.db, actor.id, skip=skip, limit=limit)
        return crud_donation.get_donations(self.db, skip=skip, limit=limit)

    def stats(self, actor: schemas.Actor) -> Dict[str, int]:
        role = Role(actor.role)
        if role == Role.DONOR:
            counts = crud_donation.count_by_status(self.db, donor_id=actor.id)
            return {
                "total": sum(counts.values()),
                "available": counts[Status.AVAILABLE.value],
                "completed": counts[Status.COMPLETED.value],
                "cancelled": counts[Status.CANCELLED.value],
            }
        if role == Role.NGO:
            counts = crud_donation.count_by_status(self.db, ngo_id=actor.id)
            return {
                "claimed": sum(counts[s] for s in crud_donation.CLAIMED_STATUSES),
                "in_progress": counts[Status.IN_PROGRESS.value],
                "completed": counts[Status.COMPLETED.value],
            }
        if role == Role.VOLUNTEER:
            counts = crud_donation.count_by_status(self.db, volunteer_id=actor.id)
            available = crud_donation.count_by_status(self.db)[Status.AVAILABLE.value]
            return {
                "available_tasks": available,
                "assigned": counts[Status.ASSIGNED.value],
                "in_progress": counts[Status.IN_PROGRESS.value],
                "completed": counts[Status.COMPLETED.value],
            }
        user_counts = crud_user.count_users_by_role(self.db)
        donation_counts = crud_donation.count_by_status(self.db)
        stats = {
            "donor_count": user_counts[Role.DONOR.value],
            "ngo_count": user_counts[Role.NGO.value],
            "volunteer_count": user_counts[Role.VOLUNTEER.value],
            "donation_count": sum(donation_counts.values()),
        }
        stats.update({f"{status}_donations": count for status, count in donation_counts.items()})
        return stats

    # --- Transitions ---

    def create(self, actor: schemas.Actor, donation: schemas.DonationCreate) -> models.Donation:
        self._require_role(actor, Role.DONOR, action="create donations")
        db_donation = crud_donation.create_donation(self.db, donation, donor_id=actor.id)
        logger.info("Donation %s created by donor %s", db_donation.id, actor.id)
        return db_donation

    def claim(self, actor: schemas.Actor, donation_id: int) -> models.Donation:
        self._require_role(actor, Role.NGO, action="claim donations")
        claimed = crud_donation.compare_and_set(
            self.db,
            donation_id,
            Status.AVAILABLE.value,
            {
                "ngo_id": actor.id,
                "status": Status.ASSIGNED.value,
                "acceptance_time": models.utcnow(),
            },
        )
        if not claimed:
            self._get_or_404(donation_id)
            raise ConflictError("Donation is no longer available to claim")

        donation = self._get_or_404(donation_id)
        logger.info("Donation %s claimed by NGO %s", donation.id, actor.id)
        self._notify(
            donation.donor_id,
            f'Your donation "{donation.title}" has been claimed by {actor.display_name}.',
            donation.id,
        )
        return donation

    def assign_volunteer(self, actor: schemas.Actor, donation_id: int, volunteer_id: int) -> models.Donation:
        self._require_role(actor, Role.NGO, action="assign volunteers")
        donation = self._get_or_404(donation_id)
        volunteer = crud_user.get_user(self.db, volunteer_id)
        if volunteer is None or volunteer.role != Role.VOLUNTEER.value:
            raise NotFoundError("Volunteer not found")
        if donation.ngo_id != actor.id:
            raise AuthorizationError("Only the NGO that claimed this donation can assign a volunteer")
        if donation.status != Status.ASSIGNED.value:
            raise ConflictError(f"Cannot assign a volunteer to a donation that is {donation.status}")

        assigned = crud_donation.compare_and_set(
            self.db,
            donation_id,
            Status.ASSIGNED.value,
            {"volunteer_id": volunteer_id},
            ngo_id=actor.id,
        )
        if not assigned:
            raise ConflictError("Donation was changed by another request, reload and try again")

        donation = self._get_or_404(donation_id)
        logger.info("Volunteer %s assigned to donation %s by NGO %s", volunteer_id, donation.id, actor.id)
        self._notify(
            volunteer_id,
            f'{actor.display_name} assigned you to deliver "{donation.title}".',
            donation.id,
        )
        return donation

    def update_status(self, actor: schemas.Actor, donation_id: int, status: str) -> models.Donation:
        try:
            target = Status(status)
        except ValueError:
            allowed = ", ".join(s.value for s in Status)
            raise ValidationError(f"Invalid status '{status}'. Expected one of: {allowed}")

        donation = self._get_or_404(donation_id)
        if not self._is_participant(actor, donation):
            raise AuthorizationError("You are not authorized to update this donation")

        current = Status(donation.status)
        if target == current:
            return donation

        allowed_roles = TRANSITIONS.get((current, target))
        if allowed_roles is None:
            raise ConflictError(f"Cannot move a donation from {current.value} to {target.value}")
        role = Role(actor.role)
        if role not in allowed_roles:
            raise AuthorizationError(f"A {role.value} cannot move a donation from {current.value} to {target.value}")

        previous_ngo_id = donation.ngo_id
        previous_volunteer_id = donation.volunteer_id

        values: Dict[str, Any] = {"status": target.value}
        if target == Status.COMPLETED:
            values["delivered_time"] = models.utcnow()
        elif target == Status.AVAILABLE:
            values.update(ngo_id=None, volunteer_id=None, acceptance_time=None)

        updated = crud_donation.compare_and_set(
            self.db, donation_id, current.value, values, **self._ownership(actor)
        )
        if not updated:
            raise ConflictError("Donation was changed by another request, reload and try again")

        donation = self._get_or_404(donation_id)
        logger.info(
            "Donation %s moved from %s to %s by %s %s",
            donation.id,
            current.value,
            target.value,
            role.value,
            actor.id,
        )
        self._after_status_change(actor, donation, target, previous_ngo_id, previous_volunteer_id)
        return donation

    def delete(self, actor: schemas.Actor, donation_id: int) -> None:
        role = Role(actor.role)
        if role == Role.ADMIN:
            if not crud_donation.delete_donation(self.db, donation_id):
                raise NotFoundError("Donation not found")
            logger.info("Donation %s deleted by admin %s", donation_id, actor.id)
            return

        if role != Role.DONOR:
            raise AuthorizationError("Only the donor or an admin can delete a donation")
        donation = self._get_or_404(donation_id)
        if donation.donor_id != actor.id:
            raise AuthorizationError("You can only delete your own donations")
        if donation.ngo_id is not None:
            raise ConflictError("A claimed donation cannot be deleted")
        if not crud_donation.delete_donation(self.db, donation_id, donor_id=actor.id, ngo_id=None):
            raise ConflictError("Donation was claimed before it could be deleted")
        logger.info("Donation %s deleted by donor %s", donation_id, actor.id)

    # --- Helpers ---

    def _get_or_404(self, donation_id: int) -> models.Donation:
        donation = crud_donation.get_donation(self.db, donation_id)
        if donation is None:
            raise NotFoundError("Donation not found")
        return donation

    @staticmethod
    def _require_role(actor: schemas.Actor, role: Role, action: str) -> None:
        if Role(actor.role) != role:
            raise AuthorizationError(f"Only {role.value} accounts can {action}")

    @staticmethod
    def _ownership(actor: schemas.Actor) -> Dict[str, int]:
        column = {
            Role.DONOR: "donor_id",
            Role.NGO: "ngo_id",
            Role.VOLUNTEER: "volunteer_id",
        }.get(Role(actor.role))
        return {column: actor.id} if column else {}

    def _is_participant(self, actor: schemas.Actor, donation: models.Donation) -> bool:
        ownership = self._ownership(actor)
        return bool(ownership) and all(getattr(donation, column) == value for column, value in ownership.items())

    def _after_status_change(
        self,
        actor: schemas.Actor,
        donation: models.Donation,
        target: Status,
        previous_ngo_id: Optional[int],
        previous_volunteer_id: Optional[int],
    ) -> None:
        role = Role(actor.role)

        if target == Status.COMPLETED:
            volunteer = None
            if donation.volunteer_id is not None:
                volunteer = crud_user.get_user(self.db, donation.volunteer_id)
                self._record_delivery(donation.volunteer_id)
            volunteer_name = volunteer.name if volunteer is not None else NO_VOLUNTEER
            self._notify(
                donation.donor_id,
                f'Your donation "{donation.title}" has been completed. Delivered by: {volunteer_name}.',
                donation.id,
            )
            if role == Role.VOLUNTEER:
                self._notify(
                    donation.ngo_id,
                    f'Task "{donation.title}" has been completed by volunteer {actor.name}.',
                    donation.id,
                )
        elif target == Status.IN_PROGRESS:
            self._notify(
                donation.ngo_id,
                f'Task "{donation.title}" is now in progress by {actor.name}.',
                donation.id,
            )
        elif target == Status.CANCELLED:
            message = f'Donation "{donation.title}" has been cancelled by the donor.'
            self._notify(previous_ngo_id, message, donation.id)
            self._notify(previous_volunteer_id, message, donation.id)
        elif target == Status.AVAILABLE:
            self._notify(
                donation.donor_id,
                f'{actor.display_name} released its claim on "{donation.title}". It is available again.',
                donation.id,
            )
            self._notify(
                previous_volunteer_id,
                f'Your assignment for "{donation.title}" was withdrawn by {actor.display_name}.',
                donation.id,
            )

    def _record_delivery(self, volunteer_id: int) -> None:
        try:
            crud_user.increment_completed_orders(self.db, volunteer_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update completed deliveries for volunteer %s", volunteer_id)

    def _notify(self, recipient_id: Optional[int], message: str, donation_id: int) -> Optional[models.Notification]:
        if recipient_id is None:
            return None
        try:
            return crud_notification.create_notification(self.db, recipient_id, message, donation_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Failed to record notification for user %s about donation %s", recipient_id, donation_id
            )
            return None
