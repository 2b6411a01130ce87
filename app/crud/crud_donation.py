# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Any, Dict, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from app.db import models
from app.schemas import schemas

Donation = models.Donation
Status = models.DonationStatus

CLAIMED_STATUSES = (Status.ASSIGNED.value, Status.IN_PROGRESS.value, Status.COMPLETED.value)
OPEN_STATUSES = (Status.ASSIGNED.value, Status.IN_PROGRESS.value)


def get_donation(db: Session, donation_id: int) -> Optional[Donation]:
    return db.query(Donation).filter(Donation.id == donation_id).first()


def create_donation(db: Session, donation: schemas.DonationCreate, donor_id: int) -> Donation:
    db_donation = Donation(
        **donation.model_dump(),
        donor_id=donor_id,
        status=Status.AVAILABLE.value,
        created_at=models.utcnow(),
    )
    db.add(db_donation)
    db.commit()
    db.refresh(db_donation)
    return db_donation


def compare_and_set(
    db: Session,
    donation_id: int,
    expected_status: str,
    values: Dict[Any, Any],
    **conditions: Any,
) -> bool:
    """
    Applies `values` only if the donation is still in `expected_status` and
    matches every extra column condition. Returns False when no row matched.
    """
    query = db.query(Donation).filter(Donation.id == donation_id, Donation.status == expected_status)
    for column, value in conditions.items():
        query = query.filter(getattr(Donation, column) == value)
    updated = query.update(values, synchronize_session=False)
    db.commit()
    return updated == 1


def delete_donation(db: Session, donation_id: int, **conditions: Any) -> bool:
    query = db.query(Donation).filter(Donation.id == donation_id)
    for column, value in conditions.items():
        column_attr = getattr(Donation, column)
        query = query.filter(column_attr.is_(None) if value is None else column_attr == value)
    deleted = query.delete(synchronize_session=False)
    db.commit()
    return deleted == 1


def _newest_first(query):
    return query.order_by(Donation.created_at.desc(), Donation.id.desc())


def get_available_donations(db: Session, skip: int = 0, limit: int = 100):
    query = db.query(Donation).filter(Donation.status == Status.AVAILABLE.value, Donation.ngo_id.is_(None))
    return _newest_first(query).offset(skip).limit(limit).all()


def get_donations(db: Session, skip: int = 0, limit: int = 100):
    return _newest_first(db.query(Donation)).offset(skip).limit(limit).all()


def get_donations_by_donor(db: Session, donor_id: int, skip: int = 0, limit: int = 100):
    return _newest_first(db.query(Donation).filter(Donation.donor_id == donor_id)).offset(skip).limit(limit).all()


def get_donations_by_volunteer(db: Session, volunteer_id: int, skip: int = 0, limit: int = 100):
    query = db.query(Donation).filter(Donation.volunteer_id == volunteer_id)
    return _newest_first(query).offset(skip).limit(limit).all()


def get_donations_claimed_by_ngo(db: Session, ngo_id: int, skip: int = 0, limit: int = 100):
    return (
        db.query(Donation)
        .filter(Donation.ngo_id == ngo_id, Donation.status.in_(CLAIMED_STATUSES))
        .order_by(Donation.acceptance_time.desc(), Donation.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_by_status(db: Session, **conditions: Any) -> Dict[str, int]:
    """
    Counts donations per status, optionally restricted by column equality.
    """
    query = db.query(Donation.status, func.count(Donation.id))
    for column, value in conditions.items():
        query = query.filter(getattr(Donation, column) == value)
    counts = {status.value: 0 for status in Status}
    counts.update({status: count for status, count in query.group_by(Donation.status).all()})
    return counts


def is_claiming_party(db: Session, user_id: int) -> bool:
    """
    True when the user is the NGO on record for any donation, or the volunteer
    on a donation that is still assigned or in progress.
    """
    return (
        db.query(Donation.id)
        .filter(
            or_(
                Donation.ngo_id == user_id,
                and_(Donation.volunteer_id == user_id, Donation.status.in_(OPEN_STATUSES)),
            )
        )
        .first()
        is not None
    )


def detach_user(db: Session, user_id: int) -> None:
    """
    Clears donor and volunteer references to a user before the account is removed.
    """
    db.query(Donation).filter(Donation.donor_id == user_id).update(
        {Donation.donor_id: None}, synchronize_session=False
    )
    db.query(Donation).filter(Donation.volunteer_id == user_id).update(
        {Donation.volunteer_id: None}, synchronize_session=False
    )
    db.commit()
