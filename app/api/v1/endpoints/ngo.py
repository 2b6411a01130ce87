# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.crud import crud_user
from app.db.database import get_db
from app.dependencies import require_roles
from app.schemas import schemas

router = APIRouter(
    prefix="/ngo",
    tags=["NGO"],
)


@router.get("/volunteers", response_model=List[schemas.User])
def read_my_volunteers(
    actor: schemas.Actor = Depends(require_roles("ngo")),
    db: Session = Depends(get_db),
):
    """
    Retrieves the approved volunteers registered under the NGO's organization name.
    """
    return crud_user.get_volunteers_for_organization(db, actor.organization_name)
