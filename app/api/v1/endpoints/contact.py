# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, BackgroundTasks

from app.events import email_handlers
from app.schemas import schemas

router = APIRouter(
    prefix="/contact",
    tags=["Contact"],
)


@router.post("/", response_model=schemas.Message)
def submit_contact_form(request: schemas.ContactRequest, background_tasks: BackgroundTasks):
    """
    Forwards a contact-form message to the team inbox.
    """
    background_tasks.add_task(
        email_handlers.send_contact_email, request.name, request.email, request.subject, request.message
    )
    return {"message": "Contact form submitted successfully."}
