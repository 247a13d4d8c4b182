"""
contact/routes.py

Contact form endpoint: validates a submission, applies per-submitter
throttling and emails it to the sales inbox.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from softwarepros.contact.schemas import ContactRequest, ContactResponse
from softwarepros.contact.services import submit_contact
from softwarepros.core.dependencies import get_contact_rate_limiter
from softwarepros.core.limiter import limiter
from softwarepros.core.rate_limiter import RateLimiter

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post(
    "",
    response_model=ContactResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit Contact Form",
    description="Emails a contact form submission. Each sender may submit a limited number of messages per window.",
)
@limiter.limit("20/hour")
async def submit_contact_form(
    request: Request,
    payload: ContactRequest,
    contact_limiter: Annotated[RateLimiter, Depends(get_contact_rate_limiter)],
) -> ContactResponse:
    return await submit_contact(payload, contact_limiter)
