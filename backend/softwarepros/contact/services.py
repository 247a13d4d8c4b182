"""
backend/softwarepros/contact/services.py

Contact Services
Turns contact form submissions into emails for the sales inbox:
- Per-submitter throttling through the application's RateLimiter
- Plain-text and HTML bodies listing only the fields that were filled in
- Delivery through the configured email transport
"""

import logging
import math

from fastapi import HTTPException, status

from softwarepros.contact.schemas import ContactRequest, ContactResponse
from softwarepros.core.config import settings
from softwarepros.core.email import render_template, send_email
from softwarepros.core.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Label and attribute, in the order they appear in the email
CONTACT_FIELDS: list[tuple[str, str]] = [
    ("Name", "name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Company", "company"),
    ("Website", "website"),
    ("Service Type", "service_type"),
    ("Project Subject", "subject"),
    ("Budget", "budget"),
    ("Timeline", "timeline"),
    ("Preferred Contact Method", "contact_method"),
    ("Best Time to Reach", "best_time_to_reach"),
    ("Heard About Us", "hear_about_us"),
    ("Message", "message"),
]


def contact_rows(data: ContactRequest) -> list[tuple[str, str]]:
    """Label/value pairs for every non-empty field."""
    rows = []
    for label, attr in CONTACT_FIELDS:
        value = getattr(data, attr)
        if value:
            rows.append((label, str(value)))
    return rows


def build_subject(data: ContactRequest) -> str:
    base = (data.subject or "").strip() or "New Contact Message"
    return f"{base} - {data.name} ({data.service_type or 'General'})"


def build_text_email(data: ContactRequest) -> str:
    return "\n".join(f"{label}: {value}" for label, value in contact_rows(data))


def build_html_email(data: ContactRequest) -> str:
    return render_template("contact.html", {"rows": contact_rows(data)})


def identifier_for(data: ContactRequest) -> str:
    return str(data.email).strip().lower()


def check_contact_rate_limit(limiter: RateLimiter, identifier: str) -> None:
    """
    Admits one contact email for `identifier`.

    Raises:
        HTTPException 429: The submitter exhausted the current window.
    """
    if limiter.can_make_request(identifier):
        return

    wait_ms = limiter.get_time_until_next_request(identifier)
    retry_after = max(1, math.ceil(wait_ms / 1000))
    logger.warning(f"[CONTACT] Rate limit exceeded for {identifier}; retry in {retry_after}s")
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail={
            "error": "Too many messages sent. Please try again later.",
            "remaining": limiter.get_remaining_requests(identifier),
            "retry_after_seconds": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )


async def send_contact_email(data: ContactRequest) -> None:
    """Emails the submission to the contact inbox with the submitter as reply-to."""
    await send_email(
        to_email=settings.CONTACT_RECIPIENT_EMAIL,
        subject=build_subject(data),
        html_content=build_html_email(data),
        text_content=build_text_email(data),
        reply_to=data.email,
    )


async def submit_contact(data: ContactRequest, limiter: RateLimiter) -> ContactResponse:
    """Throttles, then delivers a contact form submission."""
    identifier = identifier_for(data)
    check_contact_rate_limit(limiter, identifier)

    try:
        await send_contact_email(data)
    except HTTPException as e:
        logger.error(f"[CONTACT] Delivery failed for {identifier}: {e.detail}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send message"
        )

    logger.info(f"[CONTACT] Message from {identifier} delivered")
    return ContactResponse()
