"""
backend/softwarepros/core/email.py

Email Sending Utilities

Renders Jinja2 email templates and delivers messages through the first
configured transport:
- SendGrid API when SENDGRID_API_KEY is set
- SMTP via FastAPI-Mail when MAIL_SERVER is set
Sending is skipped (with a warning) while EMAILS_ENABLED is false.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi_mail import FastMail, MessageSchema, MessageType, MultipartSubtypeEnum
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import EmailStr
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, ReplyTo, To

from softwarepros.core.config import settings
from softwarepros.core.email_config import get_mail_config, smtp_configured

# Logger configuration
logger = logging.getLogger(__name__)

# Jinja2 template environment setup
jinja_env = Environment(
    loader=FileSystemLoader(settings.mail_templates_path),
    autoescape=select_autoescape(["html", "xml"]),
)
logger.debug(f"Jinja2 environment initialized with templates in: {settings.mail_templates_path}")


def render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Renders an email template using Jinja2 with provided context.
    Args:
        template_name (str): Name of the template file.
        context (dict[str, Any]): Variables to pass to the template.
    Returns:
        str: Rendered HTML content.
    """
    try:
        template = jinja_env.get_template(template_name)
        full_context = {
            "year": datetime.now().year,
            "company_name": settings.MAIL_FROM_NAME or settings.APP_NAME,
            "base_url": settings.BASE_URL.rstrip("/"),
            **context,
        }
        return template.render(full_context)
    except Exception as e:
        logger.error(f"Failed to render template '{template_name}': {str(e)}")
        raise ValueError(f"Failed to render email template {template_name}") from e


def _send_via_sendgrid(
    to_email: str, subject: str, html_content: str, text_content: str, reply_to: str | None
) -> None:
    message = Mail(
        from_email=From(email=str(settings.MAIL_FROM), name=settings.MAIL_FROM_NAME or settings.APP_NAME),
        to_emails=To(to_email),
        subject=subject,
        html_content=html_content,
        plain_text_content=text_content,
    )
    if reply_to:
        message.reply_to = ReplyTo(reply_to)

    sg = SendGridAPIClient(settings.SENDGRID_API_KEY)
    response = sg.client.mail.send.post(request_body=message.get())
    if response.status_code >= 300:
        logger.error(f"SendGrid API error: Status={response.status_code}, Body={response.body}")
        raise RuntimeError(f"SendGrid responded with status {response.status_code}")


async def _send_via_smtp(
    to_email: str, subject: str, html_content: str, text_content: str, reply_to: str | None
) -> None:
    message = MessageSchema(
        subject=subject,
        recipients=[to_email],
        body=html_content,
        alternative_body=text_content,
        subtype=MessageType.html,
        multipart_subtype=MultipartSubtypeEnum.alternative,
        reply_to=[reply_to] if reply_to else [],
    )
    await FastMail(get_mail_config()).send_message(message)


async def send_email(
    to_email: EmailStr,
    subject: str,
    html_content: str,
    text_content: str = "",
    reply_to: EmailStr | None = None,
) -> None:
    """
    Sends an email through the configured transport.

    Raises:
        HTTPException 500: No transport is configured or delivery failed.
    """
    if not settings.EMAILS_ENABLED:
        logger.warning(f"Email sending disabled. Skipping send to {to_email} for subject '{subject}'")
        return

    recipient = str(to_email)
    reply = str(reply_to) if reply_to else None
    try:
        if settings.SENDGRID_API_KEY:
            await run_in_threadpool(
                _send_via_sendgrid, recipient, subject, html_content, text_content, reply
            )
            transport = "sendgrid"
        elif smtp_configured():
            await _send_via_smtp(recipient, subject, html_content, text_content, reply)
            transport = "smtp"
        else:
            logger.error("No email transport configured (SENDGRID_API_KEY or MAIL_SERVER)")
            raise HTTPException(status_code=500, detail="Email service configuration missing")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to send email to {recipient}: {str(e)}")
        raise HTTPException(
            status_code=500, detail="An unexpected error occurred while sending the email"
        )

    logger.info(f"Email sent to {recipient} for subject '{subject}' via {transport}")
