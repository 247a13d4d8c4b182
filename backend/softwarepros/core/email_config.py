"""
backend/softwarepros/core/email_config.py

Email Configuration

Builds the SMTP connection settings used by FastAPI-Mail when no
SendGrid API key is configured. Values come from environment variables.
"""

from fastapi_mail import ConnectionConfig
from pydantic import SecretStr

from softwarepros.core.config import settings


def smtp_configured() -> bool:
    return bool(settings.MAIL_SERVER)


# ---------------------------------------------------
# FastAPI-Mail Connection Configuration
# ---------------------------------------------------
def get_mail_config() -> ConnectionConfig:
    """Connection settings for the SMTP transport."""
    return ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME,
        MAIL_PASSWORD=SecretStr(settings.MAIL_PASSWORD),
        MAIL_FROM=settings.MAIL_FROM,
        MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        USE_CREDENTIALS=settings.MAIL_USE_CREDENTIALS,
        VALIDATE_CERTS=settings.MAIL_VALIDATE_CERTS,
        TEMPLATE_FOLDER=settings.mail_templates_path,
    )
