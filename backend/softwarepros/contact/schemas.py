"""
contact/schemas.py

Defines Pydantic models for the contact form:
- Contact submission payload (accepts camelCase keys from the site)
- Submission and throttling responses
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, HttpUrl, field_validator
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalUrl = Annotated[HttpUrl | None, BeforeValidator(_blank_to_none)]


class ContactRequest(BaseModel):
    """
    Contact form submission.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=2, description="Full name")
    email: EmailStr = Field(..., description="Reply address")
    phone: str = Field(..., min_length=7)
    company: str = Field(..., min_length=2)
    service_type: str = Field(..., min_length=1, description="Requested service")
    message: str = Field(..., min_length=10)
    subject: str | None = None
    budget: str = Field(..., min_length=1)
    timeline: str | None = None
    contact_method: str | None = None
    best_time_to_reach: str = Field(..., min_length=1)
    website: OptionalUrl = None
    hear_about_us: str | None = None
    consent: bool = Field(..., description="Must be true to submit")

    @field_validator("consent")
    @classmethod
    def consent_given(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("Consent is required")
        return value


class ContactResponse(BaseModel):
    success: bool = True
