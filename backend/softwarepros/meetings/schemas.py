"""
meetings/schemas.py

Pydantic models for creating consultation meetings.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MeetingCreateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    participant_name: str | None = None
    name: str | None = None
    description: str | None = None
    is_host: bool = False


class MeetingInfo(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    join_url: str | None = None
    host_url: str | None = None
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MeetingInfo":
        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            description=data.get("description"),
            join_url=data.get("joinUrl"),
            host_url=data.get("hostUrl"),
            created_at=data.get("createdAt"),
        )


class ParticipantInfo(BaseModel):
    token: str
    participant_id: str | None = None
    expires_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ParticipantInfo":
        return cls(
            token=data["token"],
            participant_id=data.get("participantId"),
            expires_at=data.get("expiresAt"),
        )


class MeetingCreateResponse(BaseModel):
    success: bool = True
    meeting: MeetingInfo
    participant: ParticipantInfo = Field(..., description="Join credentials for the requester")
