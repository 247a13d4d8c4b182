"""
meetings/routes.py

Creates two-person video consultation meetings and returns the
requester's join token.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from softwarepros.core.limiter import limiter
from softwarepros.meetings.client import (
    RealtimeKitClient,
    RealtimeKitError,
    RealtimeKitNotConfigured,
    get_realtimekit_client,
)
from softwarepros.meetings.schemas import (
    MeetingCreateRequest,
    MeetingCreateResponse,
    MeetingInfo,
    ParticipantInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meeting", tags=["Meetings"])


def realtimekit_client() -> RealtimeKitClient:
    try:
        return get_realtimekit_client()
    except RealtimeKitNotConfigured as e:
        logger.error(f"[MEETING] {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="RealtimeKit is not configured",
        )


@router.post(
    "/create",
    response_model=MeetingCreateResponse,
    status_code=status.HTTP_200_OK,
    summary="Create Consultation Meeting",
    description="Creates a two-participant meeting without recording and returns a participant token.",
)
@limiter.limit("10/minute")
async def create_meeting(
    request: Request,
    payload: MeetingCreateRequest,
    client: Annotated[RealtimeKitClient, Depends(realtimekit_client)],
) -> MeetingCreateResponse:
    if not payload.participant_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Participant name is required"
        )

    try:
        meeting = await client.create_meeting(
            name=payload.name or f"Consultation with {payload.participant_name}",
            description=payload.description or "Video consultation meeting",
            max_participants=2,
            auto_join=True,
            recording=False,
            metadata={
                "participantName": payload.participant_name,
                "createdBy": "contact-form",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
        token = await client.create_participant_token(
            meeting["id"], payload.participant_name, payload.is_host
        )
        response = MeetingCreateResponse(
            meeting=MeetingInfo.from_api(meeting),
            participant=ParticipantInfo.from_api(token),
        )
    except RealtimeKitError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Failed to create meeting with Cloudflare RealtimeKit", "details": e.message},
        )
    except httpx.HTTPError as e:
        logger.error(f"[MEETING] Network error creating meeting: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Network error connecting to RealtimeKit", "details": str(e)},
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"[MEETING] Unexpected RealtimeKit payload: {e!r}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "RealtimeKit integration error", "details": f"Malformed response: {e!r}"},
        )

    logger.info(f"[MEETING] Created meeting {response.meeting.id} for {payload.participant_name}")
    return response
