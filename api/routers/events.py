"""Event endpoints: events, their participants and invitations."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field, model_validator

from api.dependencies import (
    AuthContext,
    get_auth_context,
    get_db,
    require_series_role,
    require_site_admin,
)
from api.envelope import respond
from api.schemas import RequestModel, RespondRequest, page_params, uuids_to_str
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from database.pagination import PageParams
from database.result import Err, Result
from models import EventFormat, EventStatus, RegistrationStatus, ScoringType

router = APIRouter()


class CreateEventRequest(RequestModel):
    series_id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: date
    registration_close_date: Optional[date] = None
    course_id: UUID
    event_format: EventFormat = EventFormat.STROKE
    scoring_type: ScoringType = ScoringType.GROSS
    max_participants: Optional[int] = Field(None, ge=1)

    @model_validator(mode='after')
    def validate_registration_window(self):
        if self.registration_close_date and self.registration_close_date > self.event_date:
            raise ValueError("registrationCloseDate cannot be after eventDate")
        return self


class UpdateEventRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[date] = None
    registration_close_date: Optional[date] = None
    course_id: Optional[UUID] = None
    event_format: Optional[EventFormat] = None
    status: Optional[EventStatus] = None
    scoring_type: Optional[ScoringType] = None
    max_participants: Optional[int] = Field(None, ge=1)


class InviteEventParticipantRequest(RequestModel):
    user_id: UUID
    tee_time: Optional[datetime] = None
    starting_hole: Optional[int] = Field(None, ge=1, le=18)
    group_number: Optional[int] = Field(None, ge=1)
    handicap_index: Optional[float] = Field(None, ge=-10, le=54)


class UpdateEventParticipantRequest(RequestModel):
    status: Optional[RegistrationStatus] = None
    tee_time: Optional[datetime] = None
    starting_hole: Optional[int] = Field(None, ge=1, le=18)
    group_number: Optional[int] = Field(None, ge=1)
    handicap_index: Optional[float] = Field(None, ge=-10, le=54)
    gross_score: Optional[int] = Field(None, ge=1)
    net_score: Optional[int] = None


async def _require_event_manager(db: DatabaseManager, auth: AuthContext, event_id: str) -> None:
    """Series events are managed by series admins/organizers, standalone ones by their creator.

    Site admins can manage either.
    """
    event = (await db.events.get_by_id(event_id)).unwrap()
    if event.series_id:
        await require_series_role(db, auth, event.series_id)
    elif event.created_by != auth.user_id:
        await require_site_admin(db, auth)


async def _participant_of_event(db: DatabaseManager, event_id: str, participant_id: str) -> Result:
    participant = await db.event_participants.get_by_id(participant_id)
    if participant.ok and participant.data.event_id != event_id:
        return Err(NotFoundError(f"Participant {participant_id} not found in event {event_id}"))
    return participant


# ================================================================
# Invitations (declared before /{event_id} routes)
# ================================================================

@router.post("/participants/{participant_id}/respond")
async def respond_to_event_invitation(
    participant_id: UUID,
    req: RespondRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    result = await db.event_participants.respond(str(participant_id), auth.user_id, req.accept)
    return respond(result)


# ================================================================
# Events
# ================================================================

@router.get("")
async def list_events(
    series_id: Optional[UUID] = Query(None, alias="seriesId"),
    course_id: Optional[UUID] = Query(None, alias="courseId"),
    status: Optional[EventStatus] = Query(None),
    from_date: Optional[date] = Query(None, alias="fromDate"),
    page: PageParams = Depends(page_params),
    db: DatabaseManager = Depends(get_db),
):
    filters = {
        "series_id": str(series_id) if series_id else None,
        "course_id": str(course_id) if course_id else None,
        "status": status,
        "event_date": {"gte": from_date},
    }
    return respond(await db.events.list(filters, page=page))


@router.post("", status_code=201)
async def create_event(
    req: CreateEventRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Create an event. Events in a series need a series admin or organizer."""
    payload = uuids_to_str(req.model_dump())
    if payload["series_id"]:
        await require_series_role(db, auth, payload["series_id"])
    result = await db.events.create({**payload, "created_by": auth.user_id})
    return respond(result, 201)


@router.get("/{event_id}")
async def get_event(event_id: UUID, db: DatabaseManager = Depends(get_db)):
    """Event with its participants."""
    return respond(await db.events.get_with_participants(str(event_id)))


@router.patch("/{event_id}")
async def update_event(
    event_id: UUID,
    req: UpdateEventRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await _require_event_manager(db, auth, str(event_id))
    return respond(await db.events.update(str(event_id), uuids_to_str(req.payload())))


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await _require_event_manager(db, auth, str(event_id))
    return respond(await db.events.delete(str(event_id)))


# ================================================================
# Participants
# ================================================================

@router.get("/{event_id}/participants")
async def list_event_participants(
    event_id: UUID,
    status: Optional[RegistrationStatus] = Query(None),
    page: PageParams = Depends(page_params),
    db: DatabaseManager = Depends(get_db),
):
    result = await db.event_participants.list_for_event(
        str(event_id), {"status": status}, page=page
    )
    return respond(result)


@router.post("/{event_id}/participants", status_code=201)
async def invite_event_participant(
    event_id: UUID,
    req: InviteEventParticipantRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await _require_event_manager(db, auth, str(event_id))
    fields = req.payload()
    user_id = str(fields.pop("user_id"))
    result = await db.event_participants.invite(str(event_id), user_id, **fields)
    return respond(result, 201)


@router.patch("/{event_id}/participants/{participant_id}")
async def update_event_participant(
    event_id: UUID,
    participant_id: UUID,
    req: UpdateEventParticipantRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await _require_event_manager(db, auth, str(event_id))
    participant = await _participant_of_event(db, str(event_id), str(participant_id))
    if not participant.ok:
        return respond(participant)
    return respond(await db.event_participants.update(str(participant_id), req.payload()))


@router.delete("/{event_id}/participants/{participant_id}")
async def remove_event_participant(
    event_id: UUID,
    participant_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Managers remove anyone; a participant may withdraw themselves."""
    participant = await _participant_of_event(db, str(event_id), str(participant_id))
    if not participant.ok:
        return respond(participant)
    if participant.data.user_id != auth.user_id:
        await _require_event_manager(db, auth, str(event_id))
    return respond(await db.event_participants.delete(str(participant_id)))
