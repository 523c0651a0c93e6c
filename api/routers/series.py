"""Series endpoints: the series itself, its roster and invitations."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field, model_validator

from api.dependencies import AuthContext, get_auth_context, get_db, require_series_role
from api.envelope import respond, success
from api.schemas import RequestModel, RespondRequest, page_params
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from database.pagination import PageParams
from database.result import Err, Result
from models import (
    ParticipantStatus,
    ScoringType,
    SeriesRole,
    SeriesStatus,
    SeriesType,
)

router = APIRouter()


class CreateSeriesRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: date
    end_date: date
    series_type: SeriesType = SeriesType.LEAGUE
    scoring_type: ScoringType = ScoringType.GROSS
    max_participants: Optional[int] = Field(None, ge=1)
    registration_deadline: Optional[date] = None

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must be on or after startDate")
        return self


class UpdateSeriesRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[SeriesStatus] = None
    series_type: Optional[SeriesType] = None
    scoring_type: Optional[ScoringType] = None
    max_participants: Optional[int] = Field(None, ge=1)
    registration_deadline: Optional[date] = None


class InviteParticipantRequest(RequestModel):
    user_id: UUID
    role: SeriesRole = SeriesRole.PLAYER


class UpdateParticipantRequest(RequestModel):
    role: Optional[SeriesRole] = None
    status: Optional[ParticipantStatus] = None


async def _participant_of_series(db: DatabaseManager, series_id: str, participant_id: str) -> Result:
    participant = await db.series_participants.get_by_id(participant_id)
    if participant.ok and participant.data.series_id != series_id:
        return Err(NotFoundError(f"Participant {participant_id} not found in series {series_id}"))
    return participant


# ================================================================
# Invitations (declared before /{series_id} routes)
# ================================================================

@router.post("/participants/{participant_id}/respond")
async def respond_to_series_invitation(
    participant_id: UUID,
    req: RespondRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Accept or decline an invitation addressed to the caller."""
    result = await db.series_participants.respond(str(participant_id), auth.user_id, req.accept)
    return respond(result)


# ================================================================
# Series
# ================================================================

@router.get("")
async def list_series(
    status: Optional[SeriesStatus] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    start_from: Optional[date] = Query(None, alias="startFrom"),
    end_to: Optional[date] = Query(None, alias="endTo"),
    page: PageParams = Depends(page_params),
    db: DatabaseManager = Depends(get_db),
):
    filters = {
        "status": status,
        "start_date": {"gte": start_from},
        "end_date": {"lte": end_to},
    }
    return respond(await db.series.search(search, filters, page=page))


@router.post("", status_code=201)
async def create_series(
    req: CreateSeriesRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Create a series; the caller becomes its admin."""
    result = await db.series.create_with_admin(req.model_dump(), auth.user_id)
    return respond(result, 201)


@router.get("/{series_id}")
async def get_series(series_id: UUID, db: DatabaseManager = Depends(get_db)):
    return respond(await db.series.get_by_id(str(series_id)))


@router.patch("/{series_id}")
async def update_series(
    series_id: UUID,
    req: UpdateSeriesRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_series_role(db, auth, str(series_id))
    return respond(await db.series.update(str(series_id), req.payload()))


@router.delete("/{series_id}")
async def delete_series(
    series_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_series_role(db, auth, str(series_id), roles=(SeriesRole.ADMIN,))
    return respond(await db.series.delete(str(series_id)))


@router.get("/{series_id}/access")
async def get_series_access(
    series_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """The caller's role in the series (null when not an active member)."""
    series = await db.series.get_by_id(str(series_id))
    if not series.ok:
        return respond(series)
    role = (await db.series_participants.get_role(str(series_id), auth.user_id)).unwrap()
    return success({
        "series_id": str(series_id),
        "role": role,
        "can_manage": role in (SeriesRole.ADMIN, SeriesRole.ORGANIZER),
    })


@router.get("/{series_id}/events")
async def list_series_events(series_id: UUID, db: DatabaseManager = Depends(get_db)):
    series = await db.series.get_by_id(str(series_id))
    if not series.ok:
        return respond(series)
    return respond(await db.series.list_events(str(series_id)))


# ================================================================
# Participants
# ================================================================

@router.get("/{series_id}/participants")
async def list_series_participants(
    series_id: UUID,
    status: Optional[ParticipantStatus] = Query(None),
    role: Optional[SeriesRole] = Query(None),
    page: PageParams = Depends(page_params),
    db: DatabaseManager = Depends(get_db),
):
    filters = {"status": status, "role": role}
    return respond(await db.series_participants.list_for_series(str(series_id), filters, page=page))


@router.post("/{series_id}/participants", status_code=201)
async def invite_series_participant(
    series_id: UUID,
    req: InviteParticipantRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_series_role(db, auth, str(series_id))
    series = await db.series.get_by_id(str(series_id))
    if not series.ok:
        return respond(series)
    result = await db.series_participants.invite(str(series_id), str(req.user_id), req.role)
    return respond(result, 201)


@router.patch("/{series_id}/participants/{participant_id}")
async def update_series_participant(
    series_id: UUID,
    participant_id: UUID,
    req: UpdateParticipantRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_series_role(db, auth, str(series_id))
    participant = await _participant_of_series(db, str(series_id), str(participant_id))
    if not participant.ok:
        return respond(participant)
    return respond(await db.series_participants.update(str(participant_id), req.payload()))


@router.delete("/{series_id}/participants/{participant_id}")
async def remove_series_participant(
    series_id: UUID,
    participant_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Managers remove anyone; a participant may remove themselves."""
    participant = await _participant_of_series(db, str(series_id), str(participant_id))
    if not participant.ok:
        return respond(participant)
    if participant.data.user_id != auth.user_id:
        await require_series_role(db, auth, str(series_id))
    return respond(await db.series_participants.delete(str(participant_id)))
