"""Round and scorecard endpoints. Rounds belong to the player who logged them."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.dependencies import AuthContext, get_auth_context, get_db
from api.envelope import respond, success
from api.schemas import RequestModel, order_params, page_params, uuids_to_str
from database.db_manager import DatabaseManager
from database.pagination import OrderParams, PageParams
from models import RoundStatus

router = APIRouter()


class CreateRoundRequest(RequestModel):
    course_id: UUID
    course_tee_id: UUID
    event_id: Optional[UUID] = None
    bag_id: Optional[UUID] = None
    round_date: Optional[datetime] = None
    status: RoundStatus = RoundStatus.IN_PROGRESS
    handicap_index_used: Optional[float] = Field(None, ge=-10, le=54)
    course_handicap: Optional[int] = None
    gross_score: Optional[int] = Field(None, ge=18, le=300)
    net_score: Optional[int] = None
    weather_conditions: Optional[str] = None
    course_conditions: Optional[str] = None
    wind_conditions: Optional[str] = None
    temperature: Optional[int] = None
    notes: Optional[str] = None


class UpdateRoundRequest(RequestModel):
    course_id: Optional[UUID] = None
    bag_id: Optional[UUID] = None
    round_date: Optional[datetime] = None
    status: Optional[RoundStatus] = None
    handicap_index_used: Optional[float] = Field(None, ge=-10, le=54)
    course_handicap: Optional[int] = None
    gross_score: Optional[int] = Field(None, ge=18, le=300)
    net_score: Optional[int] = None
    weather_conditions: Optional[str] = None
    course_conditions: Optional[str] = None
    wind_conditions: Optional[str] = None
    temperature: Optional[int] = None
    notes: Optional[str] = None


class ScoreRequest(RequestModel):
    hole_number: int = Field(..., ge=1, le=18)
    strokes: int = Field(..., ge=1, le=15)
    putts: Optional[int] = Field(None, ge=0, le=10)
    fairway_hit: Optional[bool] = None
    green_in_regulation: Optional[bool] = None


class UpdateScoreRequest(RequestModel):
    strokes: Optional[int] = Field(None, ge=1, le=15)
    putts: Optional[int] = Field(None, ge=0, le=10)
    fairway_hit: Optional[bool] = None
    green_in_regulation: Optional[bool] = None


# ================================================================
# Rounds
# ================================================================

@router.get("")
async def list_rounds(
    course_id: Optional[UUID] = Query(None, alias="courseId"),
    bag_id: Optional[UUID] = Query(None, alias="bagId"),
    date_after: Optional[datetime] = Query(None, alias="dateAfter"),
    date_before: Optional[datetime] = Query(None, alias="dateBefore"),
    has_score: Optional[bool] = Query(None, alias="hasScore"),
    page: PageParams = Depends(page_params),
    order: Optional[OrderParams] = Depends(order_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    filters = uuids_to_str({"course_id": course_id, "bag_id": bag_id})
    filters["round_date"] = {"gte": date_after, "lte": date_before}
    result = await db.rounds.list_for_user(
        auth.user_id, filters, has_score=has_score, page=page, order=order
    )
    return respond(result)


@router.post("", status_code=201)
async def create_round(
    req: CreateRoundRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    payload = uuids_to_str(req.model_dump())
    return respond(await db.rounds.create({**payload, "user_id": auth.user_id}), 201)


@router.get("/{round_id}")
async def get_round(
    round_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """The round with its scores ordered by hole, plus running totals."""
    result = await db.rounds.get_with_scores(str(round_id))
    if not result.ok:
        return respond(result)
    card = result.data
    return success({**card.model_dump(), "summary": card.summary()})


@router.patch("/{round_id}")
async def update_round(
    round_id: UUID,
    req: UpdateRoundRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.rounds.get_owned(str(round_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.rounds.update(str(round_id), uuids_to_str(req.payload())))


@router.delete("/{round_id}")
async def delete_round(
    round_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Delete the round and every score on it."""
    owned = await db.rounds.get_owned(str(round_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.rounds.delete(str(round_id)))


# ================================================================
# Scores
# ================================================================

@router.get("/{round_id}/scores")
async def list_round_scores(
    round_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    result = await db.rounds.get_with_scores(str(round_id))
    if not result.ok:
        return respond(result)
    return success(result.data.scores)


@router.post("/{round_id}/scores", status_code=201)
async def add_round_score(
    round_id: UUID,
    req: ScoreRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.rounds.get_owned(str(round_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.rounds.add_score(str(round_id), req.model_dump()), 201)


@router.patch("/{round_id}/scores/{score_id}")
async def update_round_score(
    round_id: UUID,
    score_id: UUID,
    req: UpdateScoreRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.rounds.get_owned(str(round_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.rounds.update_score(str(round_id), str(score_id), req.payload()))


@router.delete("/{round_id}/scores/{score_id}")
async def remove_round_score(
    round_id: UUID,
    score_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.rounds.get_owned(str(round_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.rounds.remove_score(str(round_id), str(score_id)))
