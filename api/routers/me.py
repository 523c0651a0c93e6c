"""The caller's own memberships and pending invitations."""

from fastapi import APIRouter, Depends

from api.dependencies import AuthContext, get_auth_context, get_db
from api.envelope import respond
from api.schemas import page_params
from database.db_manager import DatabaseManager
from database.pagination import PageParams

router = APIRouter()


@router.get("/series")
async def my_series(
    page: PageParams = Depends(page_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Series memberships the caller has accepted."""
    return respond(await db.series_participants.list_for_user(auth.user_id, page=page))


@router.get("/invitations")
async def my_invitations(
    page: PageParams = Depends(page_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.series_participants.list_invitations(auth.user_id, page=page))


@router.get("/events")
async def my_events(
    page: PageParams = Depends(page_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.event_participants.list_for_user(auth.user_id, page=page))
