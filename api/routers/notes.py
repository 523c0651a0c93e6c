"""Private notes. Callers only ever see and change their own."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.dependencies import AuthContext, get_auth_context, get_db
from api.envelope import respond
from api.schemas import RequestModel, order_params, page_params, uuids_to_str
from database.db_manager import DatabaseManager
from database.pagination import OrderParams, PageParams
from models import NoteResourceType

router = APIRouter()


class CreateNoteRequest(RequestModel):
    content: str = Field(..., min_length=1)
    related_resource_id: Optional[UUID] = None
    related_resource_type: Optional[NoteResourceType] = None


class UpdateNoteRequest(RequestModel):
    content: Optional[str] = Field(None, min_length=1)
    related_resource_id: Optional[UUID] = None
    related_resource_type: Optional[NoteResourceType] = None


@router.get("")
async def list_notes(
    related_resource_id: Optional[UUID] = Query(None, alias="relatedResourceId"),
    related_resource_type: Optional[NoteResourceType] = Query(None, alias="relatedResourceType"),
    page: PageParams = Depends(page_params),
    order: Optional[OrderParams] = Depends(order_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    filters = uuids_to_str({
        "related_resource_id": related_resource_id,
        "related_resource_type": related_resource_type,
    })
    return respond(await db.notes.list_for_user(auth.user_id, filters, page=page, order=order))


@router.post("", status_code=201)
async def create_note(
    req: CreateNoteRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    payload = uuids_to_str(req.model_dump())
    return respond(await db.notes.create({**payload, "user_id": auth.user_id}), 201)


@router.get("/{note_id}")
async def get_note(
    note_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.notes.get_owned(str(note_id), auth.user_id))


@router.patch("/{note_id}")
async def update_note(
    note_id: UUID,
    req: UpdateNoteRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.notes.get_owned(str(note_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.notes.update(str(note_id), uuids_to_str(req.payload())))


@router.delete("/{note_id}")
async def delete_note(
    note_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    owned = await db.notes.get_owned(str(note_id), auth.user_id)
    if not owned.ok:
        return respond(owned)
    return respond(await db.notes.delete(str(note_id)))
