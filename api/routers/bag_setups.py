"""Bag setup endpoints. Every route acts on the caller's own setups."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.dependencies import AuthContext, get_auth_context, get_db
from api.envelope import respond
from api.schemas import RequestModel, order_params, page_params
from database.db_manager import DatabaseManager
from database.pagination import OrderParams, PageParams

router = APIRouter()


class CreateBagSetupRequest(RequestModel):
    setup_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    current_handicap: Optional[float] = Field(None, ge=-10, le=54)
    is_default: bool = False


class UpdateBagSetupRequest(RequestModel):
    setup_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    current_handicap: Optional[float] = Field(None, ge=-10, le=54)
    is_default: Optional[bool] = None


@router.get("")
async def list_bag_setups(
    is_default: Optional[bool] = Query(None, alias="isDefault"),
    page: PageParams = Depends(page_params),
    order: Optional[OrderParams] = Depends(order_params),
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    result = await db.bag_setups.list_for_user(
        auth.user_id, {"is_default": is_default}, page=page, order=order
    )
    return respond(result)


@router.post("", status_code=201)
async def create_bag_setup(
    req: CreateBagSetupRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    result = await db.bag_setups.create({**req.model_dump(), "user_id": auth.user_id})
    return respond(result, 201)


@router.get("/default")
async def get_default_bag_setup(
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """The caller's default setup; data is null when none is set."""
    return respond(await db.bag_setups.get_default(auth.user_id))


@router.get("/{setup_id}")
async def get_bag_setup(
    setup_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.bag_setups.get_by_id(str(setup_id)))


@router.patch("/{setup_id}")
async def update_bag_setup(
    setup_id: UUID,
    req: UpdateBagSetupRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.bag_setups.update(str(setup_id), req.payload()))


@router.delete("/{setup_id}")
async def delete_bag_setup(
    setup_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    return respond(await db.bag_setups.delete(str(setup_id)))


@router.post("/{setup_id}/default")
async def set_default_bag_setup(
    setup_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Make this setup the caller's only default."""
    return respond(await db.bag_setups.set_default(auth.user_id, str(setup_id)))
