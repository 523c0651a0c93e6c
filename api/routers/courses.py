"""Course and tee set endpoints. Reads are public; writes need a site admin."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.dependencies import AuthContext, get_auth_context, get_db, require_site_admin
from api.envelope import respond
from api.schemas import RequestModel, page_params
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from database.pagination import PageParams
from database.result import Err, Result
from models import TeeGender

router = APIRouter()


class CreateCourseRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    city: Optional[str] = None
    state: Optional[str] = None
    country: str = "USA"
    website: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True


class UpdateCourseRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class TeeSetRequest(RequestModel):
    tee_name: str = Field(..., min_length=1)
    gender: TeeGender
    rating: float = Field(..., ge=55, le=78)
    slope_rating: float = Field(..., ge=55, le=155)
    yardage: Optional[int] = Field(None, ge=4000, le=8000)
    color: Optional[str] = None


class UpdateTeeSetRequest(RequestModel):
    tee_name: Optional[str] = Field(None, min_length=1)
    gender: Optional[TeeGender] = None
    rating: Optional[float] = Field(None, ge=55, le=78)
    slope_rating: Optional[float] = Field(None, ge=55, le=155)
    yardage: Optional[int] = Field(None, ge=4000, le=8000)
    color: Optional[str] = None


async def _tee_of_course(db: DatabaseManager, course_id: str, tee_id: str) -> Result:
    """Fetch a tee set, treating one from another course as missing."""
    tee = await db.tee_sets.get_by_id(tee_id)
    if tee.ok and tee.data.course_id != course_id:
        return Err(NotFoundError(f"Tee set {tee_id} not found on course {course_id}"))
    return tee


# ================================================================
# Courses
# ================================================================

@router.get("")
async def list_courses(
    search: Optional[str] = Query(None, max_length=100),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: PageParams = Depends(page_params),
    db: DatabaseManager = Depends(get_db),
):
    filters = {"city": city, "state": state, "is_active": is_active}
    return respond(await db.courses.search(search, filters, page=page))


@router.post("", status_code=201)
async def create_course(
    req: CreateCourseRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    result = await db.courses.create({**req.model_dump(), "created_by": auth.user_id})
    return respond(result, 201)


@router.get("/{course_id}")
async def get_course(course_id: UUID, db: DatabaseManager = Depends(get_db)):
    """Course with its tee sets."""
    return respond(await db.courses.get_with_tees(str(course_id)))


@router.patch("/{course_id}")
async def update_course(
    course_id: UUID,
    req: UpdateCourseRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    return respond(await db.courses.update(str(course_id), req.payload()))


@router.delete("/{course_id}")
async def delete_course(
    course_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    return respond(await db.courses.delete(str(course_id)))


# ================================================================
# Tee sets
# ================================================================

@router.get("/{course_id}/tees")
async def list_tee_sets(course_id: UUID, db: DatabaseManager = Depends(get_db)):
    course = await db.courses.get_by_id(str(course_id))
    if not course.ok:
        return respond(course)
    return respond(await db.tee_sets.list_for_course(str(course_id)))


@router.post("/{course_id}/tees", status_code=201)
async def create_tee_set(
    course_id: UUID,
    req: TeeSetRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    course = await db.courses.get_by_id(str(course_id))
    if not course.ok:
        return respond(course)
    result = await db.tee_sets.create({**req.model_dump(), "course_id": str(course_id)})
    return respond(result, 201)


@router.post("/{course_id}/tees/bulk")
async def replace_tee_sets(
    course_id: UUID,
    tees: List[TeeSetRequest],
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    """Replace every tee set of the course with the posted list."""
    await require_site_admin(db, auth)
    result = await db.tee_sets.replace_for_course(
        str(course_id), [tee.model_dump() for tee in tees]
    )
    return respond(result)


@router.patch("/{course_id}/tees/{tee_id}")
async def update_tee_set(
    course_id: UUID,
    tee_id: UUID,
    req: UpdateTeeSetRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    tee = await _tee_of_course(db, str(course_id), str(tee_id))
    if not tee.ok:
        return respond(tee)
    return respond(await db.tee_sets.update(str(tee_id), req.payload()))


@router.delete("/{course_id}/tees/{tee_id}")
async def delete_tee_set(
    course_id: UUID,
    tee_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: DatabaseManager = Depends(get_db),
):
    await require_site_admin(db, auth)
    tee = await _tee_of_course(db, str(course_id), str(tee_id))
    if not tee.ok:
        return respond(tee)
    return respond(await db.tee_sets.delete(str(tee_id)))
