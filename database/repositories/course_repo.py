"""Courses and their tee sets."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from models import Course, CourseWithTees, TeeSet
from database.converters import payload_to_row, rows_to_models
from database.exceptions import NotFoundError, ValidationError
from database.pagination import OrderParams, Page, PageParams
from database.repositories.base import STORE_ERRORS, SYSTEM_FIELDS, RecordRepository
from database.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class CourseRepositoryDB(RecordRepository[Course]):
    """Async CRUD for courses."""

    table = "courses"
    model = Course
    entity = "Course"
    required_fields = ("name",)
    immutable_fields = frozenset({"created_by"})
    default_order = OrderParams(column="name")

    async def search(
        self,
        name: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
    ) -> Result[Page[Course]]:
        """List courses, optionally matching ``name`` case-insensitively anywhere."""
        conditions = dict(filters or {})
        if name:
            conditions["name"] = {"ilike": name}
        return await self.list(conditions, page=page)

    async def get_with_tees(self, course_id: str) -> Result[CourseWithTees]:
        """Course plus its tee sets ordered by name."""
        course = await self.get_by_id(course_id)
        if not course.ok:
            return course
        tees = await TeeSetRepositoryDB(self._store).list_for_course(course_id)
        if not tees.ok:
            return tees
        return Ok(CourseWithTees(**course.data.model_dump(), tees=tees.data))


class TeeSetRepositoryDB(RecordRepository[TeeSet]):
    """Async CRUD for tee_sets. A tee set never moves to another course."""

    table = "tee_sets"
    model = TeeSet
    entity = "Tee set"
    required_fields = ("course_id", "tee_name")
    immutable_fields = frozenset({"course_id"})
    default_order = OrderParams(column="tee_name")

    async def list_for_course(self, course_id: str) -> Result[List[TeeSet]]:
        query = self._query().eq("course_id", course_id).order("tee_name")
        return await self._select_models(query, "Failed to fetch tee sets")

    async def replace_for_course(
        self, course_id: str, tees: Sequence[Mapping[str, Any]]
    ) -> Result[List[TeeSet]]:
        """Replace every tee set of a course with ``tees``.

        The course must exist, otherwise nothing is written. The delete and the
        insert share one store transaction, so a failed insert keeps the old
        tee sets.
        """
        rows: List[Dict[str, Any]] = []
        for i, tee in enumerate(tees):
            row = payload_to_row(tee, self._columns, exclude=SYSTEM_FIELDS)
            row["course_id"] = course_id
            invalid = self._validate_new(row)
            if invalid:
                invalid.error.details = {"index": i, "errors": invalid.error.details}
                return invalid
            rows.append(row)

        names = [r["tee_name"] for r in rows]
        if len(set(names)) != len(names):
            return Err(ValidationError("Tee names must be unique within a course"))

        try:
            async with self._store.transaction() as tx:
                found = await tx.table(CourseRepositoryDB.table).eq("id", course_id).select("id")
                if not found.rows:
                    return Err(NotFoundError(f"Course {course_id} not found"))
                removed = await self._query(tx).eq("course_id", course_id).delete()
                inserted = await self._query(tx).insert(rows) if rows else []
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to replace tee sets")

        logger.info(
            "Replaced %d tee set(s) with %d for course %s",
            len(removed), len(inserted), course_id,
        )
        return Ok(rows_to_models(TeeSet, inserted))
