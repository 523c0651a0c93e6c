"""Series and their participant rosters."""

import logging
from typing import Any, List, Mapping, Optional

from models import (
    Event,
    InvitationStatus,
    ParticipantStatus,
    Series,
    SeriesParticipant,
    SeriesRole,
    SeriesStatus,
)
from database.converters import payload_to_row, row_to_model
from database.exceptions import ForbiddenError, ValidationError
from database.pagination import OrderParams, Page, PageParams
from database.repositories.base import STORE_ERRORS, SYSTEM_FIELDS, RecordRepository, utcnow
from database.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class SeriesRepositoryDB(RecordRepository[Series]):
    """Async CRUD for series with status lifecycle checks."""

    table = "series"
    model = Series
    entity = "Series"
    required_fields = ("name", "start_date", "end_date")
    immutable_fields = frozenset({"created_by"})
    default_order = OrderParams(column="start_date", ascending=False)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> Result[Series]:
        """Partial update. Status must follow the lifecycle and dates stay ordered."""
        changes = payload_to_row(payload, self._columns, exclude=self._frozen)
        if not changes:
            return await self.get_by_id(record_id)

        current = await self._current_if_valid(record_id, changes)
        if not current.ok:
            return current
        series = current.data

        if "status" in changes:
            new_status = SeriesStatus(changes["status"])
            if not series.can_transition_to(new_status):
                return Err(ValidationError(
                    f"Cannot change series status from {series.status.value} to {new_status.value}"
                ))

        return await self._update_row(record_id, changes, "Failed to update series")

    async def create_with_admin(
        self, payload: Mapping[str, Any], admin_user_id: str
    ) -> Result[Series]:
        """Create a series and enrol ``admin_user_id`` as its active admin, atomically."""
        row = payload_to_row(payload, self._columns, exclude=SYSTEM_FIELDS)
        row["created_by"] = admin_user_id
        invalid = self._validate_new(row)
        if invalid:
            return invalid

        now = utcnow()
        try:
            async with self._store.transaction() as tx:
                created = await self._query(tx).insert(row)
                series = row_to_model(Series, created[0])
                await tx.table(SeriesParticipantRepositoryDB.table).insert({
                    "series_id": series.id,
                    "user_id": admin_user_id,
                    "role": SeriesRole.ADMIN.value,
                    "status": ParticipantStatus.ACTIVE.value,
                    "invitation_status": InvitationStatus.ACCEPTED.value,
                    "invitation_date": now,
                    "joined_at": now,
                })
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to create series")

        logger.info("Created series %s with admin %s", series.id, admin_user_id)
        return Ok(series)

    async def search(
        self,
        name: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
    ) -> Result[Page[Series]]:
        conditions = dict(filters or {})
        if name:
            conditions["name"] = {"ilike": name}
        return await self.list(conditions, page=page)

    async def list_events(self, series_id: str) -> Result[List[Event]]:
        """Events of a series, earliest first."""
        query = self._store.table("events").eq("series_id", series_id).order("event_date")
        try:
            result = await query.select()
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to fetch series events")
        return Ok([row_to_model(Event, r) for r in result.rows])


class SeriesParticipantRepositoryDB(RecordRepository[SeriesParticipant]):
    """Async CRUD for series_participants and the invitation lifecycle."""

    table = "series_participants"
    model = SeriesParticipant
    entity = "Series participant"
    owner_field = "user_id"
    required_fields = ("series_id", "user_id")
    immutable_fields = frozenset({"series_id", "invitation_date", "joined_at"})

    async def _check_capacity(self, series_id: str) -> Optional[Err]:
        """Err when the series cannot take another active member, else None."""
        series = await SeriesRepositoryDB(self._store).get_by_id(series_id)
        if not series.ok:
            return series
        limit = series.data.max_participants
        if limit is None:
            return None
        active = await self.count_active(series_id)
        if not active.ok:
            return active
        if active.data >= limit:
            return Err(ValidationError(f"Series is full ({limit} participants)"))
        return None

    async def update(
        self, record_id: str, payload: Mapping[str, Any]
    ) -> Result[SeriesParticipant]:
        """Partial update by a series manager. Activating a member takes a place."""
        changes = payload_to_row(payload, self._columns, exclude=self._frozen)
        if not changes:
            return await self.get_by_id(record_id)
        current = await self._current_if_valid(record_id, changes)
        if not current.ok:
            return current
        participant = current.data

        activating = (
            "status" in changes
            and ParticipantStatus(changes["status"]) == ParticipantStatus.ACTIVE
            and participant.status != ParticipantStatus.ACTIVE
        )
        if activating:
            full = await self._check_capacity(participant.series_id)
            if full:
                return full
            if participant.joined_at is None:
                changes["joined_at"] = utcnow()

        return await self._update_row(record_id, changes, "Failed to update series participant")

    async def invite(
        self, series_id: str, user_id: str, role: SeriesRole = SeriesRole.PLAYER
    ) -> Result[SeriesParticipant]:
        """Add ``user_id`` to the roster as an inactive invitee."""
        return await super().create({
            "series_id": series_id,
            "user_id": user_id,
            "role": SeriesRole(role),
            "status": ParticipantStatus.INACTIVE,
            "invitation_status": InvitationStatus.INVITED,
            "invitation_date": utcnow(),
        })

    async def get_role(self, series_id: str, user_id: str) -> Result[Optional[SeriesRole]]:
        """The user's role in the series, or Ok(None) if not an active member."""
        query = (
            self._query()
            .eq("series_id", series_id)
            .eq("user_id", user_id)
            .eq("status", ParticipantStatus.ACTIVE.value)
        )
        try:
            result = await query.select("role")
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to fetch series role")
        if not result.rows:
            return Ok(None)
        return Ok(SeriesRole(result.rows[0]["role"]))

    async def list_for_series(
        self,
        series_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
    ) -> Result[Page[SeriesParticipant]]:
        return await self.list({**(filters or {}), "series_id": series_id}, page=page)

    async def list_for_user(
        self, user_id: str, *, page: Optional[PageParams] = None
    ) -> Result[Page[SeriesParticipant]]:
        """Series the user has joined."""
        filters = {"invitation_status": InvitationStatus.ACCEPTED}
        return await self.list(filters, page=page, owner_id=user_id)

    async def list_invitations(
        self, user_id: str, *, page: Optional[PageParams] = None
    ) -> Result[Page[SeriesParticipant]]:
        """Pending invitations addressed to the user."""
        filters = {"invitation_status": InvitationStatus.INVITED}
        return await self.list(filters, page=page, owner_id=user_id)

    async def count_active(self, series_id: str) -> Result[int]:
        query = (
            self._query()
            .eq("series_id", series_id)
            .eq("status", ParticipantStatus.ACTIVE.value)
        )
        try:
            return Ok(await query.count())
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to count series participants")

    async def respond(
        self, participant_id: str, user_id: str, accept: bool
    ) -> Result[SeriesParticipant]:
        """Accept or decline a pending invitation on behalf of the invitee."""
        current = await self.get_by_id(participant_id)
        if not current.ok:
            return current
        participant = current.data
        if participant.user_id != user_id:
            logger.warning(
                "User %s tried to answer series invitation %s for %s",
                user_id, participant_id, participant.user_id,
            )
            return Err(ForbiddenError("You can only respond to your own invitations"))
        if participant.invitation_status != InvitationStatus.INVITED:
            return Err(ValidationError(
                f"Invitation already {participant.invitation_status.value}"
            ))

        if not accept:
            changes = {
                "invitation_status": InvitationStatus.DECLINED.value,
                "status": ParticipantStatus.INACTIVE.value,
            }
            return await self._update_row(participant_id, changes, "Failed to decline invitation")

        full = await self._check_capacity(participant.series_id)
        if full:
            return full

        changes = {
            "invitation_status": InvitationStatus.ACCEPTED.value,
            "status": ParticipantStatus.ACTIVE.value,
            "joined_at": utcnow(),
        }
        return await self._update_row(participant_id, changes, "Failed to accept invitation")
