"""Events and their participants."""

import logging
from typing import Any, List, Mapping, Optional

from models import (
    Event,
    EventParticipant,
    EventWithParticipants,
    InvitationStatus,
    RegistrationStatus,
)
from models.casing import keys_to_snake
from database.converters import payload_to_row
from database.exceptions import ForbiddenError, ValidationError
from database.pagination import OrderParams, Page, PageParams
from database.repositories.base import STORE_ERRORS, RecordRepository, utcnow
from database.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# Registration states that take up a place in the field
_HOLDS_SPOT = [RegistrationStatus.REGISTERED.value, RegistrationStatus.CONFIRMED.value]


class EventRepositoryDB(RecordRepository[Event]):
    """Async CRUD for events. ``is_standalone`` always follows ``series_id``."""

    table = "events"
    model = Event
    entity = "Event"
    required_fields = ("name", "event_date", "course_id")
    immutable_fields = frozenset({"created_by", "is_standalone"})
    default_order = OrderParams(column="event_date")

    async def create(self, payload: Mapping[str, Any]) -> Result[Event]:
        data = keys_to_snake(dict(payload))
        data["is_standalone"] = not data.get("series_id")
        return await super().create(data)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> Result[Event]:
        """Partial update, checked against the stored event before writing."""
        changes = payload_to_row(payload, self._columns, exclude=self._frozen)
        if not changes:
            return await self.get_by_id(record_id)
        # Moving in or out of a series flips is_standalone with it
        if "series_id" in changes:
            changes["is_standalone"] = not changes["series_id"]
        current = await self._current_if_valid(record_id, changes)
        if not current.ok:
            return current
        return await self._update_row(record_id, changes, "Failed to update event")

    async def get_with_participants(self, event_id: str) -> Result[EventWithParticipants]:
        event = await self.get_by_id(event_id)
        if not event.ok:
            return event
        participants = await EventParticipantRepositoryDB(self._store).list_all_for_event(event_id)
        if not participants.ok:
            return participants
        return Ok(EventWithParticipants(**event.data.model_dump(), participants=participants.data))

    async def get_series_id(self, event_id: str) -> Result[Optional[str]]:
        """Series the event belongs to, Ok(None) for standalone events."""
        event = await self.get_by_id(event_id)
        if not event.ok:
            return event
        return Ok(event.data.series_id)


class EventParticipantRepositoryDB(RecordRepository[EventParticipant]):
    """Async CRUD for event_participants and their invitation lifecycle."""

    table = "event_participants"
    model = EventParticipant
    entity = "Event participant"
    owner_field = "user_id"
    required_fields = ("event_id", "user_id")
    immutable_fields = frozenset({"event_id", "invitation_date"})

    async def invite(self, event_id: str, user_id: str, **fields: Any) -> Result[EventParticipant]:
        """Invite ``user_id`` to an event. Extra fields (tee time, group...) are kept."""
        return await super().create({
            **keys_to_snake(fields),
            "event_id": event_id,
            "user_id": user_id,
            "invitation_status": InvitationStatus.INVITED,
            "invitation_date": utcnow(),
            "status": None,
        })

    async def list_all_for_event(self, event_id: str) -> Result[List[EventParticipant]]:
        query = self._query().eq("event_id", event_id).order("created_at")
        return await self._select_models(query, "Failed to fetch event participants")

    async def list_for_event(
        self,
        event_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
    ) -> Result[Page[EventParticipant]]:
        return await self.list({**(filters or {}), "event_id": event_id}, page=page)

    async def list_for_user(
        self, user_id: str, *, page: Optional[PageParams] = None
    ) -> Result[Page[EventParticipant]]:
        return await self.list(None, page=page, owner_id=user_id)

    async def respond(
        self, participant_id: str, user_id: str, accept: bool
    ) -> Result[EventParticipant]:
        """Accept (register) or decline an event invitation as the invitee."""
        current = await self.get_by_id(participant_id)
        if not current.ok:
            return current
        participant = current.data
        if participant.user_id != user_id:
            logger.warning(
                "User %s tried to answer event invitation %s for %s",
                user_id, participant_id, participant.user_id,
            )
            return Err(ForbiddenError("You can only respond to your own invitations"))
        if participant.invitation_status != InvitationStatus.INVITED:
            return Err(ValidationError(
                f"Invitation already {participant.invitation_status.value}"
            ))

        now = utcnow()
        if not accept:
            changes = {
                "invitation_status": InvitationStatus.DECLINED.value,
                "response_date": now,
                "status": None,
            }
            return await self._update_row(participant_id, changes, "Failed to decline invitation")

        event = await EventRepositoryDB(self._store).get_by_id(participant.event_id)
        if not event.ok:
            return event
        limit = event.data.max_participants
        if limit is not None:
            query = self._query().eq("event_id", participant.event_id).in_("status", _HOLDS_SPOT)
            try:
                taken = await query.count()
            except STORE_ERRORS as e:
                return self._store_error(e, "Failed to count event participants")
            if taken >= limit:
                return Err(ValidationError(f"Event is full ({limit} participants)"))

        changes = {
            "invitation_status": InvitationStatus.ACCEPTED.value,
            "status": RegistrationStatus.REGISTERED.value,
            "response_date": now,
        }
        return await self._update_row(participant_id, changes, "Failed to accept invitation")
