from typing import Any, Mapping, Optional

from models import UserNote
from database.pagination import OrderParams, Page, PageParams
from database.repositories.base import RecordRepository
from database.result import Result


class NoteRepositoryDB(RecordRepository[UserNote]):
    """Async CRUD for user_notes. Every listing is scoped to one owner."""

    table = "user_notes"
    model = UserNote
    entity = "Note"
    owner_field = "user_id"
    required_fields = ("user_id", "content")

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
        order: Optional[OrderParams] = None,
    ) -> Result[Page[UserNote]]:
        return await self.list(filters, page=page, order=order, owner_id=user_id)
