"""Read access to user profiles."""

from models import Profile
from database.repositories.base import STORE_ERRORS, RecordRepository
from database.result import Ok, Result


class ProfileRepositoryDB(RecordRepository[Profile]):
    """Profiles are keyed by the auth user id and written by the auth provider."""

    table = "profiles"
    model = Profile
    entity = "Profile"
    immutable_fields = frozenset({"email", "is_admin"})

    async def is_admin(self, user_id: str) -> Result[bool]:
        """True only if the user has a profile flagged as site admin."""
        try:
            result = await self._query().eq("id", user_id).select("is_admin")
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to check admin status")
        if not result.rows:
            return Ok(False)
        return Ok(bool(result.rows[0]["is_admin"]))
