"""Bag setups and the one-default-per-user rule."""

import logging
from typing import Any, Mapping, Optional

from models import BagSetup
from models.casing import keys_to_snake
from database.converters import row_to_model
from database.exceptions import ForbiddenError
from database.pagination import OrderParams, Page, PageParams
from database.repositories.base import STORE_ERRORS, RecordRepository, utcnow
from database.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class BagSetupRepositoryDB(RecordRepository[BagSetup]):
    """Async CRUD for bag_setups, owned by ``user_id``."""

    table = "bag_setups"
    model = BagSetup
    entity = "Bag setup"
    owner_field = "user_id"
    required_fields = ("user_id", "setup_name")

    # ================================================================
    # Create / Update
    # ================================================================

    async def create(self, payload: Mapping[str, Any]) -> Result[BagSetup]:
        """Insert a setup. A default setup is inserted as non-default, then promoted."""
        data = keys_to_snake(dict(payload))
        make_default = bool(data.pop("is_default", False))
        result = await super().create({**data, "is_default": False})
        if not result.ok or not make_default:
            return result
        return await self.set_default(result.data.user_id, result.data.id)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> Result[BagSetup]:
        """Partial update. ``is_default: true`` goes through set_default, never a plain write."""
        data = keys_to_snake(dict(payload))
        make_default = data.get("is_default") is True
        if make_default:
            data.pop("is_default")
        result = await super().update(record_id, data)
        if not result.ok or not make_default:
            return result
        return await self.set_default(result.data.user_id, record_id)

    # ================================================================
    # Read
    # ================================================================

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[PageParams] = None,
        order: Optional[OrderParams] = None,
    ) -> Result[Page[BagSetup]]:
        return await self.list(filters, page=page, order=order, owner_id=user_id)

    async def get_default(self, user_id: str) -> Result[Optional[BagSetup]]:
        """The user's default setup, or Ok(None).

        If a concurrent set_default left more than one flagged, the most
        recently updated one wins.
        """
        query = (
            self._query()
            .eq("user_id", user_id)
            .eq("is_default", True)
            .order("updated_at", ascending=False)
            .range(0, 0)
        )
        try:
            result = await query.select()
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to fetch default bag setup")
        if not result.rows:
            return Ok(None)
        return Ok(row_to_model(BagSetup, result.rows[0]))

    # ================================================================
    # Default flag
    # ================================================================

    async def set_default(self, user_id: str, setup_id: str) -> Result[BagSetup]:
        """Make ``setup_id`` the user's only default setup.

        Two sequential writes, no lock and no transaction between them:
          1. clear is_default on every other setup of the user
          2. set is_default on the target
        A failure after phase 1 leaves the user with no default, never two.
        Two concurrent calls for the same user can interleave and briefly
        leave more than one default; get_default tolerates that.
        """
        target = await self.get_by_id(setup_id)
        if not target.ok:
            return target
        if target.data.user_id != user_id:
            logger.warning(
                "User %s tried to set default on bag setup %s owned by %s",
                user_id, setup_id, target.data.user_id,
            )
            return Err(ForbiddenError("Bag setup belongs to another user"))

        now = utcnow()
        try:
            cleared = await (
                self._query()
                .eq("user_id", user_id)
                .neq("id", setup_id)
                .eq("is_default", True)
                .update({"is_default": False, "updated_at": now})
            )
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to clear previous default bag setup")
        logger.debug("Cleared default on %d bag setup(s) for user %s", len(cleared), user_id)

        try:
            rows = await (
                self._query()
                .eq("id", setup_id)
                .eq("user_id", user_id)
                .update({"is_default": True, "updated_at": now})
            )
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to set default bag setup")
        if not rows:
            # Deleted between the read and the write; the user now has no default.
            logger.warning("Bag setup %s vanished while setting default", setup_id)
            return await self.get_by_id(setup_id)

        logger.info("Bag setup %s is now the default for user %s", setup_id, user_id)
        return Ok(row_to_model(BagSetup, rows[0]))
