"""CRUD operations for rounds and their hole-by-hole scores."""

import logging
from typing import Any, List, Mapping, Optional

from models import Round, RoundWithScores, Score
from models.casing import keys_to_snake
from database.exceptions import NotFoundError
from database.pagination import OrderParams, Page, PageParams
from database.repositories.bag_setup_repo import BagSetupRepositoryDB
from database.repositories.base import STORE_ERRORS, RecordRepository, utcnow
from database.result import Err, Ok, Result
from database.store import StoreClient

logger = logging.getLogger(__name__)


class ScoreRepositoryDB(RecordRepository[Score]):
    """Async CRUD for scores. One row per hole of a round."""

    table = "scores"
    model = Score
    entity = "Score"
    required_fields = ("round_id", "hole_number", "strokes")
    immutable_fields = frozenset({"round_id", "hole_number"})
    default_order = OrderParams(column="hole_number")

    async def list_for_round(self, round_id: str) -> Result[List[Score]]:
        query = self._query().eq("round_id", round_id).order("hole_number")
        return await self._select_models(query, "Failed to fetch scores")


class RoundRepositoryDB(RecordRepository[Round]):
    """Async CRUD for rounds, owned by ``user_id``."""

    table = "rounds"
    model = Round
    entity = "Round"
    owner_field = "user_id"
    required_fields = ("user_id", "course_id", "course_tee_id")
    immutable_fields = frozenset({"event_id", "course_tee_id"})
    default_order = OrderParams(column="round_date", ascending=False)

    def __init__(self, store: StoreClient):
        super().__init__(store)
        self.scores = ScoreRepositoryDB(store)

    # ================================================================
    # Rounds
    # ================================================================

    async def create(self, payload: Mapping[str, Any]) -> Result[Round]:
        """Insert a round. Date defaults to now and bag to the player's default setup."""
        data = keys_to_snake(dict(payload))
        if not data.get("round_date"):
            data["round_date"] = utcnow()
        if not data.get("bag_id") and data.get("user_id"):
            default = await BagSetupRepositoryDB(self._store).get_default(data["user_id"])
            if not default.ok:
                return default
            if default.data is not None:
                data["bag_id"] = default.data.id
        return await super().create(data)

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        has_score: Optional[bool] = None,
        page: Optional[PageParams] = None,
        order: Optional[OrderParams] = None,
    ) -> Result[Page[Round]]:
        """The user's rounds. ``has_score`` filters on a recorded gross score."""
        conditions = dict(filters or {})
        if has_score is not None:
            conditions["gross_score"] = {"neq" if has_score else "is": None}
        return await self.list(conditions, page=page, order=order, owner_id=user_id)

    async def get_with_scores(self, round_id: str) -> Result[RoundWithScores]:
        current = await self.get_by_id(round_id)
        if not current.ok:
            return current
        scores = await self.scores.list_for_round(round_id)
        if not scores.ok:
            return scores
        return Ok(RoundWithScores(**current.data.model_dump(), scores=scores.data))

    async def delete(self, record_id: str) -> Result[None]:
        """Delete a round together with its scores, atomically."""
        try:
            async with self._store.transaction() as tx:
                await tx.table(ScoreRepositoryDB.table).eq("round_id", record_id).delete()
                await self._query(tx).eq("id", record_id).delete()
        except STORE_ERRORS as e:
            return self._store_error(e, "Failed to delete round")
        logger.info("Deleted round %s and its scores", record_id)
        return Ok(None)

    # ================================================================
    # Scores
    # ================================================================

    async def add_score(self, round_id: str, payload: Mapping[str, Any]) -> Result[Score]:
        """Record a hole. A second score for the same hole is a constraint violation."""
        current = await self.get_by_id(round_id)
        if not current.ok:
            return current
        return await self.scores.create({**keys_to_snake(dict(payload)), "round_id": round_id})

    async def update_score(
        self, round_id: str, score_id: str, payload: Mapping[str, Any]
    ) -> Result[Score]:
        owned = await self._score_of_round(round_id, score_id)
        if not owned.ok:
            return owned
        return await self.scores.update(score_id, payload)

    async def remove_score(self, round_id: str, score_id: str) -> Result[None]:
        owned = await self._score_of_round(round_id, score_id)
        if not owned.ok:
            return owned
        return await self.scores.delete(score_id)

    async def _score_of_round(self, round_id: str, score_id: str) -> Result[Score]:
        score = await self.scores.get_by_id(score_id)
        if not score.ok:
            return score
        if score.data.round_id != round_id:
            return Err(NotFoundError(f"Score {score_id} not found on round {round_id}"))
        return score
