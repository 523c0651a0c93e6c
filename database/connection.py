import logging
from typing import Optional
from urllib.parse import urlsplit

import asyncpg

logger = logging.getLogger(__name__)

# Tables the API reads and writes; health stays degraded until schema.sql is applied.
REQUIRED_TABLES = (
    "profiles",
    "bag_setups",
    "courses",
    "tee_sets",
    "series",
    "series_participants",
    "events",
    "event_participants",
    "rounds",
    "scores",
    "user_notes",
)


def describe_target(
    dsn: Optional[str], host: str, port: int, database: str
) -> str:
    """host:port/database for log lines. Credentials never appear."""
    if dsn:
        parts = urlsplit(dsn)
        host = parts.hostname or host
        port = parts.port or port
        database = parts.path.lstrip("/") or database
    return f"{host}:{port}/{database}"


class DatabasePool:
    """Owns the asyncpg pool shared by every per-request store client."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        host: str = "localhost",
        port: int = 5432,
        database: str = "postgres",
        user: str = "postgres",
        password: str = "",
        min_size: int = 2,
        max_size: int = 10,
    ) -> None:
        """Create the pool once at startup. DATABASE_URL wins over the PG* parts."""
        if self._pool is not None:
            return
        target = describe_target(dsn, host, port, database)
        logger.info("Connecting to %s", target)
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            host=None if dsn else host,
            port=None if dsn else port,
            database=None if dsn else database,
            user=None if dsn else user,
            password=None if dsn else password,
            min_size=min_size,
            max_size=max_size,
        )
        logger.info("Database pool ready for %s (min=%d, max=%d)", target, min_size, max_size)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    async def health_check(self) -> bool:
        """True when the store answers and every API table exists."""
        try:
            async with self.pool.acquire() as conn:
                missing = await conn.fetchval(
                    "SELECT array_agg(t) FROM unnest($1::text[]) AS t"
                    " WHERE to_regclass('public.' || t) IS NULL",
                    list(REQUIRED_TABLES),
                )
        except (RuntimeError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("Database health check failed: %s", e)
            return False
        if missing:
            logger.warning("Database reachable but missing tables: %s", ", ".join(missing))
            return False
        return True


db = DatabasePool()
