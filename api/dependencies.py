"""Request-scoped dependencies: caller identity, store access and authorization checks."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from api.config import Settings, get_settings
from database.connection import db
from database.db_manager import DatabaseManager
from database.exceptions import ForbiddenError, UnauthorizedError
from database.store import StoreClient
from models import SeriesRole

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Verified caller identity, passed explicitly to every handler."""
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def decode_access_token(token: str, settings: Settings) -> AuthContext:
    """Verify a bearer token and build the caller's context.

    Raises UnauthorizedError if the token is missing a subject, expired,
    badly signed, or if no secret is configured.
    """
    if not settings.auth_jwt_secret:
        raise UnauthorizedError("Authentication is not configured")
    options = {"verify_aud": settings.auth_jwt_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options=options,
        )
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise UnauthorizedError("Invalid or expired token") from e
    user_id = claims.get("sub")
    if not user_id:
        raise UnauthorizedError("Token has no subject")
    return AuthContext(
        user_id=str(user_id),
        email=claims.get("email"),
        role=claims.get("role"),
        claims=claims,
    )


async def get_optional_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> Optional[AuthContext]:
    """Caller context, or None for anonymous requests. A bad token is still a 401."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials, settings)


async def get_auth_context(
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
) -> AuthContext:
    if auth is None:
        raise UnauthorizedError("Authentication required")
    return auth


def get_db(
    auth: Optional[AuthContext] = Depends(get_optional_auth_context),
    settings: Settings = Depends(get_settings),
) -> DatabaseManager:
    """FastAPI dependency that provides a DatabaseManager scoped to the caller."""
    if auth is None:
        store = StoreClient(db.pool, role=settings.db_anon_role or None)
    else:
        store = StoreClient(
            db.pool,
            claims=auth.claims or {"sub": auth.user_id},
            role=settings.db_authenticated_role or None,
        )
    return DatabaseManager(store)


# ================================================================
# Authorization pre-checks
# ================================================================

async def require_site_admin(dbm: DatabaseManager, auth: AuthContext) -> None:
    """Raise ForbiddenError unless the caller is a site admin."""
    if not (await dbm.profiles.is_admin(auth.user_id)).unwrap():
        logger.warning("User %s denied admin-only operation", auth.user_id)
        raise ForbiddenError("Admin privileges required")


async def require_series_role(
    dbm: DatabaseManager,
    auth: AuthContext,
    series_id: str,
    roles: Iterable[SeriesRole] = (SeriesRole.ADMIN, SeriesRole.ORGANIZER),
) -> None:
    """Raise ForbiddenError unless the caller holds one of ``roles`` in the series.

    Site admins always pass.
    """
    role = (await dbm.series_participants.get_role(series_id, auth.user_id)).unwrap()
    if role in set(roles):
        return
    if (await dbm.profiles.is_admin(auth.user_id)).unwrap():
        return
    logger.warning(
        "User %s (role %s) denied management of series %s",
        auth.user_id, role.value if role else None, series_id,
    )
    raise ForbiddenError("You do not have permission to manage this series")
