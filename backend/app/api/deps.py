"""Request-scoped dependencies shared by the routers."""

import logging

from fastapi import Depends, Header, HTTPException
from supabase import Client

from app.core.deps import MISSING_SUPABASE, get_supabase_client
from app.core.errors import (
    ConfigurationError,
    EduGeniusError,
    GenerationError,
    PersistenceError,
    ResourceNotFoundError,
)
from app.models.profile import Actor, GUEST_ACTOR

logger = logging.getLogger("edugenius.auth")

GUEST_FORBIDDEN = "Crea una cuenta para guardar y gestionar tus fichas."

_STATUS_BY_ERROR: list[tuple[type[EduGeniusError], int]] = [
    (ConfigurationError, 503),
    (GenerationError, 502),
    (ResourceNotFoundError, 404),
    (PersistenceError, 500),
]


def to_http_exception(exc: EduGeniusError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.user_message)
    return HTTPException(status_code=500, detail=exc.user_message)


def get_optional_db() -> Client | None:
    """The Supabase client, or None when it is not configured."""
    try:
        return get_supabase_client()
    except ConfigurationError:
        return None


def ensure_db(supabase: Client | None) -> Client:
    if supabase is None:
        logger.error("Supabase is not configured")
        raise to_http_exception(ConfigurationError(MISSING_SUPABASE))
    return supabase


def get_db(supabase: Client | None = Depends(get_optional_db)) -> Client:
    return ensure_db(supabase)


def get_current_actor(
    authorization: str = Header(None),
    supabase: Client | None = Depends(get_optional_db),
) -> Actor:
    """Resolve the caller from a Supabase JWT; no header means guest.

    Guests are resolved without touching Supabase.
    """
    if not authorization:
        return GUEST_ACTOR
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")
    supabase = ensure_db(supabase)

    token = authorization.replace("Bearer ", "")
    try:
        user_response = supabase.auth.get_user(token)
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid token")
        user = user_response.user
        return Actor(id=user.id, email=user.email or "", can_persist=True)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Auth token verification failed: %s", e)
        raise HTTPException(status_code=401, detail=f"Authentication failed: {str(e)}")


def require_member(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.can_persist:
        raise HTTPException(status_code=403, detail=GUEST_FORBIDDEN)
    return actor
