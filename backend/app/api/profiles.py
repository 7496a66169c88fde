from fastapi import APIRouter, Depends
from supabase import Client

from app.api.deps import get_current_actor, get_db, to_http_exception
from app.core.errors import EduGeniusError
from app.models.profile import Actor
from app.services.profiles import get_or_create_profile

router = APIRouter(prefix="/api", tags=["profile"])


@router.get("/profile")
async def get_profile(
    actor: Actor = Depends(get_current_actor),
    supabase: Client = Depends(get_db),
):
    """Get the caller's profile, creating it on first access. Guests get a default one."""
    try:
        profile = get_or_create_profile(supabase, actor)
    except EduGeniusError as e:
        raise to_http_exception(e)
    return {"profile": profile.model_dump(), "is_guest": not actor.can_persist}
