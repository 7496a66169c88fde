from fastapi import APIRouter, Depends
from supabase import Client

from app.api.deps import get_current_actor, get_db, to_http_exception
from app.core.errors import EduGeniusError
from app.models.profile import Actor
from app.services.dashboard_service import get_dashboard
from app.services.profiles import get_or_create_profile


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
def dashboard(
    actor: Actor = Depends(get_current_actor),
    supabase: Client = Depends(get_db),
):
    try:
        profile = get_or_create_profile(supabase, actor)
    except EduGeniusError as e:
        raise to_http_exception(e)
    return get_dashboard(supabase, actor, profile)
