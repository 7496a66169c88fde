from fastapi import APIRouter, Depends
from supabase import Client

from app.api.deps import get_current_actor, get_db, to_http_exception
from app.core.errors import EduGeniusError
from app.models.profile import Actor, SubscriptionStatus
from app.services.plans import PLAN_LIMITS, build_status
from app.services.profiles import get_or_create_profile

router = APIRouter(prefix="/api", tags=["subscription"])


@router.get("/subscription/status", response_model=SubscriptionStatus)
async def get_subscription_status(
    actor: Actor = Depends(get_current_actor),
    supabase: Client = Depends(get_db),
):
    """Get the caller's plan, usage and whether generation is currently allowed."""
    try:
        profile = get_or_create_profile(supabase, actor)
    except EduGeniusError as e:
        raise to_http_exception(e)
    return build_status(profile)


@router.get("/plans")
async def list_plans():
    """Static plan limits table."""
    return {plan.value: limits.model_dump() for plan, limits in PLAN_LIMITS.items()}
