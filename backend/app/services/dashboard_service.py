import logging

from supabase import Client

from app.models.profile import Actor, Profile
from app.services.plans import get_limits, usage_percentage
from app.services.resources import count_resources, recent_resources

logger = logging.getLogger("edugenius.dashboard")

RECENT_ACTIVITY_LIMIT = 3


def get_dashboard(supabase: Client, actor: Actor, profile: Profile) -> dict:
    """
    Build the teacher dashboard:
    - plan usage from the resolved profile
    - resources: stored count and most recent worksheets
    Guests get the usage block only; nothing is read for them.
    """
    limits = get_limits(profile.plan)
    dashboard = {
        "plan": profile.plan.value,
        "generated_count": profile.generated_count,
        "max_generations": limits.max_generations,
        "usage_percentage": round(usage_percentage(profile), 1),
        "total_resources": 0,
        "recent_activity": [],
    }
    if not actor.can_persist:
        return dashboard

    # --- Stored resource count ---
    try:
        dashboard["total_resources"] = count_resources(supabase, actor.id)
    except Exception as e:
        logger.warning("Failed to count resources for %s: %s", actor.id, e)

    # --- Recent activity ---
    try:
        recent = recent_resources(supabase, actor.id, limit=RECENT_ACTIVITY_LIMIT)
        dashboard["recent_activity"] = [
            {
                "id": r.id,
                "title": r.title,
                "type": r.type,
                "created_at": r.created_at,
                "is_public": r.is_public,
            }
            for r in recent
        ]
    except Exception as e:
        logger.warning("Failed to fetch recent resources for %s: %s", actor.id, e)

    return dashboard
