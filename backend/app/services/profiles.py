"""Profile resolution and the generated-count write.

A signed-in user's profile is created lazily on first access. The guest actor
gets an in-memory profile that is never written.
"""

import logging
from datetime import datetime, timezone

from supabase import Client

from app.core.config import get_settings
from app.core.errors import PersistenceError
from app.models.profile import Actor, Profile, UserPlan

logger = logging.getLogger("edugenius.profiles")

PROFILES_TABLE = "profiles"
DEFAULT_ROLE = "profesor"
PROFILE_LOAD_FAILED = "No se pudo cargar el perfil."


def guest_profile(actor: Actor) -> Profile:
    return Profile(
        id=actor.id,
        name="Invitado",
        email=actor.email,
        plan=UserPlan.FREE,
        generated_count=0,
        role=DEFAULT_ROLE,
    )


def _name_from_email(email: str) -> str:
    return email.split("@")[0] if email else ""


def _row_to_profile(row: dict, actor: Actor) -> Profile:
    email = row.get("email") or actor.email
    try:
        plan = UserPlan(row.get("plan") or UserPlan.FREE)
    except ValueError:
        logger.warning("Unknown plan %r for user %s, treating as free", row.get("plan"), row.get("id"))
        plan = UserPlan.FREE
    return Profile(
        id=row["id"],
        name=row.get("name") or _name_from_email(email),
        email=email,
        plan=plan,
        generated_count=row.get("generated_count") or 0,
        role=row.get("role"),
        count_reset_at=row.get("count_reset_at"),
    )


def _start_of_next_month(now: datetime) -> datetime:
    """Return the first day of the next month, preserving tzinfo."""
    if now.month == 12:
        return now.replace(year=now.year + 1, month=1, day=1,
                           hour=0, minute=0, second=0, microsecond=0)
    return now.replace(month=now.month + 1, day=1,
                       hour=0, minute=0, second=0, microsecond=0)


def _apply_monthly_reset(supabase: Client, profile: Profile, now: datetime | None = None) -> Profile:
    now = now or datetime.now(timezone.utc)
    next_reset = _start_of_next_month(now).isoformat()

    if profile.count_reset_at:
        try:
            reset_at = datetime.fromisoformat(str(profile.count_reset_at).replace("Z", "+00:00"))
        except (ValueError, TypeError) as parse_exc:
            logger.warning("Could not parse count_reset_at for user %s: %s", profile.id, parse_exc)
            return profile
        if reset_at.tzinfo is None:
            reset_at = reset_at.replace(tzinfo=timezone.utc)
        if now < reset_at:
            return profile
        changes = {"generated_count": 0, "count_reset_at": next_reset}
    else:
        changes = {"count_reset_at": next_reset}

    try:
        supabase.table(PROFILES_TABLE).update(changes).eq("id", profile.id).execute()
    except Exception as e:
        logger.warning("Monthly counter reset failed for user %s: %s", profile.id, e)
        return profile
    logger.info("Applied monthly counter policy for user %s: %s", profile.id, changes)
    return profile.model_copy(update=changes)


def get_or_create_profile(supabase: Client, actor: Actor, reset_policy: str | None = None) -> Profile:
    """Resolve ``actor`` to its profile, creating it with defaults if absent."""
    if not actor.can_persist:
        return guest_profile(actor)

    if reset_policy is None:
        reset_policy = get_settings().usage_reset_policy

    try:
        result = supabase.table(PROFILES_TABLE) \
            .select("*") \
            .eq("id", actor.id) \
            .execute()

        if result.data:
            profile = _row_to_profile(result.data[0], actor)
        else:
            logger.info("Profile not found for user %s, creating one", actor.id)
            insert_result = supabase.table(PROFILES_TABLE) \
                .insert({
                    "id": actor.id,
                    "email": actor.email,
                    "name": _name_from_email(actor.email),
                    "role": DEFAULT_ROLE,
                    "plan": UserPlan.FREE.value,
                    "generated_count": 0,
                }) \
                .execute()
            if not insert_result.data:
                raise PersistenceError(PROFILE_LOAD_FAILED)
            profile = _row_to_profile(insert_result.data[0], actor)
    except PersistenceError:
        raise
    except Exception as e:
        logger.error("Failed to load profile for user %s: %s", actor.id, e)
        raise PersistenceError(PROFILE_LOAD_FAILED, cause=e) from e

    if reset_policy == "monthly":
        profile = _apply_monthly_reset(supabase, profile)
    return profile


def increment_generated_count(supabase: Client, profile: Profile) -> int:
    """Write ``profile.generated_count + 1`` and return it.

    The value is computed from the profile read at the start of the request,
    so concurrent sessions race and the last write wins.
    """
    new_count = profile.generated_count + 1
    supabase.table(PROFILES_TABLE) \
        .update({"generated_count": new_count}) \
        .eq("id", profile.id) \
        .execute()
    return new_count
