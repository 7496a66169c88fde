"""Plan limits and the generation quota gate.

All functions here are pure: they read a Profile and never write.
"""

from app.models.profile import PlanLimits, Profile, SubscriptionStatus, UserPlan

PLAN_LIMITS: dict[UserPlan, PlanLimits] = {
    UserPlan.FREE: PlanLimits(
        max_generations=3,
        max_resources=5,
        can_export_pdf=False,
        max_history=3,
    ),
    UserPlan.PREMIUM: PlanLimits(
        max_generations=1000,
        max_resources=1000,
        can_export_pdf=True,
        max_history=1000,
    ),
}

LIMIT_REACHED_MESSAGE = "Límite gratuito alcanzado."


def get_limits(plan: UserPlan) -> PlanLimits:
    return PLAN_LIMITS[plan]


def can_generate(profile: Profile) -> bool:
    """Premium is always allowed; free stops once the count reaches its limit."""
    if profile.plan == UserPlan.PREMIUM:
        return True
    return profile.generated_count < get_limits(profile.plan).max_generations


def remaining_generations(profile: Profile) -> int | None:
    if profile.plan == UserPlan.PREMIUM:
        return None
    return max(0, get_limits(profile.plan).max_generations - profile.generated_count)


def usage_percentage(profile: Profile) -> float:
    limit = get_limits(profile.plan).max_generations
    return min(profile.generated_count / limit * 100, 100.0)


def can_export_pdf(profile: Profile) -> bool:
    return get_limits(profile.plan).can_export_pdf


def build_status(profile: Profile) -> SubscriptionStatus:
    limits = get_limits(profile.plan)
    return SubscriptionStatus(
        plan=profile.plan,
        generated_count=profile.generated_count,
        max_generations=limits.max_generations,
        generations_remaining=remaining_generations(profile),
        can_generate=can_generate(profile),
        can_export_pdf=limits.can_export_pdf,
        max_resources=limits.max_resources,
        max_history=limits.max_history,
        usage_percentage=round(usage_percentage(profile), 1),
    )
