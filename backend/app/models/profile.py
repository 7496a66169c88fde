from enum import Enum
from pydantic import BaseModel


class UserPlan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class Actor(BaseModel, frozen=True):
    """The identity acting on a request.

    ``can_persist`` is False for the guest identity: nothing it does is
    written to the resource or profile tables.
    """
    id: str
    email: str = ""
    can_persist: bool = True


GUEST_ACTOR = Actor(id="guest", email="invitado@edugenius.ai", can_persist=False)


class Profile(BaseModel):
    id: str
    name: str
    email: str
    plan: UserPlan = UserPlan.FREE
    generated_count: int = 0
    role: str | None = None
    count_reset_at: str | None = None


class PlanLimits(BaseModel, frozen=True):
    max_generations: int
    max_resources: int
    can_export_pdf: bool
    max_history: int


class SubscriptionStatus(BaseModel):
    plan: UserPlan
    generated_count: int
    max_generations: int
    generations_remaining: int | None  # None for premium (unlimited)
    can_generate: bool
    can_export_pdf: bool
    max_resources: int
    max_history: int
    usage_percentage: float
