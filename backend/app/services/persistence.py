"""Persistence and quota update after a successful generation.

Order is fixed: insert the resource, then bump the counter. An insert failure
raises and the counter is left alone. A counter failure is logged and
swallowed: the inserted row stays and the stored count lags behind the
resource list.
"""

import logging
from dataclasses import dataclass

from supabase import Client

from app.models.profile import Actor, Profile
from app.models.worksheet import WorksheetRequest, WorksheetResponse
from app.services.profiles import increment_generated_count
from app.services.resources import WORKSHEET_TYPE, insert_resource

logger = logging.getLogger("edugenius.persistence")


@dataclass
class PersistOutcome:
    persisted: bool
    generated_count: int
    resource_id: str | None = None
    counter_updated: bool = False


def persist_generation(
    supabase: Client,
    actor: Actor,
    profile: Profile,
    request: WorksheetRequest,
    response: WorksheetResponse,
) -> PersistOutcome:
    if not actor.can_persist:
        return PersistOutcome(persisted=False, generated_count=profile.generated_count)

    # Raises PersistenceError; nothing below runs in that case
    resource = insert_resource(
        supabase,
        owner_id=actor.id,
        title=request.resource_title,
        content=response.content,
        resource_type=WORKSHEET_TYPE,
    )

    try:
        new_count = increment_generated_count(supabase, profile)
    except Exception as e:
        logger.warning(
            "Counter update failed for user %s after saving resource %s: %s",
            actor.id, resource.id, e,
        )
        return PersistOutcome(
            persisted=True,
            generated_count=profile.generated_count,
            resource_id=resource.id,
            counter_updated=False,
        )

    return PersistOutcome(
        persisted=True,
        generated_count=new_count,
        resource_id=resource.id,
        counter_updated=True,
    )
