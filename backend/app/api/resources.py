"""Resource library: private listing, public gallery, visibility and delete."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_current_actor, get_db, require_member, to_http_exception
from app.core.errors import EduGeniusError
from app.models.profile import Actor
from app.models.resource import Resource, VisibilityUpdate
from app.services import resources as resource_store
from app.services.telemetry import instrument

router = APIRouter(prefix="/api/resources", tags=["resources"])

logger = logging.getLogger("edugenius.resources_api")


@router.get("", response_model=list[Resource])
@instrument(route="/api/resources")
async def list_resources(
    scope: Literal["private", "public"] = "private",
    q: str | None = None,
    actor: Actor = Depends(get_current_actor),
    supabase: Client = Depends(get_db),
):
    """List the caller's resources, or the public gallery, optionally filtered by title."""
    if scope == "private" and not actor.can_persist:
        return []

    try:
        if scope == "public":
            return resource_store.list_resources(supabase, public_only=True, search=q)
        return resource_store.list_resources(supabase, owner_id=actor.id, search=q)
    except Exception as e:
        logger.error("Failed to list resources (scope=%s, user=%s): %s", scope, actor.id, e)
        raise HTTPException(status_code=500, detail=f"Failed to list resources: {str(e)}")


@router.get("/{resource_id}", response_model=Resource)
@instrument(route="/api/resources/{id}")
async def get_resource(
    resource_id: str,
    actor: Actor = Depends(get_current_actor),
    supabase: Client = Depends(get_db),
):
    viewer_id = actor.id if actor.can_persist else None
    try:
        return resource_store.get_resource(supabase, resource_id, viewer_id=viewer_id)
    except EduGeniusError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get resource: {str(e)}")


@router.patch("/{resource_id}/visibility", response_model=Resource)
@instrument(route="/api/resources/{id}/visibility")
async def set_visibility(
    resource_id: str,
    request: VisibilityUpdate,
    actor: Actor = Depends(require_member),
    supabase: Client = Depends(get_db),
):
    """Set a resource public or private. Repeating the same value is a no-op."""
    try:
        return resource_store.set_visibility(supabase, resource_id, actor.id, request.is_public)
    except EduGeniusError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Visibility update failed for resource %s: %s", resource_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to update visibility: {str(e)}")


@router.delete("/{resource_id}")
@instrument(route="/api/resources/{id}")
async def delete_resource(
    resource_id: str,
    actor: Actor = Depends(require_member),
    supabase: Client = Depends(get_db),
):
    try:
        resource_store.delete_resource(supabase, resource_id, actor.id)
    except EduGeniusError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete resource: {str(e)}")
    return {"success": True, "deleted": resource_id}
