"""Resource store: persisted worksheets in the ``resources`` table."""

import logging

from supabase import Client

from app.core.errors import PersistenceError, ResourceNotFoundError
from app.models.resource import Resource

logger = logging.getLogger("edugenius.resources")

RESOURCES_TABLE = "resources"
WORKSHEET_TYPE = "worksheet"


def _row_to_resource(row: dict) -> Resource:
    return Resource(
        id=str(row["id"]),
        user_id=row["user_id"],
        title=row.get("title") or "",
        content=row.get("content") or "",
        created_at=str(row.get("created_at") or ""),
        type=row.get("type") or WORKSHEET_TYPE,
        is_public=bool(row.get("is_public")),
        description=row.get("description"),
    )


def insert_resource(
    supabase: Client,
    owner_id: str,
    title: str,
    content: str,
    resource_type: str = WORKSHEET_TYPE,
) -> Resource:
    """Insert one resource row. Raises PersistenceError on any failure."""
    try:
        result = supabase.table(RESOURCES_TABLE).insert({
            "user_id": owner_id,
            "title": title,
            "content": content,
            "type": resource_type,
        }).execute()
    except Exception as e:
        logger.error("Resource insert failed for user %s: %s", owner_id, e)
        raise PersistenceError(cause=e) from e

    if not result.data:
        logger.error("Resource insert returned no data for user %s", owner_id)
        raise PersistenceError()
    return _row_to_resource(result.data[0])


def _title_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def list_resources(
    supabase: Client,
    owner_id: str | None = None,
    public_only: bool = False,
    limit: int | None = None,
    search: str | None = None,
) -> list[Resource]:
    """Owner-scoped or public listing, newest first.

    ``search`` keeps only titles containing it, ignoring case.
    """
    if owner_id is None and not public_only:
        raise ValueError("list_resources needs owner_id or public_only=True")

    query = supabase.table(RESOURCES_TABLE).select("*")
    if public_only:
        query = query.eq("is_public", True)
    else:
        query = query.eq("user_id", owner_id)
    if search and search.strip():
        query = query.ilike("title", _title_pattern(search.strip()))
    query = query.order("created_at", desc=True)
    if limit is not None:
        query = query.limit(limit)

    result = query.execute()
    return [_row_to_resource(row) for row in (result.data or [])]


def recent_resources(supabase: Client, owner_id: str, limit: int = 3) -> list[Resource]:
    return list_resources(supabase, owner_id=owner_id, limit=limit)


def count_resources(supabase: Client, owner_id: str) -> int:
    result = supabase.table(RESOURCES_TABLE) \
        .select("id", count="exact") \
        .eq("user_id", owner_id) \
        .execute()
    if result.count is not None:
        return result.count
    return len(result.data or [])


def get_resource(supabase: Client, resource_id: str, viewer_id: str | None = None) -> Resource:
    """Fetch a resource the viewer owns, or any public one."""
    result = supabase.table(RESOURCES_TABLE) \
        .select("*") \
        .eq("id", resource_id) \
        .execute()

    if not result.data:
        raise ResourceNotFoundError()
    resource = _row_to_resource(result.data[0])
    if resource.user_id != viewer_id and not resource.is_public:
        raise ResourceNotFoundError()
    return resource


def set_visibility(supabase: Client, resource_id: str, owner_id: str, is_public: bool) -> Resource:
    """Set the public flag to ``is_public``.

    Writing the target value rather than flipping the stored one makes a
    repeated call a no-op.
    """
    result = supabase.table(RESOURCES_TABLE) \
        .update({"is_public": is_public}) \
        .eq("id", resource_id) \
        .eq("user_id", owner_id) \
        .execute()

    if not result.data:
        raise ResourceNotFoundError()
    return _row_to_resource(result.data[0])


def delete_resource(supabase: Client, resource_id: str, owner_id: str) -> None:
    result = supabase.table(RESOURCES_TABLE) \
        .delete() \
        .eq("id", resource_id) \
        .eq("user_id", owner_id) \
        .execute()

    if not result.data:
        raise ResourceNotFoundError()
    logger.info("Deleted resource %s for user %s", resource_id, owner_id)
