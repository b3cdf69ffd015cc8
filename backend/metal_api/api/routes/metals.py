"""Metal Admin Routes — create/read/update/delete endpoints for the Metal entity.

Invariants:
    - Every handler validates first (schema, id, bulk array) and only then touches the database
    - added_by/updated_by always come from the authenticated admin, never from the body
    - "Nothing matched" raises RecordNotFoundError, a distinct envelope from success
    - Unexpected failures propagate to the global handlers (500 FAILURE envelope)

Design Decisions:
    - Bodies taken as raw dicts and validated with core/validation helpers so the
      400-vs-422 distinction of the bulk routes holds
    - Hard and soft deletes go through services/delete_dependent so rates follow their metal
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from metal_api.api.auth import CurrentUser, get_current_user
from metal_api.api.responses import success
from metal_api.core.errors import BadRequestError, RecordNotFoundError
from metal_api.core.validation import (
    parse_flag, parse_id, require_ids, require_items,
    validate_filter, validate_payload,
)
from metal_api.infrastructure.database import get_db
from metal_api.models.metal import Metal
from metal_api.schemas.metal import (
    BulkUpdateRequest, CountRequest, FindRequest, MetalCreate, MetalUpdate,
)
from metal_api.services import db_service, delete_dependent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin/metals", tags=["metals"])


def _log_extra(user: CurrentUser, operation: str, **fields: Any) -> dict:
    return {"entity": "metal", "operation": operation, "user_id": str(user.id), **fields}


# ─── Create ─────────────────────────────────────────────────────

@router.post("/create")
async def add_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create one metal."""
    metal = validate_payload(MetalCreate, payload)
    data = {**metal.model_dump(), "added_by": user.id}
    created = await db_service.create(db, Metal, data)
    logger.info(f"Metal {created['id']} created", extra=_log_extra(user, "create"))
    return success(created)


@router.post("/add-bulk")
async def bulk_insert_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create many metals from {"data": [...]}; returns the inserted count."""
    items = require_items(payload)
    rows = [
        {**validate_payload(MetalCreate, item).model_dump(), "added_by": user.id}
        for item in items
    ]
    created = await db_service.create(db, Metal, rows)
    logger.info(
        f"{len(created)} metal(s) created",
        extra=_log_extra(user, "bulk_create", record_count=len(created)),
    )
    return success({"count": len(created)})


# ─── Read ───────────────────────────────────────────────────────

@router.post("/list")
async def find_all_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Filtered, paginated list — or only the total with is_count_only."""
    request = validate_filter(FindRequest, payload, Metal)
    if request.is_count_only:
        total_records = await db_service.count(db, Metal, request.query)
        return success({"total_records": total_records})
    found = await db_service.paginate(
        db, Metal, request.query, request.options.model_dump(),
    )
    if not found or not found["data"]:
        raise RecordNotFoundError()
    return success(found)


@router.post("/count")
async def get_metal_count(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Number of metals matching `where`."""
    request = validate_filter(CountRequest, payload, Metal)
    counted = await db_service.count(db, Metal, request.where)
    return success({"count": counted})


@router.get("/{metal_id}")
async def get_metal(
    metal_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Fetch one metal by id."""
    found = await db_service.find_one(db, Metal, {"id": parse_id(metal_id)})
    if not found:
        raise RecordNotFoundError()
    return success(found)


# ─── Update ─────────────────────────────────────────────────────

async def _update_by_id(
    db: AsyncSession, user: CurrentUser, metal_id: str, payload: dict[str, Any],
) -> dict[str, Any]:
    parsed_id = parse_id(metal_id)
    changes = validate_payload(MetalUpdate, payload).changes()
    data = {**changes, "updated_by": user.id}
    updated = await db_service.update_one(db, Metal, {"id": parsed_id}, data)
    if not updated:
        raise RecordNotFoundError()
    logger.info(f"Metal {parsed_id} updated", extra=_log_extra(user, "update"))
    return updated


@router.put("/update-bulk")
async def bulk_update_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Apply `data` to every metal matching `filter`; returns the updated count."""
    request = validate_filter(BulkUpdateRequest, payload, Metal)
    data = {k: v for k, v in request.data.items() if k != "added_by"}
    changes = validate_payload(MetalUpdate, data).changes()
    if not changes:
        raise BadRequestError("Insufficient request parameters! data is required.")
    updated = await db_service.update_many(
        db, Metal, request.filter, {**changes, "updated_by": user.id},
    )
    if not updated:
        raise RecordNotFoundError()
    logger.info(
        f"{updated} metal(s) updated",
        extra=_log_extra(user, "bulk_update", record_count=updated),
    )
    return success({"count": updated})


@router.put("/update/{metal_id}")
async def update_metal(
    metal_id: str,
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a metal by id; server-managed fields in the body are rejected."""
    return success(await _update_by_id(db, user, metal_id, payload or {}))


@router.put("/partial-update/{metal_id}")
async def partial_update_metal(
    metal_id: str,
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update only the sent fields; a client-supplied added_by is dropped."""
    data = {k: v for k, v in (payload or {}).items() if k != "added_by"}
    return success(await _update_by_id(db, user, metal_id, data))


# ─── Delete ─────────────────────────────────────────────────────

@router.put("/soft-delete-many")
async def soft_delete_many_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark metals in `ids` (and their rates) deleted."""
    ids = require_ids(payload)
    update_body = {"is_deleted": True, "updated_by": user.id}
    updated = await delete_dependent.soft_delete_metal(
        db, {"id": {"$in": ids}}, update_body,
    )
    if not updated:
        raise RecordNotFoundError()
    return success(updated)


@router.put("/soft-delete/{metal_id}")
async def soft_delete_metal(
    metal_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark one metal (and its rates) deleted."""
    parsed_id = parse_id(metal_id)
    update_body = {"is_deleted": True, "updated_by": user.id}
    updated = await delete_dependent.soft_delete_metal(
        db, {"id": parsed_id}, update_body,
    )
    if not updated:
        raise RecordNotFoundError()
    return success(updated)


@router.delete("/delete/{metal_id}")
async def delete_metal(
    metal_id: str,
    is_warning: bool = Query(False),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Hard-delete one metal and its rates; with is_warning only count them."""
    filters = {"id": parse_id(metal_id)}
    if is_warning:
        deleted = await delete_dependent.count_metal(db, filters)
    else:
        deleted = await delete_dependent.delete_metal(db, filters)
    if not deleted:
        raise RecordNotFoundError()
    return success(deleted)


@router.post("/delete-many")
async def delete_many_metal(
    payload: dict[str, Any] | None = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Hard-delete metals in `ids` and their rates; with is_warning only count them."""
    ids = require_ids(payload)
    filters = {"id": {"$in": ids}}
    if parse_flag(payload, "is_warning"):
        deleted = await delete_dependent.count_metal(db, filters)
    else:
        deleted = await delete_dependent.delete_metal(db, filters)
    if not deleted:
        raise RecordNotFoundError()
    return success(deleted)
