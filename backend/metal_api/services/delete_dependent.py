"""Dependent Deletion — count, delete and soft-delete metals together with their rates.

Invariants:
    - Every function returns None when no metal matches the filter (routes map it to 404)
    - Dependents are processed before their parent metals
    - Return shape is {"metal": n, "metal_rate": m}

Design Decisions:
    - Each step commits on its own through db_service: no cross-statement transaction,
      a failure midway leaves the already-processed dependents changed
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from metal_api.models.metal import Metal
from metal_api.models.metal_rate import MetalRate
from metal_api.services import db_service

logger = logging.getLogger(__name__)


def _dependents_filter(metal_ids: list) -> dict[str, Any]:
    return {"metal_id": {"$in": metal_ids}}


async def count_metal(db: AsyncSession, filters: dict[str, Any]) -> dict[str, int] | None:
    """Count matching metals and the rates that would be deleted with them."""
    metal_ids = await db_service.find_ids(db, Metal, filters)
    if not metal_ids:
        return None
    rate_count = await db_service.count(db, MetalRate, _dependents_filter(metal_ids))
    return {"metal": len(metal_ids), "metal_rate": rate_count}


async def delete_metal(db: AsyncSession, filters: dict[str, Any]) -> dict[str, int] | None:
    """Hard-delete matching metals and their rates."""
    metal_ids = await db_service.find_ids(db, Metal, filters)
    if not metal_ids:
        return None
    rate_count = await db_service.delete_many(db, MetalRate, _dependents_filter(metal_ids))
    metal_count = await db_service.delete_many(db, Metal, {"id": {"$in": metal_ids}})
    logger.info(
        f"Deleted {metal_count} metal(s) and {rate_count} rate(s)",
        extra={"entity": "metal", "operation": "delete", "record_count": metal_count},
    )
    return {"metal": metal_count, "metal_rate": rate_count}


async def soft_delete_metal(
    db: AsyncSession, filters: dict[str, Any], update_body: dict[str, Any],
) -> dict[str, int] | None:
    """Apply `update_body` (is_deleted/updated_by) to matching metals and their rates."""
    metal_ids = await db_service.find_ids(db, Metal, filters)
    if not metal_ids:
        return None
    rate_count = await db_service.update_many(
        db, MetalRate, _dependents_filter(metal_ids), update_body,
    )
    metal_count = await db_service.update_many(
        db, Metal, {"id": {"$in": metal_ids}}, update_body,
    )
    logger.info(
        f"Soft-deleted {metal_count} metal(s) and {rate_count} rate(s)",
        extra={"entity": "metal", "operation": "soft_delete", "record_count": metal_count},
    )
    return {"metal": metal_count, "metal_rate": rate_count}
