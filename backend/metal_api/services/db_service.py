"""Generic Data Access — model-agnostic CRUD helpers over an AsyncSession.

Invariants:
    - Every write commits before returning; a failed statement rolls back first
    - All SQLAlchemy exceptions surface as DatabaseError with the driver message
    - Filters use the document-style language of core/query_filters.py
    - Results are plain documents (column name -> value), never ORM instances

Design Decisions:
    - Module of functions over a repository class: routes call them like a service
      (db_service.create(db, Metal, data)), the session is the only state
    - Bulk UPDATE/DELETE run as single statements with synchronize_session=False:
      each request has its own session, so there is no identity map to keep in sync
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import delete, func, inspect as sa_inspect, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from metal_api.core.errors import DatabaseError, ErrorContext
from metal_api.core.pagination import build_paginator, page_offset
from metal_api.core.query_filters import build_conditions, build_order_by

logger = logging.getLogger(__name__)


def to_document(instance: Any, fields: list[str] | None = None) -> dict[str, Any]:
    """Serialize an ORM instance to a column-name -> value mapping."""
    names = sa_inspect(type(instance)).columns.keys()
    if fields:
        names = [n for n in names if n in fields or n == "id"]
    return {name: getattr(instance, name) for name in names}


@asynccontextmanager
async def _guard(db: AsyncSession, model: type, operation: str) -> AsyncGenerator[None, None]:
    """Roll back and re-raise SQLAlchemy errors as DatabaseError."""
    context = ErrorContext(entity=model.__tablename__, operation=operation)
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        logger.error(
            f"DB integrity error on {model.__tablename__}: {e.orig}",
            extra={"entity": context.entity, "operation": operation},
        )
        raise DatabaseError(str(e.orig), operation, context)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"DB error on {model.__tablename__}: {e}",
            extra={"entity": context.entity, "operation": operation},
        )
        raise DatabaseError(str(e), operation, context)


async def create(
    db: AsyncSession, model: type, data: dict[str, Any] | list[dict[str, Any]],
) -> dict[str, Any] | list[dict[str, Any]]:
    """Insert one record (dict) or many (list); return the created document(s)."""
    rows = data if isinstance(data, list) else [data]
    async with _guard(db, model, "insert"):
        instances = [model(**row) for row in rows]
        db.add_all(instances)
        await db.commit()
    documents = [to_document(i) for i in instances]
    return documents if isinstance(data, list) else documents[0]


async def find_one(
    db: AsyncSession, model: type, filters: dict[str, Any],
) -> dict[str, Any] | None:
    """Return the first document matching `filters`, or None."""
    conditions = build_conditions(model, filters)
    async with _guard(db, model, "query"):
        result = await db.execute(select(model).where(*conditions).limit(1))
        instance = result.scalar_one_or_none()
    return to_document(instance) if instance is not None else None


async def find_ids(db: AsyncSession, model: type, filters: dict[str, Any]) -> list:
    """Return primary keys of every record matching `filters`."""
    conditions = build_conditions(model, filters)
    async with _guard(db, model, "query"):
        result = await db.execute(select(model.id).where(*conditions))
        return list(result.scalars().all())


async def count(db: AsyncSession, model: type, filters: dict[str, Any] | None = None) -> int:
    """Count records matching `filters`."""
    conditions = build_conditions(model, filters)
    async with _guard(db, model, "count"):
        result = await db.execute(
            select(func.count()).select_from(model).where(*conditions),
        )
        return int(result.scalar_one())


async def paginate(
    db: AsyncSession,
    model: type,
    filters: dict[str, Any] | None,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return {"data": [...], "paginator": {...}} for one page of matches.

    options: page, limit, pagination (False returns every match on one page),
    sort ({field: 1|-1|"asc"|"desc"}), select (fields to project).
    """
    options = options or {}
    conditions = build_conditions(model, filters)
    order_by = build_order_by(model, options.get("sort"))
    if not order_by and "created_at" in sa_inspect(model).columns.keys():
        order_by = [model.created_at.asc()]

    item_count = await count(db, model, filters)
    page = options.get("page") or 1
    limit = options.get("limit") or 10
    if options.get("pagination") is False:
        page, limit = 1, max(item_count, 1)

    stmt = (
        select(model).where(*conditions).order_by(*order_by)
        .offset(page_offset(page, limit)).limit(limit)
    )
    async with _guard(db, model, "query"):
        result = await db.execute(stmt)
        instances = result.scalars().all()
    select_fields = options.get("select")
    return {
        "data": [to_document(i, select_fields) for i in instances],
        "paginator": build_paginator(item_count, page, limit),
    }


async def update_one(
    db: AsyncSession, model: type, filters: dict[str, Any], data: dict[str, Any],
) -> dict[str, Any] | None:
    """Apply `data` to the first record matching `filters`; return it or None."""
    conditions = build_conditions(model, filters)
    async with _guard(db, model, "update"):
        result = await db.execute(select(model).where(*conditions).limit(1))
        instance = result.scalar_one_or_none()
        if instance is None:
            return None
        for key, value in data.items():
            setattr(instance, key, value)
        await db.commit()
    return to_document(instance)


async def update_many(
    db: AsyncSession, model: type, filters: dict[str, Any], data: dict[str, Any],
) -> int:
    """Apply `data` to every record matching `filters`; return the row count."""
    conditions = build_conditions(model, filters)
    stmt = (
        update(model).where(*conditions).values(**data)
        .execution_options(synchronize_session=False)
    )
    async with _guard(db, model, "update"):
        result = await db.execute(stmt)
        await db.commit()
    return result.rowcount


async def delete_many(db: AsyncSession, model: type, filters: dict[str, Any]) -> int:
    """Delete every record matching `filters`; return the row count."""
    conditions = build_conditions(model, filters)
    stmt = (
        delete(model).where(*conditions)
        .execution_options(synchronize_session=False)
    )
    async with _guard(db, model, "delete"):
        result = await db.execute(stmt)
        await db.commit()
    return result.rowcount
