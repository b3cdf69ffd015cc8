"""Metal ORM — persists a metal offered in the admin catalogue.

Invariants:
    - id is UUID primary key (client-facing identifier)
    - name is unique and non-nullable
    - is_deleted marks soft deletion; soft-deleted rows stay queryable by filter
    - added_by/updated_by are set by the API from the authenticated admin, never by the client

Design Decisions:
    - Bookkeeping columns inline rather than in a mixin: only two tables carry them
    - updated_at refreshed by SQLAlchemy onupdate (applies to ORM flushes and bulk UPDATEs)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from metal_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Metal(Base):
    """Metal entity — name, fineness and unit of a tradeable metal."""
    __tablename__ = "metals"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    symbol: Mapped[str | None] = mapped_column(String(10), nullable=True)
    purity: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str] = mapped_column(
        String(20), nullable=False, default="gram",
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Bookkeeping
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    added_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    updated_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
