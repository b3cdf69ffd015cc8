"""MetalRate ORM — a dated price quote for a metal.

Invariants:
    - Always belongs to a Metal (metal_id FK)
    - Deleting or soft-deleting a Metal cascades to its rates (services/delete_dependent.py)

Design Decisions:
    - Cascade handled in the service, not by ON DELETE CASCADE: the warning mode
      must be able to count dependents without deleting them
    - No ORM relationship to Metal: rows are only reached through metal_id filters
"""

import uuid
from datetime import date, datetime

from sqlalchemy import String, Float, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from metal_api.db.base import Base
from metal_api.models.metal import _utcnow


class MetalRate(Base):
    """Rate quote for one metal on one day."""
    __tablename__ = "metal_rates"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    metal_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("metals.id"), nullable=False,
    )
    rate: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD",
    )
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)

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
