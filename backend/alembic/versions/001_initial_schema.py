"""Initial schema — metals and their dated rates.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _bookkeeping_columns() -> list[sa.Column]:
    return [
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("added_by", UUID(as_uuid=True), nullable=True),
        sa.Column("updated_by", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "metals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("symbol", sa.String(10), nullable=True),
        sa.Column("purity", sa.Float, nullable=True),
        sa.Column("unit", sa.String(20), nullable=False, server_default="gram"),
        sa.Column("description", sa.Text, nullable=True),
        *_bookkeeping_columns(),
    )

    op.create_table(
        "metal_rates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("metal_id", UUID(as_uuid=True), sa.ForeignKey("metals.id"), nullable=False),
        sa.Column("rate", sa.Float, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("effective_date", sa.Date, nullable=False),
        *_bookkeeping_columns(),
    )
    op.create_index("ix_metal_rates_metal_id", "metal_rates", ["metal_id"])
    op.create_index("ix_metals_is_deleted", "metals", ["is_deleted"])


def downgrade() -> None:
    op.drop_index("ix_metals_is_deleted", table_name="metals")
    op.drop_index("ix_metal_rates_metal_id", table_name="metal_rates")
    op.drop_table("metal_rates")
    op.drop_table("metals")
