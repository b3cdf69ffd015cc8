"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Metal is the entity exposed by the API; MetalRate is its dependent record

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and Alembic
"""

from metal_api.models.metal import Metal  # noqa: F401
from metal_api.models.metal_rate import MetalRate  # noqa: F401
