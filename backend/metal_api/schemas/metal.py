"""Metal Schemas — Pydantic models for the Metal admin endpoints.

Invariants:
    - MetalCreate.name: 1-100 chars, stripped, non-empty
    - MetalUpdate: every field optional, same constraints as create when present
    - Unknown keys are rejected (extra="forbid"), including added_by/updated_by
    - FindOptions.limit capped at MAX_PAGE_LIMIT

Design Decisions:
    - Filter bodies (query/where) typed as plain dicts here; field-level checks
      against the ORM model happen in core/validation.validate_filter()
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 10


class MetalCreate(BaseModel):
    """Metal creation payload."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    symbol: str | None = Field(None, max_length=10)
    purity: float | None = Field(None, ge=0, le=100)
    unit: str = Field("gram", min_length=1, max_length=20)
    description: str | None = Field(None, max_length=2000)
    is_active: bool = True
    is_deleted: bool = False


class MetalUpdate(BaseModel):
    """Metal update payload — only the fields sent are written."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    symbol: str | None = Field(None, max_length=10)
    purity: float | None = Field(None, ge=0, le=100)
    unit: str | None = Field(None, min_length=1, max_length=20)
    description: str | None = Field(None, max_length=2000)
    is_active: bool | None = None
    is_deleted: bool | None = None

    @field_validator("name", "unit", "is_active", "is_deleted")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the payload."""
        return self.model_dump(exclude_unset=True)


class FindOptions(BaseModel):
    """Pagination, ordering and projection options for list requests."""
    model_config = ConfigDict(extra="forbid")

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    pagination: bool = True
    sort: dict[str, Literal[1, -1, "asc", "desc"]] | None = None
    select: list[str] | None = None


class FindRequest(BaseModel):
    """Body of POST /list."""
    model_config = ConfigDict(extra="forbid")

    query: dict[str, Any] = Field(default_factory=dict)
    options: FindOptions = Field(default_factory=FindOptions)
    is_count_only: bool = False


class CountRequest(BaseModel):
    """Body of POST /count."""
    model_config = ConfigDict(extra="forbid")

    where: dict[str, Any] = Field(default_factory=dict)


class BulkUpdateRequest(BaseModel):
    """Body of PUT /update-bulk."""
    model_config = ConfigDict(extra="forbid")

    filter: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)
