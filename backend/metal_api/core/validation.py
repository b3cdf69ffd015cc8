"""Request Validation — schema and identifier checks run before any persistence.

Invariants:
    - Every failure raises PayloadValidationError (or BadRequestError for absent bulk arrays)
    - Successful validation returns typed values; callers never re-check
    - Filter validation checks both body structure and that every field is a model column

Design Decisions:
    - Explicit validate_payload() calls in routes instead of typed FastAPI bodies:
      the bulk routes must distinguish "missing array" (400) from "bad item" (422),
      and the message prefix differs between create/update and list/count
"""

from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, TypeAdapter, ValidationError

from metal_api.core.errors import BadRequestError, PayloadValidationError
from metal_api.core.query_filters import build_conditions, build_order_by, resolve_field

ModelT = TypeVar("ModelT", bound=BaseModel)

INVALID_PARAMS_PREFIX = "Invalid values in parameters"

_flag_adapter = TypeAdapter(bool)


def format_validation_errors(exc: ValidationError) -> str:
    """Flatten pydantic errors into "field: message; field: message"."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


def validate_payload(schema: type[ModelT], payload: Any) -> ModelT:
    """Validate a create/update payload; message is prefixed like all param errors."""
    try:
        return schema.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        raise PayloadValidationError(
            f"{INVALID_PARAMS_PREFIX}, {format_validation_errors(e)}",
        )


def validate_filter(schema: type[ModelT], payload: Any, model: type) -> ModelT:
    """Validate a list/count request body and its filter fields against `model`."""
    try:
        request = schema.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        raise PayloadValidationError(format_validation_errors(e))
    for attr in ("query", "where", "filter"):
        if hasattr(request, attr):
            build_conditions(model, getattr(request, attr))
    options = getattr(request, "options", None)
    if options is not None:
        build_order_by(model, options.sort)
        for name in options.select or []:
            resolve_field(model, name)
    return request


def parse_id(value: Any) -> UUID:
    """Parse a record identifier."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise PayloadValidationError("invalid id.")


def require_ids(payload: dict[str, Any] | None) -> list[UUID]:
    """Pull a non-empty `ids` array out of a bulk request body."""
    ids = (payload or {}).get("ids")
    if not isinstance(ids, list) or len(ids) < 1:
        raise BadRequestError()
    return [parse_id(i) for i in ids]


def require_items(payload: dict[str, Any] | None, key: str = "data") -> list:
    """Pull a non-empty array out of a bulk request body."""
    items = (payload or {}).get(key)
    if not isinstance(items, list) or len(items) < 1:
        raise BadRequestError()
    return items


def parse_flag(payload: dict[str, Any] | None, key: str) -> bool:
    """Read an optional boolean body field with the same coercion as query params."""
    raw = (payload or {}).get(key)
    if raw is None:
        return False
    try:
        return _flag_adapter.validate_python(raw)
    except ValidationError:
        raise PayloadValidationError(f'"{key}" must be a boolean')
