"""Request Validation — payload, filter and identifier checks.

Tests:
    - Create/update failures carry the "Invalid values in parameters" prefix
    - Filter failures name the offending field without the prefix
    - Bulk arrays: absent/empty -> BadRequestError, malformed id -> PayloadValidationError
"""

from uuid import UUID, uuid4

import pytest

from metal_api.core.errors import BadRequestError, PayloadValidationError
from metal_api.core.validation import (
    INVALID_PARAMS_PREFIX, parse_flag, parse_id, require_ids, require_items,
    validate_filter, validate_payload,
)
from metal_api.models.metal import Metal
from metal_api.schemas.metal import CountRequest, FindRequest, MetalCreate


def test_validate_payload_returns_model():
    metal = validate_payload(MetalCreate, {"name": "  Gold  ", "purity": 99.9})
    assert metal.name == "Gold"
    assert metal.unit == "gram"


def test_validate_payload_error_is_prefixed():
    with pytest.raises(PayloadValidationError) as exc_info:
        validate_payload(MetalCreate, {"purity": 99.9})
    assert exc_info.value.message.startswith(f"{INVALID_PARAMS_PREFIX}, ")
    assert "name" in exc_info.value.message


def test_validate_payload_none_is_empty_object():
    with pytest.raises(PayloadValidationError):
        validate_payload(MetalCreate, None)


def test_validate_filter_accepts_known_fields():
    request = validate_filter(FindRequest, {
        "query": {"is_active": True},
        "options": {"sort": {"name": -1}, "select": ["name"]},
    }, Metal)
    assert request.options.sort == {"name": -1}


def test_validate_filter_rejects_unknown_query_field():
    with pytest.raises(PayloadValidationError) as exc_info:
        validate_filter(CountRequest, {"where": {"weight": 1}}, Metal)
    assert not exc_info.value.message.startswith(INVALID_PARAMS_PREFIX)


def test_validate_filter_rejects_unknown_select_field():
    with pytest.raises(PayloadValidationError):
        validate_filter(FindRequest, {"options": {"select": ["weight"]}}, Metal)


def test_validate_filter_rejects_populate_option():
    with pytest.raises(PayloadValidationError):
        validate_filter(FindRequest, {"options": {"populate": "rates"}}, Metal)


def test_parse_id():
    uid = uuid4()
    assert parse_id(str(uid)) == uid
    assert parse_id(uid) is uid


def test_parse_id_rejects_garbage():
    with pytest.raises(PayloadValidationError) as exc_info:
        parse_id("not-an-id")
    assert exc_info.value.message == "invalid id."


@pytest.mark.parametrize("payload", [None, {}, {"ids": []}, {"ids": "abc"}])
def test_require_ids_missing_is_bad_request(payload):
    with pytest.raises(BadRequestError):
        require_ids(payload)


def test_require_ids_parses_every_id():
    raw = "00000000-0000-0000-0000-000000000007"
    assert require_ids({"ids": [raw]}) == [UUID(raw)]
    with pytest.raises(PayloadValidationError):
        require_ids({"ids": [raw, "bogus"]})


def test_require_items():
    assert require_items({"data": [{"name": "Gold"}]}) == [{"name": "Gold"}]
    with pytest.raises(BadRequestError):
        require_items({"data": {}})


@pytest.mark.parametrize("raw, expected", [
    (True, True), (False, False), ("true", True), ("false", False), (0, False),
])
def test_parse_flag_coerces_like_query_params(raw, expected):
    assert parse_flag({"is_warning": raw}, "is_warning") is expected


def test_parse_flag_absent_is_false():
    assert parse_flag({}, "is_warning") is False
    assert parse_flag(None, "is_warning") is False


def test_parse_flag_rejects_non_boolean():
    with pytest.raises(PayloadValidationError) as exc_info:
        parse_flag({"is_warning": "maybe"}, "is_warning")
    assert exc_info.value.message == '"is_warning" must be a boolean'
