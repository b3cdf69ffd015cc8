"""Error Hierarchy — status codes, envelope statuses and default messages."""

from metal_api.core.errors import (
    AuthenticationError, BadRequestError, DatabaseError, ErrorCategory,
    ErrorContext, MetalApiError, PayloadValidationError, RecordNotFoundError,
    ResponseStatus,
)


def test_all_errors_share_base():
    for cls in (PayloadValidationError, BadRequestError, RecordNotFoundError, AuthenticationError):
        assert issubclass(cls, MetalApiError)
    assert isinstance(DatabaseError("x", "insert"), MetalApiError)


def test_http_status_and_envelope_status():
    cases = [
        (PayloadValidationError(), 422, ResponseStatus.VALIDATION_ERROR),
        (BadRequestError(), 400, ResponseStatus.BAD_REQUEST),
        (RecordNotFoundError(), 404, ResponseStatus.RECORD_NOT_FOUND),
        (AuthenticationError(), 401, ResponseStatus.UNAUTHORIZED),
        (DatabaseError("boom", "update"), 500, ResponseStatus.FAILURE),
    ]
    for error, http_status, status in cases:
        assert error.http_status == http_status
        assert error.status is status
        assert error.code == status.value


def test_default_messages():
    assert PayloadValidationError().message == "Invalid Data, Validation Failed."
    assert RecordNotFoundError().message == "Record(s) not found with specified criteria."
    assert AuthenticationError().message == "You are not authorized to access the request"


def test_to_response_envelope():
    assert BadRequestError("ids missing").to_response() == {
        "status": "BAD_REQUEST", "message": "ids missing", "data": None,
    }


def test_database_error_message_and_context():
    ctx = ErrorContext(entity="metals")
    error = DatabaseError("UNIQUE constraint failed: metals.name", "insert", ctx)
    assert error.message == "Database insert failed: UNIQUE constraint failed: metals.name"
    assert error.category is ErrorCategory.DATABASE
    assert error.context.operation == "insert"
    assert error.context.entity == "metals"
