"""Response Envelope — {status, message, data} bodies for success and failure.

Invariants:
    - Success and error responses share one shape
    - Bodies pass through jsonable_encoder (UUID, datetime, date serialized as strings)
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from metal_api.core.errors import MetalApiError, ResponseStatus

SUCCESS_MESSAGE = "Your request is successfully executed"


def envelope(
    status: ResponseStatus, message: str, data: Any = None, http_status: int = 200,
) -> JSONResponse:
    return JSONResponse(
        status_code=http_status,
        content=jsonable_encoder({
            "status": status.value,
            "message": message,
            "data": data,
        }),
    )


def success(data: Any = None, message: str = SUCCESS_MESSAGE) -> JSONResponse:
    """200 SUCCESS envelope."""
    return envelope(ResponseStatus.SUCCESS, message, data)


def failure(exc: MetalApiError) -> JSONResponse:
    """Error envelope for a typed MetalApiError."""
    return JSONResponse(
        status_code=exc.http_status, content=jsonable_encoder(exc.to_response()),
    )
