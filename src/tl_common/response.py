"""ApiResponse envelope used by every JSON endpoint.

    {
        "code": 0,                  // 0 on success, error code otherwise
        "message": "success",
        "data": {...},              // null on error
        "kind": null,               // error category on failure, e.g. "INSUFFICIENT_FUNDS"
        "timestamp": "...",
        "request_id": "req_..."     // same id as the X-Request-ID header
    }

POST /transfers answers 204 with no body and does not use the envelope.
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.tl_common.datetime_utils import utc_now


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    kind: str | None = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def _request_id_of(request: Request | None) -> str:
    # Set by RequestLogMiddleware; absent when a handler is called directly
    request_id = getattr(request.state, "request_id", None) if request is not None else None
    return request_id or _new_request_id()


def success_response(
    data: Any = None, request: Request | None = None, message: str = "success"
) -> ApiResponse:
    return ApiResponse(data=data, message=message, request_id=_request_id_of(request))


def error_response(
    code: int, message: str, kind: str | None = None, request: Request | None = None
) -> ApiResponse:
    return ApiResponse(code=code, message=message, kind=kind, request_id=_request_id_of(request))
