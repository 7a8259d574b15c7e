"""Error response schema and builder.

Every error response uses the same flat shape::

    {
      "status": "BAD_REQUEST",
      "statusCode": 400,
      "message": "name String should have at least 1 character",
      "timestamp": "2024-01-15T10:30:45.123Z",
      "path": "/api/suppliers"
    }

The handlers in ``inventory_api.handlers`` decide status and message; this
module only assembles the payload. Messages arrive already sanitized.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from http import HTTPStatus

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request


class ErrorResponse(BaseModel):
    """Body returned by every error response."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    status_code: int = Field(alias="statusCode")
    message: str
    timestamp: str
    path: str


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision, e.g. 2024-01-15T10:30:45.123Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_body(status: HTTPStatus, message: str | None, path: str) -> ErrorResponse:
    """Build the payload; a blank message falls back to the status reason phrase."""
    if message is None or not message.strip():
        message = status.phrase
    return ErrorResponse(
        status=status.name,
        status_code=status.value,
        message=message,
        timestamp=utc_timestamp(),
        path=path,
    )


def build_error_response(
    request: Request,
    status: HTTPStatus,
    message: str | None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Wrap the standard error body in a JSONResponse with the matching status code."""
    body = error_body(status, message, request.url.path)
    return JSONResponse(
        status_code=status.value,
        content=body.model_dump(by_alias=True),
        headers=dict(headers) if headers else None,
    )
