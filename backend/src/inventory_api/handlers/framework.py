"""Catch-all handlers for framework, security and persistence exceptions.

These entries follow the business handlers in the chain, so they only see
exceptions the domain layer did not claim. Security and persistence
failures always get fixed messages: the underlying reason (which user,
which constraint, which SQL) stays in the server log.

Status mapping:

- 400: request validation (body, params, unreadable JSON), ``ValueError``
- 401: ``AuthenticationError``
- 403: ``AccessDeniedError``
- 404: ``NotFoundError`` (its own message), ``NoResultFound`` (always
  "Resource not found": SQLAlchemy's text describes the query, not the
  missing resource)
- 409: ``IntegrityError``, ``StaleDataError``
- pass-through: ``HTTPException`` keeps its own status
- 500: anything else, logged with a correlation id
"""

import uuid
from collections.abc import Sequence
from http import HTTPStatus
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.orm.exc import StaleDataError
from starlette.authentication import AuthenticationError
from starlette.exceptions import HTTPException
from starlette.requests import Request

from inventory_api.exceptions import NotFoundError
from inventory_api.handlers.outcome import ErrorOutcome, HandlerEntry
from inventory_api.handlers.sanitizer import message_or, sanitize_message
from inventory_api.logging import get_logger
from inventory_api.security import AccessDeniedError

logger = get_logger(__name__)

VALIDATION_FAILED = "Validation failed"
CONSTRAINT_VIOLATION = "Constraint violation"
UNREADABLE_BODY = "Request body is invalid or unreadable"
INVALID_REQUEST = "Invalid request"
AUTHENTICATION_REQUIRED = "Authentication required"
ACCESS_DENIED = "Access denied"
RESOURCE_NOT_FOUND = "Resource not found"
DATA_CONFLICT = "Data conflict"
CONCURRENT_UPDATE = "Concurrent update detected"
REQUEST_FAILED = "Request failed"
INTERNAL_ERROR = "Internal server error"

# Request parts that carry parameters rather than a body
_PARAMETER_SOURCES = frozenset({"query", "path", "header", "cookie"})
_TYPE_MISMATCH_KINDS = frozenset({"enum", "literal_error", "is_instance_of"})


def _field_name(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc)


def _is_type_mismatch(kind: str) -> bool:
    return kind.endswith(("_parsing", "_type")) or kind in _TYPE_MISMATCH_KINDS


def _describe_field_error(error: dict[str, Any], name: str) -> str:
    msg = error.get("msg") or ""
    return sanitize_message(f"{name} {msg}".strip())


def handle_request_validation(request: Request, exc: RequestValidationError) -> ErrorOutcome:
    """400 describing the first problem FastAPI found while parsing the request."""
    errors = list(exc.errors())
    logger.info("request_validation_failed", error_count=len(errors), path=request.url.path)
    if not errors:
        return ErrorOutcome(HTTPStatus.BAD_REQUEST, VALIDATION_FAILED)

    first = errors[0]
    loc = tuple(first.get("loc") or ())
    kind = str(first.get("type") or "")
    source = loc[0] if loc else None
    name = _field_name(loc[1:])

    if kind == "json_invalid" or (source == "body" and not name):
        return ErrorOutcome(HTTPStatus.BAD_REQUEST, UNREADABLE_BODY)

    if source in _PARAMETER_SOURCES:
        if not name:
            return ErrorOutcome(HTTPStatus.BAD_REQUEST, CONSTRAINT_VIOLATION)
        if source == "query" and kind == "missing":
            message = sanitize_message(f"Missing required parameter: {name}")
        elif _is_type_mismatch(kind):
            message = sanitize_message(f"Invalid value for: {name}")
        else:
            message = _describe_field_error(first, name)
        return ErrorOutcome(HTTPStatus.BAD_REQUEST, message)

    return ErrorOutcome(HTTPStatus.BAD_REQUEST, _describe_field_error(first, name))


def handle_model_validation(request: Request, exc: ValidationError) -> ErrorOutcome:
    """400 for pydantic models validated inside services rather than by FastAPI."""
    errors = exc.errors()
    if not errors:
        return ErrorOutcome(HTTPStatus.BAD_REQUEST, VALIDATION_FAILED)
    first = errors[0]
    name = _field_name(first.get("loc") or ())
    return ErrorOutcome(HTTPStatus.BAD_REQUEST, _describe_field_error(dict(first), name))


def handle_value_error(request: Request, exc: ValueError) -> ErrorOutcome:
    """400: services raise ValueError for arguments that can never be valid."""
    return ErrorOutcome(HTTPStatus.BAD_REQUEST, message_or(str(exc), INVALID_REQUEST))


def handle_authentication(request: Request, exc: AuthenticationError) -> ErrorOutcome:
    """401 with a fixed message so responses never reveal whether an account exists."""
    logger.info("authentication_required", path=request.url.path, reason=str(exc))
    return ErrorOutcome(
        HTTPStatus.UNAUTHORIZED,
        AUTHENTICATION_REQUIRED,
        {"WWW-Authenticate": "Bearer"},
    )


def handle_access_denied(request: Request, exc: AccessDeniedError) -> ErrorOutcome:
    """403 without naming the missing permission."""
    logger.warning("access_denied", path=request.url.path, reason=str(exc))
    return ErrorOutcome(HTTPStatus.FORBIDDEN, ACCESS_DENIED)


def handle_not_found(request: Request, exc: NotFoundError) -> ErrorOutcome:
    return ErrorOutcome(HTTPStatus.NOT_FOUND, message_or(exc.message, RESOURCE_NOT_FOUND))


def handle_no_result(request: Request, exc: NoResultFound) -> ErrorOutcome:
    """404 with the fixed literal; ``exc`` only says a query returned no rows."""
    return ErrorOutcome(HTTPStatus.NOT_FOUND, RESOURCE_NOT_FOUND)


def handle_integrity(request: Request, exc: IntegrityError) -> ErrorOutcome:
    """409; the constraint text is logged but never returned."""
    logger.warning("data_integrity_violation", path=request.url.path, error=str(exc.orig))
    return ErrorOutcome(HTTPStatus.CONFLICT, DATA_CONFLICT)


def handle_stale_data(request: Request, exc: StaleDataError) -> ErrorOutcome:
    logger.info("optimistic_lock_failure", path=request.url.path)
    return ErrorOutcome(HTTPStatus.CONFLICT, CONCURRENT_UPDATE)


def handle_http_exception(request: Request, exc: HTTPException) -> ErrorOutcome:
    """Pass the embedded status through; the detail is treated as exception text."""
    try:
        status = HTTPStatus(exc.status_code)
    except ValueError:
        logger.warning("unknown_http_status", status_code=exc.status_code, path=request.url.path)
        return ErrorOutcome(HTTPStatus.INTERNAL_SERVER_ERROR, REQUEST_FAILED)
    detail = exc.detail if isinstance(exc.detail, str) else None
    return ErrorOutcome(status, message_or(detail, REQUEST_FAILED), dict(exc.headers or {}))


def handle_unexpected(request: Request, exc: Exception) -> ErrorOutcome:
    """500 safety net. The traceback is logged under a correlation id returned in X-Request-ID."""
    correlation_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    logger.error(
        "unhandled_exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return ErrorOutcome(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR,
        {"X-Request-ID": correlation_id},
    )


FRAMEWORK_HANDLERS: tuple[HandlerEntry, ...] = (
    HandlerEntry(
        RequestValidationError,
        handle_request_validation,
        ErrorOutcome(HTTPStatus.BAD_REQUEST, VALIDATION_FAILED),
    ),
    HandlerEntry(
        ValidationError,
        handle_model_validation,
        ErrorOutcome(HTTPStatus.BAD_REQUEST, VALIDATION_FAILED),
    ),
    HandlerEntry(
        AuthenticationError,
        handle_authentication,
        ErrorOutcome(HTTPStatus.UNAUTHORIZED, AUTHENTICATION_REQUIRED),
    ),
    HandlerEntry(
        AccessDeniedError,
        handle_access_denied,
        ErrorOutcome(HTTPStatus.FORBIDDEN, ACCESS_DENIED),
    ),
    HandlerEntry(
        NotFoundError,
        handle_not_found,
        ErrorOutcome(HTTPStatus.NOT_FOUND, RESOURCE_NOT_FOUND),
    ),
    HandlerEntry(
        NoResultFound,
        handle_no_result,
        ErrorOutcome(HTTPStatus.NOT_FOUND, RESOURCE_NOT_FOUND),
    ),
    HandlerEntry(
        IntegrityError,
        handle_integrity,
        ErrorOutcome(HTTPStatus.CONFLICT, DATA_CONFLICT),
    ),
    HandlerEntry(
        StaleDataError,
        handle_stale_data,
        ErrorOutcome(HTTPStatus.CONFLICT, CONCURRENT_UPDATE),
    ),
    HandlerEntry(
        HTTPException,
        handle_http_exception,
        ErrorOutcome(HTTPStatus.INTERNAL_SERVER_ERROR, REQUEST_FAILED),
    ),
    HandlerEntry(
        ValueError,
        handle_value_error,
        ErrorOutcome(HTTPStatus.BAD_REQUEST, INVALID_REQUEST),
    ),
    HandlerEntry(
        Exception,
        handle_unexpected,
        ErrorOutcome(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR),
    ),
)
