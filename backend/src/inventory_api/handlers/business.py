"""Business exception handlers: the first entries in the handler chain.

Domain exceptions are matched here before the framework handlers so their
richer messages are never replaced by a generic fallback. Order matters:
``DuplicateResourceError`` is a ``ConflictError`` and must be listed first.
"""

import logging
from http import HTTPStatus

from starlette.requests import Request

from inventory_api.exceptions import (
    ConflictError,
    DuplicateResourceError,
    InvalidRequestError,
    ValidationSeverity,
)
from inventory_api.handlers.outcome import ErrorOutcome, HandlerEntry
from inventory_api.handlers.sanitizer import message_or, sanitize_message
from inventory_api.logging import get_logger

logger = get_logger(__name__)

INVALID_REQUEST = "Invalid request"
DUPLICATE_RESOURCE = "Duplicate resource"
BUSINESS_RULE_CONFLICT = "Business rule conflict"

_SEVERITY_LEVELS = {
    ValidationSeverity.LOW: logging.INFO,
    ValidationSeverity.MEDIUM: logging.WARNING,
    ValidationSeverity.HIGH: logging.WARNING,
    ValidationSeverity.CRITICAL: logging.ERROR,
}


def handle_invalid_request(request: Request, exc: InvalidRequestError) -> ErrorOutcome:
    """400. Field errors are summarised by count so none of them is dropped silently."""
    if exc.has_field_errors:
        message = f"Validation failed: {len(exc.field_errors)} field error(s)"
    else:
        message = message_or(exc.message, INVALID_REQUEST)

    level = _SEVERITY_LEVELS.get(exc.severity, logging.WARNING)
    logger.log(
        level,
        "invalid_request",
        validation_code=exc.validation_code,
        severity=str(exc.severity),
        fields=sorted(exc.field_errors),
        path=request.url.path,
    )
    return ErrorOutcome(HTTPStatus.BAD_REQUEST, message)


def handle_duplicate_resource(request: Request, exc: DuplicateResourceError) -> ErrorOutcome:
    """409 naming the conflicting resource, field and value when known."""
    if exc.has_detailed_context:
        message = sanitize_message(exc.client_message)
    else:
        message = message_or(exc.message, DUPLICATE_RESOURCE)

    logger.info("duplicate_resource", path=request.url.path, **exc.error_details())
    return ErrorOutcome(HTTPStatus.CONFLICT, message)


def handle_business_conflict(request: Request, exc: ConflictError) -> ErrorOutcome:
    """409 for state-dependent rule violations (e.g. deleting a supplier with items)."""
    logger.info("business_conflict", path=request.url.path)
    return ErrorOutcome(HTTPStatus.CONFLICT, message_or(exc.message, BUSINESS_RULE_CONFLICT))


BUSINESS_HANDLERS: tuple[HandlerEntry, ...] = (
    HandlerEntry(
        InvalidRequestError,
        handle_invalid_request,
        ErrorOutcome(HTTPStatus.BAD_REQUEST, INVALID_REQUEST),
    ),
    HandlerEntry(
        DuplicateResourceError,
        handle_duplicate_resource,
        ErrorOutcome(HTTPStatus.CONFLICT, DUPLICATE_RESOURCE),
    ),
    HandlerEntry(
        ConflictError,
        handle_business_conflict,
        ErrorOutcome(HTTPStatus.CONFLICT, BUSINESS_RULE_CONFLICT),
    ),
)
