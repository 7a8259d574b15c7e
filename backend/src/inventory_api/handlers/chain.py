"""Ordered exception dispatch.

The chain is a flat tuple of ``HandlerEntry`` rows: the business table
first, then the framework table. For each exception the first entry whose
``exc_type`` matches (``isinstance``) produces the response, and no other
entry runs. Starlette's own handler lookup (most specific class in the MRO)
is only used to route exceptions *into* the chain; the order here decides.
"""

from collections.abc import Iterable
from http import HTTPStatus

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import Response

from inventory_api.handlers.business import BUSINESS_HANDLERS
from inventory_api.handlers.framework import FRAMEWORK_HANDLERS, INTERNAL_ERROR
from inventory_api.handlers.outcome import ErrorOutcome, HandlerEntry
from inventory_api.logging import get_logger
from inventory_api.schemas.error import build_error_response

logger = get_logger(__name__)

UNMATCHED = ErrorOutcome(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


class ExceptionHandlerChain:
    """Priority-ordered exception translator. Immutable and safe to share across requests."""

    def __init__(self, *tables: Iterable[HandlerEntry]) -> None:
        self.entries: tuple[HandlerEntry, ...] = tuple(
            entry for table in tables for entry in table
        )

    def match(self, exc: BaseException) -> HandlerEntry | None:
        """Return the highest-priority entry for ``exc``."""
        for entry in self.entries:
            if isinstance(exc, entry.exc_type):
                return entry
        return None

    def resolve(self, request: Request, exc: BaseException) -> ErrorOutcome:
        """Translate ``exc`` into a status and message. Never raises."""
        entry = self.match(exc)
        if entry is None:
            return UNMATCHED
        try:
            return entry.handle(request, exc)
        except Exception as derivation_error:
            logger.error(
                "error_translation_failed",
                handler=getattr(entry.handle, "__name__", repr(entry.handle)),
                original_type=type(exc).__name__,
                exc_info=derivation_error,
            )
            return entry.fallback

    async def dispatch(self, request: Request, exc: Exception) -> Response:
        """Starlette exception handler entry point."""
        outcome = self.resolve(request, exc)
        return build_error_response(request, outcome.status, outcome.message, outcome.headers)

    def exception_types(self) -> list[type[BaseException]]:
        """Distinct exception types in priority order."""
        seen: list[type[BaseException]] = []
        for entry in self.entries:
            if entry.exc_type not in seen:
                seen.append(entry.exc_type)
        return seen


def default_chain() -> ExceptionHandlerChain:
    """Business handlers first, framework handlers second."""
    return ExceptionHandlerChain(BUSINESS_HANDLERS, FRAMEWORK_HANDLERS)


def register_exception_handlers(
    app: FastAPI, chain: ExceptionHandlerChain | None = None
) -> ExceptionHandlerChain:
    """Route every exception type in the chain to ``chain.dispatch``.

    This replaces FastAPI's default 422 validation handler and its
    HTTPException handler, so all errors share the same payload.
    """
    chain = chain or default_chain()
    for exc_type in chain.exception_types():
        app.add_exception_handler(exc_type, chain.dispatch)  # type: ignore[arg-type]
    return chain
