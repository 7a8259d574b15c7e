"""Value types shared by the business and framework handler tables."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from starlette.requests import Request


@dataclass(frozen=True)
class ErrorOutcome:
    """The translation of one exception: a status, a client-safe message, extra headers."""

    status: HTTPStatus
    message: str
    headers: Mapping[str, str] = field(default_factory=dict)


HandleFn = Callable[[Request, Any], ErrorOutcome]


@dataclass(frozen=True)
class HandlerEntry:
    """One row of a handler table.

    ``handle`` runs for exceptions that are instances of ``exc_type``.
    ``fallback`` is returned instead if ``handle`` itself raises.
    """

    exc_type: type[BaseException]
    handle: HandleFn
    fallback: ErrorOutcome
