"""Bearer-token authentication and role checks.

Tokens are configured through ``settings.api_tokens``. The middleware backend
never fails a request: unknown or malformed credentials simply leave the
request anonymous, and the route dependencies decide whether that is
acceptable. This keeps 401 responses identical whether or not a user exists.
"""

from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    AuthenticationError,
    SimpleUser,
)
from starlette.requests import HTTPConnection, Request

from inventory_api.config import settings

BEARER_PREFIX = "bearer "

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"


class AccessDeniedError(Exception):
    """Raised when an authenticated caller lacks a required role."""


class TokenAuthBackend(AuthenticationBackend):
    """Resolve ``Authorization: Bearer <token>`` against the configured tokens."""

    async def authenticate(
        self, conn: HTTPConnection
    ) -> tuple[AuthCredentials, SimpleUser] | None:
        header = conn.headers.get("Authorization", "")
        if not header.lower().startswith(BEARER_PREFIX):
            return None
        token = header[len(BEARER_PREFIX) :].strip()
        grant = settings.api_tokens.get(token)
        if grant is None:
            return None
        return AuthCredentials(["authenticated", *grant.roles]), SimpleUser(grant.username)


def has_role(request: Request, role: str) -> bool:
    return role in request.auth.scopes


def require_authenticated(request: Request) -> SimpleUser:
    """Dependency: return the caller or raise ``AuthenticationError``."""
    if not request.user.is_authenticated:
        raise AuthenticationError("No valid bearer token on request")
    return request.user  # type: ignore[no-any-return]


class RequireRole:
    """Dependency factory: ``Depends(RequireRole("ADMIN"))``."""

    def __init__(self, role: str) -> None:
        self.role = role

    def __call__(self, request: Request) -> SimpleUser:
        user = require_authenticated(request)
        if not has_role(request, self.role):
            raise AccessDeniedError(f"Role {self.role} required")
        return user
