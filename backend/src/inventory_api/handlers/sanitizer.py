"""Redaction of exception-derived text before it reaches a client.

Only text that came out of an exception is sanitized; fixed messages chosen
by the handlers are returned as they are. Substitutions run in a fixed
order and the result is stable under repeated application:

1. absolute OS paths (drive, UNC, POSIX)       -> ``[PATH]``
2. files under an internal namespace           -> ``[INTERNAL]``
3. dotted identifiers in an internal namespace -> ``[INTERNAL]``
4. text starting with "SQL"                    -> ``Database operation failed``
5. text starting with "Password" or "Token"    -> ``Authentication failed``

A POSIX path needs at least two segments (``/data/x``, ``/tmp/``) and must
not follow a word character, dot, colon or slash, which keeps URLs and
relative paths such as ``inventory_api/templates`` intact.
"""

import re
from collections.abc import Sequence
from functools import lru_cache

from inventory_api.config import settings

PATH_PLACEHOLDER = "[PATH]"
INTERNAL_PLACEHOLDER = "[INTERNAL]"
UNKNOWN_ERROR = "Unknown error"
DATABASE_FAILURE = "Database operation failed"
AUTHENTICATION_FAILURE = "Authentication failed"

# A directory name; words inside it may be separated by single spaces
_SEGMENT = r"[^\\/\s'\"<>|,;]+(?: [^\\/\s'\"<>|,;:]+)*"
# Last segment of a path, which ends at the first space
_TAIL = r"[^\\/\s'\"<>|,;]*"

# C:\Program Files\Inventory\secrets.ini, D:/data/export.csv
_WINDOWS_PATH = re.compile(rf"\b[A-Za-z]:[\\/](?:{_SEGMENT}[\\/])*{_TAIL}")
# \\fileserver\share\dump.sql
_UNC_PATH = re.compile(rf"(?<![\w\\])\\\\{_SEGMENT}[\\/](?:{_SEGMENT}[\\/])*{_TAIL}")
# /data/exports/customers.csv, /home/alice/.env
_POSIX_PATH = re.compile(r"(?<![\w.:/\\\]])/[^\s/\\'\"<>|,;]+(?:/[^\s/\\'\"<>|,;]*)+")
_SQL_PREFIX = re.compile(r"\s*sql", re.IGNORECASE)
_CREDENTIAL_PREFIX = re.compile(r"\s*(?:password|token)", re.IGNORECASE)


@lru_cache(maxsize=8)
def _namespace_patterns(namespaces: tuple[str, ...]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    roots = "|".join(re.escape(ns) for ns in namespaces)
    internal_file = re.compile(rf"\b(?:{roots})(?:[./\\][\w-]+)*\.\w+(?::\d+)?\b")
    identifier = re.compile(rf"\b(?:{roots})(?:\.\w+)+")
    return internal_file, identifier


def sanitize_message(text: str | None, namespaces: Sequence[str] | None = None) -> str:
    """Return ``text`` with paths, internal names, SQL and credentials redacted.

    ``namespaces`` defaults to ``settings.internal_namespaces``.
    """
    if text is None or not text.strip():
        return UNKNOWN_ERROR

    if namespaces is None:
        namespaces = settings.internal_namespaces

    cleaned = _WINDOWS_PATH.sub(PATH_PLACEHOLDER, text)
    cleaned = _UNC_PATH.sub(PATH_PLACEHOLDER, cleaned)
    cleaned = _POSIX_PATH.sub(PATH_PLACEHOLDER, cleaned)

    if namespaces:
        internal_file, identifier = _namespace_patterns(tuple(namespaces))
        cleaned = internal_file.sub(INTERNAL_PLACEHOLDER, cleaned)
        cleaned = identifier.sub(INTERNAL_PLACEHOLDER, cleaned)

    if _SQL_PREFIX.match(cleaned):
        return DATABASE_FAILURE
    if _CREDENTIAL_PREFIX.match(cleaned):
        return AUTHENTICATION_FAILURE
    return cleaned


def message_or(text: str | None, fallback: str) -> str:
    """Sanitized ``text``, or ``fallback`` when the exception carried no usable message."""
    if text is None or not text.strip():
        return fallback
    return sanitize_message(text)
