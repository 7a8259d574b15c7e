"""Unit tests for client-facing message sanitization."""

import pytest

from inventory_api.handlers.sanitizer import (
    AUTHENTICATION_FAILURE,
    DATABASE_FAILURE,
    INTERNAL_PLACEHOLDER,
    PATH_PLACEHOLDER,
    UNKNOWN_ERROR,
    message_or,
    sanitize_message,
)

NAMESPACES = ["inventory_api", "sqlalchemy"]


def test_windows_path_is_redacted() -> None:
    result = sanitize_message(r"Cannot open C:\Users\alice\app.log for writing", NAMESPACES)
    assert PATH_PLACEHOLDER in result
    assert "C:\\Users" not in result
    assert result == "Cannot open [PATH] for writing"


def test_posix_path_is_redacted() -> None:
    result = sanitize_message("No such file: /var/lib/inventory/export.csv", NAMESPACES)
    assert result == "No such file: [PATH]"


def test_posix_path_under_any_root_is_redacted() -> None:
    result = sanitize_message("No such file: /data/exports/customers.csv", NAMESPACES)
    assert result == "No such file: [PATH]"


def test_windows_path_with_spaces_is_redacted_whole() -> None:
    result = sanitize_message(
        r"Cannot open C:\Program Files\Inventory\secrets.ini now", NAMESPACES
    )
    assert result == "Cannot open [PATH] now"
    assert "secrets" not in result


def test_unc_path_is_redacted() -> None:
    result = sanitize_message(r"Cannot open \\fileserver\share\dump.sql", NAMESPACES)
    assert result == "Cannot open [PATH]"


def test_relative_paths_are_kept() -> None:
    text = "Copy ./config/app.yaml and read/write the export"
    assert sanitize_message(text, NAMESPACES) == text


def test_urls_are_not_treated_as_paths() -> None:
    text = "See https://example.com/home/docs for details"
    assert sanitize_message(text, NAMESPACES) == text


def test_internal_identifier_is_redacted() -> None:
    result = sanitize_message(
        "Failed in inventory_api.services.supplier.create_supplier", NAMESPACES
    )
    assert result == f"Failed in {INTERNAL_PLACEHOLDER}"


def test_internal_source_file_is_redacted() -> None:
    result = sanitize_message("error at inventory_api/services/inventory.py:42", NAMESPACES)
    assert result == f"error at {INTERNAL_PLACEHOLDER}"


def test_internal_non_python_file_is_redacted() -> None:
    result = sanitize_message("template inventory_api/templates/x.html is missing", NAMESPACES)
    assert result == f"template {INTERNAL_PLACEHOLDER} is missing"


def test_foreign_dotted_names_are_kept() -> None:
    text = "Expected a value like example.com or 3.14"
    assert sanitize_message(text, NAMESPACES) == text


def test_sql_text_is_replaced() -> None:
    assert sanitize_message("SQL syntax error near 'FROM'", NAMESPACES) == DATABASE_FAILURE


@pytest.mark.parametrize("text", ["Password=abc123", "token expired for alice", "  PASSWORD mismatch"])
def test_credential_text_is_replaced(text: str) -> None:
    assert sanitize_message(text, NAMESPACES) == AUTHENTICATION_FAILURE


@pytest.mark.parametrize("text", [None, "", "   "])
def test_blank_input_gives_unknown_error(text: str | None) -> None:
    assert sanitize_message(text, NAMESPACES) == UNKNOWN_ERROR


def test_plain_messages_pass_through() -> None:
    text = "Supplier with name 'ACME Corp' already exists"
    assert sanitize_message(text, NAMESPACES) == text


@pytest.mark.parametrize(
    "text",
    [
        r"Cannot open C:\Users\alice\app.log",
        "Failed in inventory_api.services.supplier at /home/alice/src/app.py",
        "SQL syntax error near ...",
        "Password=abc123",
        "Quantity change must not be zero",
        "No such file: /data/exports/customers.csv",
        r"Cannot open C:\Program Files\Inventory\secrets.ini now",
        r"Cannot open \\fileserver\share\dump.sql",
        "template inventory_api/templates/x.html is missing",
        "[PATH] and [INTERNAL]",
    ],
)
def test_sanitizing_twice_changes_nothing(text: str) -> None:
    once = sanitize_message(text, NAMESPACES)
    assert sanitize_message(once, NAMESPACES) == once


def test_default_namespaces_come_from_settings() -> None:
    assert sanitize_message("raised by sqlalchemy.orm.exc.StaleDataError") == (
        f"raised by {INTERNAL_PLACEHOLDER}"
    )


def test_message_or_uses_fallback_for_blank_text() -> None:
    assert message_or(None, "Invalid request") == "Invalid request"
    assert message_or("  ", "Invalid request") == "Invalid request"


def test_message_or_sanitizes_present_text() -> None:
    assert message_or("Password=abc123", "Invalid request") == AUTHENTICATION_FAILURE
