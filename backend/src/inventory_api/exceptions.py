"""Domain exceptions raised by services and translated by the handler chain.

Services raise these to signal business-rule violations. They carry
structured context (field errors, conflict details, severity) so the
handlers in ``inventory_api.handlers`` can derive one status code and one
client-safe message for each failure.

Nothing in this module imports FastAPI: the HTTP mapping lives entirely in
the handlers.
"""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class ValidationSeverity(StrEnum):
    """Monitoring priority of a validation failure. Never affects the status code."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class DomainError(Exception):
    """Base class for all domain exceptions.

    ``message`` may be None or blank; handlers substitute a fallback literal.
    """

    def __init__(self, message: str | None = None) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with the current domain state.

    Typical cases: deleting a supplier that still has linked items, or
    deleting an item that still has stock.
    """


class InvalidRequestError(DomainError):
    """Raised when a request violates validation or business rules.

    Three shapes are supported:

    - a general failure: ``InvalidRequestError("endDate must be >= startDate")``
    - a classified failure with explicit ``severity`` and ``validation_code``
    - a field-scoped failure carrying ``field_errors`` (field name -> description)

    ``field_errors`` is copied on construction and exposed read-only.
    """

    DEFAULT_CODE = "INVALID_REQUEST"
    FIELD_CODE = "FIELD_VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        severity: ValidationSeverity = ValidationSeverity.MEDIUM,
        validation_code: str | None = None,
        field_errors: Mapping[str, str] | None = None,
    ) -> None:
        self._field_errors: Mapping[str, str] = MappingProxyType(dict(field_errors or {}))
        self.severity = severity
        if validation_code is None:
            validation_code = self.FIELD_CODE if self._field_errors else self.DEFAULT_CODE
        self.validation_code = validation_code
        super().__init__(message)

    @property
    def field_errors(self) -> Mapping[str, str]:
        return self._field_errors

    @property
    def has_field_errors(self) -> bool:
        return bool(self._field_errors)

    @classmethod
    def field_validation(
        cls, field_errors: Mapping[str, str], message: str | None = "Validation failed"
    ) -> "InvalidRequestError":
        return cls(message, field_errors=field_errors)

    @classmethod
    def required_field(cls, field: str) -> "InvalidRequestError":
        return cls(
            f"{field} must not be blank",
            field_errors={field: "must not be blank"},
            validation_code="REQUIRED_FIELD",
        )

    @classmethod
    def invalid_format(cls, field: str, expected: str) -> "InvalidRequestError":
        return cls(
            f"{field} has an invalid format",
            field_errors={field: f"must match {expected}"},
            validation_code="INVALID_FORMAT",
        )

    @classmethod
    def business_rule_violation(cls, message: str) -> "InvalidRequestError":
        return cls(
            message,
            severity=ValidationSeverity.HIGH,
            validation_code="BUSINESS_RULE_VIOLATION",
        )

    @classmethod
    def security_violation(cls, message: str) -> "InvalidRequestError":
        """Validation failure that looks like tampering; logged at the highest priority."""
        return cls(
            message,
            severity=ValidationSeverity.CRITICAL,
            validation_code="SECURITY_VIOLATION",
        )


class DuplicateResourceError(ConflictError):
    """Raised when a create or update would break a uniqueness rule.

    The structured form records which resource, field and value collided so
    the client message can point at the offending input. The three context
    attributes are either all set or all None.
    """

    DEFAULT_CLIENT_MESSAGE = "Resource already exists"

    def __init__(
        self,
        message: str | None = None,
        resource_type: str | None = None,
        conflict_field: str | None = None,
        duplicate_value: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.conflict_field = conflict_field
        self.duplicate_value = duplicate_value
        super().__init__(message)

    @property
    def has_detailed_context(self) -> bool:
        return (
            self.resource_type is not None
            and self.conflict_field is not None
            and self.duplicate_value is not None
        )

    @property
    def client_message(self) -> str:
        """User-facing description of the conflict."""
        if self.has_detailed_context:
            return (
                f"{self.resource_type} with {self.conflict_field} "
                f"'{self.duplicate_value}' already exists"
            )
        return self.message if self.message is not None else self.DEFAULT_CLIENT_MESSAGE

    def error_details(self) -> dict[str, Any]:
        """Structured conflict description for clients that resolve duplicates themselves."""
        details: dict[str, Any] = {"errorType": "DUPLICATE_RESOURCE"}
        if self.has_detailed_context:
            details["resourceType"] = self.resource_type
            details["conflictField"] = self.conflict_field
            details["duplicateValue"] = self.duplicate_value
        details["message"] = self.client_message
        return details

    @classmethod
    def supplier_name(cls, name: str) -> "DuplicateResourceError":
        return cls(f"Supplier name already exists: {name}", "Supplier", "name", name)

    @classmethod
    def inventory_item_sku(cls, sku: str) -> "DuplicateResourceError":
        return cls(f"Inventory item SKU already exists: {sku}", "InventoryItem", "sku", sku)

    @classmethod
    def inventory_item_name(cls, name: str) -> "DuplicateResourceError":
        return cls(f"Inventory item name already exists: {name}", "InventoryItem", "name", name)
