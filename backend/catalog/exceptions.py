"""
Catalog Backend: Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for the catalog's error taxonomy.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by validation, repositories and services; caught by global handlers.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError           → 400 Bad Request (client can fix and resubmit)
    ├── NotFoundError             → 404 Not Found
    ├── ConstraintViolationError  → 409 Conflict (referential integrity / uniqueness)
    └── PersistenceError          → 500 Internal Server Error (storage failed)

Propagation:
    ValidationError is raised before anything reaches storage.
    NotFoundError and ConstraintViolationError come from the repositories and
    pass through the services unchanged.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = dict(context or {})
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldError:
    """A single field-level violation: which field, and a human-readable reason."""

    field: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "reason": self.reason}


class ValidationError(CatalogError):
    """
    Raised when a create/update payload fails validation.

    Carries every violation found in the payload, in field declaration order.
    The whole payload is rejected; there is no partial accept.

    Example response:
        {
            "error": "validation_error",
            "message": "Request payload failed validation",
            "details": {"errors": [{"field": "price", "reason": "Input should be greater than 0"}]}
        }
    """

    def __init__(
        self,
        errors: Optional[List[FieldError]] = None,
        message: str = "Request payload failed validation",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = list(errors or [])
        ctx = dict(context or {})
        ctx["errors"] = [error.to_dict() for error in self.errors]
        super().__init__(message=message, context=ctx)

    @property
    def fields(self) -> List[str]:
        """Names of the offending fields, in report order."""
        return [error.field for error in self.errors]


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; repositories and services turn
    that None into this exception where a row is required.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConstraintViolationError(CatalogError):
    """
    Raised when a write would break referential integrity or uniqueness.

    When:  Product references a category that does not exist, a category name
           is already taken, or a category still owning products is deleted.
    HTTP:  409 Conflict
    """

    def __init__(
        self,
        message: str = "The operation violates a data constraint",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class PersistenceError(CatalogError):
    """
    Raised when the storage layer fails unexpectedly.

    The message returned to the client is always generic. Driver details
    (SQL text, constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
