"""
Catalog Backend: Input Validation
==================================

What:  Validates create/update payloads before they are allowed near storage.
How:   Rules are declared per field on the request schemas
       (catalog.schemas.product / catalog.schemas.category). This module runs
       a payload through its schema and turns pydantic's error report into
       our ValidationError with an ordered list of FieldError entries.
Who:   Called by the services, one payload at a time.
When:  First step of every create and update.

Contract:
    validate_*(payload) returns the validated model, or raises ValidationError
    listing every violation in field declaration order. Nothing is partially
    accepted. Validation is pure and synchronous; existence of referenced
    rows (category_id) is the repository's job, not this module's.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog.exceptions import FieldError, ValidationError
from catalog.schemas.category import CategoryCreate, CategoryUpdate
from catalog.schemas.product import ProductCreate, ProductUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

# Field name reported when the payload as a whole is unusable
BODY_FIELD = "body"


def field_errors_from_pydantic(raw_errors: Iterable[Dict[str, Any]]) -> List[FieldError]:
    """
    Convert a pydantic error report (exc.errors()) into FieldError entries.

    Order is preserved: pydantic reports fields in declaration order, with
    unknown keys after them.
    """
    errors: List[FieldError] = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or BODY_FIELD
        if err.get("type") == "extra_forbidden":
            reason = "Unknown or read-only field"
        elif err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            reason = str(err["ctx"]["error"])
        else:
            reason = err.get("msg", "Invalid value")
        errors.append(FieldError(field=field, reason=reason))
    return errors


def _validate(model: Type[ModelT], payload: Any) -> ModelT:
    if not isinstance(payload, Mapping):
        raise ValidationError([FieldError(BODY_FIELD, "Request body must be a JSON object")])
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise ValidationError(field_errors_from_pydantic(e.errors())) from e


# ── Products ──────────────────────────────────────────────────────────────

def validate_product_create(payload: Any) -> ProductCreate:
    """Name 1..100 chars, price > 0, stock >= 0, category_id a UUID."""
    return _validate(ProductCreate, payload)


def validate_product_update(payload: Any) -> ProductUpdate:
    """Same rules as create; every field optional, only description nullable."""
    return _validate(ProductUpdate, payload)


# ── Categories ────────────────────────────────────────────────────────────

def validate_category_create(payload: Any) -> CategoryCreate:
    return _validate(CategoryCreate, payload)


def validate_category_update(payload: Any) -> CategoryUpdate:
    return _validate(CategoryUpdate, payload)
