"""Validation Gate — per-field rule table turning Pydantic errors into (field, message) pairs.

Invariants:
    - ALL violations are reported (Pydantic never fails fast), one entry per distinct message
    - Entries are ordered by the rule table, top to bottom
    - A missing, null or blank required field reports the rule's "required" message;
      any other failure of that field reports its "invalid" message
    - Nothing reaches the persistence gateway when validation fails

Design Decisions:
    - One table for both entities: customer and invoice field names never overlap,
      so the FastAPI handler can format any request body without knowing the route
"""

from dataclasses import dataclass
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from invoice_api.core.errors import RequestValidationFailedError


@dataclass(frozen=True)
class FieldRule:
    """Messages reported for one request field."""
    field: str
    invalid: str
    required: str | None = None


FIELD_RULES: tuple[FieldRule, ...] = (
    # Customer
    FieldRule(
        "name",
        invalid="Customer name must be at least 2 characters long",
        required="Customer name is required",
    ),
    FieldRule("email", invalid="Please provide a valid email address"),
    FieldRule("phone", invalid="Please provide a valid phone number"),
    FieldRule("address", invalid="Address must not exceed 500 characters"),
    FieldRule("jobLocation", invalid="Job location must not exceed 200 characters"),
    # Invoice
    FieldRule(
        "date",
        invalid="Please provide a valid date",
        required="Invoice date is required",
    ),
    FieldRule(
        "description",
        invalid="Description must be between 5 and 500 characters",
        required="Description is required",
    ),
    FieldRule(
        "amount",
        invalid="Amount must be a positive number",
        required="Amount is required",
    ),
    FieldRule(
        "customerId",
        invalid="Customer ID must be a valid integer",
        required="Customer ID is required",
    ),
    FieldRule("note", invalid="Note must not exceed 1000 characters"),
)

_RULES_BY_FIELD = {rule.field: rule for rule in FIELD_RULES}
_RULE_ORDER = {rule.field: index for index, rule in enumerate(FIELD_RULES)}
_LOCATION_PREFIXES = {"body", "query", "path"}

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _error_field(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _is_blank(error: dict) -> bool:
    if error["type"] == "missing":
        return True
    value = error.get("input")
    return value is None or (isinstance(value, str) and not value.strip())


def _message_for(field: str, error: dict) -> str:
    rule = _RULES_BY_FIELD.get(field)
    if rule is None:
        return error["msg"]
    if rule.required and _is_blank(error):
        return rule.required
    return rule.invalid


def format_validation_errors(errors: Iterable[dict]) -> list[dict[str, str]]:
    """Map Pydantic error dicts onto the rule table's field messages."""
    formatted: list[dict[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for error in errors:
        field = _error_field(tuple(error["loc"]))
        message = _message_for(field, error)
        if (field, message) in seen:
            continue
        seen.add((field, message))
        formatted.append({"field": field, "message": message})
    formatted.sort(key=lambda e: _RULE_ORDER.get(e["field"], len(_RULE_ORDER)))
    return formatted


def validate_payload(schema: type[SchemaT], payload: SchemaT | dict[str, Any]) -> SchemaT:
    """Return payload as a validated schema instance or raise RequestValidationFailedError."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationFailedError(
            format_validation_errors(exc.errors()),
        ) from exc
