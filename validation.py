"""
Validation and normalization of raw request input.

Every function here is pure: it takes whatever the client sent and returns a
typed, normalized field set, or raises InvalidInput carrying one readable
message per violated constraint.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Type, TypeVar

from pydantic import ValidationError

from errors import InvalidInput
from schemas import (
    ID_PATTERN, InputModel, CategoryCreate, ProductCreate, ProductUpdate,
    SignupRequest, LoginRequest,
)

M = TypeVar("M", bound=InputModel)

_ID_RE = re.compile(ID_PATTERN)

_TYPE_MESSAGES = {
    "missing": "{label} is required",
    "value_error": "{label} is not valid",
    "string_too_short": "{label} must be at least {min_length} characters",
    "string_too_long": "{label} cannot exceed {max_length} characters",
    "less_than_equal": "{label} cannot exceed {le}",
    "string_type": "{label} must be a string",
    "string_pattern_mismatch": "{label} ID is malformed",
    "float_type": "{label} must be a number",
    "float_parsing": "{label} must be a number",
    "finite_number": "{label} must be a finite number",
    "int_type": "{label} must be an integer",
    "int_parsing": "{label} must be an integer",
    "int_from_float": "{label} must be an integer",
    "bool_type": "{label} must be true or false",
    "bool_parsing": "{label} must be true or false",
    "model_type": "Request body must be a JSON object",
    "model_attributes_type": "Request body must be a JSON object",
    "dict_type": "Request body must be a JSON object",
    "json_invalid": "Request body is not valid JSON",
}


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and _ID_RE.match(value) is not None


def _message(error: Mapping[str, Any], labels: Mapping[str, str]) -> str:
    loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = str(loc[-1]) if loc else ""
    label = labels.get(field, field)
    ctx = error.get("ctx") or {}
    kind = error.get("type")

    if kind in ("greater_than_equal", "greater_than"):
        bound = ctx.get("ge", ctx.get("gt"))
        if bound == 0:
            return f"{label} cannot be negative"
        return f"{label} must be at least {bound}"
    if kind in _TYPE_MESSAGES:
        return _TYPE_MESSAGES[kind].format(label=label, **ctx)
    if label:
        return f"{label}: {error.get('msg')}"
    return str(error.get("msg"))


def format_errors(errors: Iterable[Mapping[str, Any]], labels: Mapping[str, str] = None) -> List[str]:
    """Turn pydantic error dicts into one message each, keeping their order."""
    messages = []
    for error in errors:
        message = _message(error, labels or {})
        if message not in messages:
            messages.append(message)
    return messages


def validate(schema: Type[M], raw: Any) -> M:
    if not isinstance(raw, dict):
        raise InvalidInput(errors=["Request body must be a JSON object"])
    try:
        return schema.model_validate(raw)
    except ValidationError as exc:
        raise InvalidInput(errors=format_errors(exc.errors(), schema.labels))


def validate_category(raw: Any) -> CategoryCreate:
    return validate(CategoryCreate, raw)


def validate_product_create(raw: Any) -> ProductCreate:
    return validate(ProductCreate, raw)


def validate_product_update(raw: Any) -> Dict[str, Any]:
    """Return only the fields the client actually sent, keyed by column name."""
    update = validate(ProductUpdate, raw)
    return update.model_dump(include=update.model_fields_set)


def validate_signup(raw: Any) -> SignupRequest:
    return validate(SignupRequest, raw)


def validate_login(raw: Any) -> LoginRequest:
    return validate(LoginRequest, raw)
