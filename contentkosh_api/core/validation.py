"""
Small validation helpers for values that do not arrive through a pydantic model
(query strings, optional body fields checked by services).
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from pydantic.alias_generators import to_camel

from contentkosh_api.core.errors import BadRequestError


# PUBLIC_INTERFACE
def validate_required(value: Any, field_name: str) -> None:
    """Raise BadRequestError('<field> is required') for None or empty strings."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise BadRequestError(f"{field_name} is required")


# PUBLIC_INTERFACE
def validate_max_length(value: str | None, max_length: int, field_name: str) -> None:
    if value and len(value) > max_length:
        raise BadRequestError(f"{field_name} cannot exceed {max_length} characters")


def _field_label(loc: Sequence[Any]) -> str:
    names = [str(part) for part in loc[1:] if not isinstance(part, int)]
    if not names:
        return ""
    name = names[-1]
    return to_camel(name) if "_" in name else name


# PUBLIC_INTERFACE
def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Turn pydantic error dicts into one readable message.

    Missing fields read '<field> is required', bad path ids read
    'Invalid <param>: must be a positive integer' and custom validator
    messages are passed through without pydantic's 'Value error, ' prefix.
    """
    messages: List[str] = []
    for err in errors:
        loc = tuple(err.get("loc") or ())
        field = _field_label(loc)
        kind = err.get("type", "")
        if loc and loc[0] == "path":
            message = f"Invalid {field}: must be a positive integer"
        elif kind == "missing":
            message = f"{field} is required" if field else "Request body is required"
        elif kind in ("value_error", "assertion_error"):
            message = str(err.get("msg", "")).removeprefix("Value error, ").removeprefix("Assertion failed, ")
        elif field:
            message = f"{field}: {err.get('msg', 'is invalid')}"
        else:
            message = str(err.get("msg", "Invalid request"))
        if message not in messages:
            messages.append(message)
    return ", ".join(messages) or "Request validation failed"
