from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_IDENTIFIER_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_identifier(value: Any) -> str:
    """Normalize a scanned identifier (RFID tag or QR payload)."""
    if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int))):
        raise ValidationError("Identifier is malformed")
    ident = require_non_empty(None if value is None else str(value), "Identifier")
    return require_max_length(ident, "Identifier", MAX_IDENTIFIER_LENGTH)


def require_bounded_int(value: Any, field_name: str, *, minimum: int, maximum: int) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    return min(number, maximum)
