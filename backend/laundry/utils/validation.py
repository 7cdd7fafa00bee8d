from __future__ import annotations
"""Reusable validation helpers for request payloads and lifecycle inputs.

Each helper returns the cleaned value (to enable inline usage) or raises
ValidationError with a message naming the offending field.
"""
from typing import Any, Iterable, Optional
from laundry.errors import ValidationError


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed."""
    if new_status not in allowed:
        raise ValidationError(f"{field_name} invalid", field=field_name)
    return new_status


def require_text(value: Any, field_name: str, max_length: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field_name} required', field=field_name)
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{field_name} longer than {max_length} characters', field=field_name)
    return value


def optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field_name} must be text', field=field_name)
    return value.strip() or None


def int_value(value: Any, field_name: str) -> int:
    # bool is an int subclass; JSON true must not pass as 1
    if isinstance(value, bool):
        raise ValidationError(f'{field_name} must be int', field=field_name)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field_name} must be int', field=field_name)
    if isinstance(value, float) and value != number:
        raise ValidationError(f'{field_name} must be int', field=field_name)
    return number


def positive_int(value: Any, field_name: str) -> int:
    number = int_value(value, field_name)
    if number < 1:
        raise ValidationError(f'{field_name} must be at least 1', field=field_name)
    return number


def coordinate(value: Any, field_name: str, bound: float) -> Optional[float]:
    """Optional latitude / longitude within '-bound..bound' degrees."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{field_name} must be a number', field=field_name)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field_name} must be a number', field=field_name)
    if not -bound <= number <= bound:
        raise ValidationError(f'{field_name} out of range', field=field_name)
    return number


__all__ = ['validate_status', 'require_text', 'optional_text', 'int_value', 'positive_int', 'coordinate']
