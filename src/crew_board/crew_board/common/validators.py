from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} needs at least {min_len} characters")
    return value


def require_exact_length(value: str, field_name: str, length: int) -> str:
    value = (value or "").strip()
    if len(value) != length:
        raise ValidationError(f"{field_name} must be {length} characters")
    return value


def require_positive_amount(value, field_name: str) -> int:
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount


def require_non_negative(value, field_name: str) -> int:
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
