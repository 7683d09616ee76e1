from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_positive(value: int, field_name: str) -> int:
    if value is None or int(value) < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return int(value)


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
