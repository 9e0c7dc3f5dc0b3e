from __future__ import annotations

import math
from typing import Optional

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def parse_break_minutes(value: Optional[str], field_name: str = "Break duration") -> int:
    """Whole minutes from a form field, between 0 and one day."""
    raw = require_non_empty(value or "", field_name)
    try:
        minutes = float(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number.")
    if not math.isfinite(minutes):
        raise ValidationError(f"{field_name} must be a number.")
    if minutes < 0:
        raise ValidationError(f"{field_name} cannot be negative.")
    if not minutes.is_integer():
        raise ValidationError(f"{field_name} must be given in whole minutes.")
    if minutes > MINUTES_PER_DAY:
        raise ValidationError(f"{field_name} cannot exceed {MINUTES_PER_DAY} minutes.")
    return int(minutes)


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not str(value).strip():
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_positive_int(value: Optional[str], field_name: str) -> int:
    parsed = parse_optional_int(value)
    if parsed is None or parsed <= 0:
        raise ValidationError(f"{field_name} is invalid.")
    return parsed
