from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import ISO_DATE_PATTERN
from ..core.exceptions import ValidationError

_ISO_DATE_RE = re.compile(ISO_DATE_PATTERN)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not value or not _ISO_DATE_RE.match(value.strip()):
        raise ValidationError("Date must be in YYYY-MM-DD format.")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Date must be a valid calendar date.")


def parse_optional_iso_date(value: Optional[str]) -> Optional[date]:
    """Lenient variant for filters: anything unparseable is dropped."""
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValidationError:
        return None


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()
