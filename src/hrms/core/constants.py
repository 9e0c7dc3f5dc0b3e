"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

NOT_AVAILABLE = "N/A"

DEFAULT_REPORT_PAGE_SIZE = 10
DEFAULT_RECENT_SHIFTS = 5
SECONDS_PER_DAY = 86400
MINUTES_PER_DAY = 1440
