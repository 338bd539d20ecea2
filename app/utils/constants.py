"""
Application-wide constants for the Agency PM backend.

Defines domain enumerations, validation bounds, and lookup tables
used across routers, services, and models.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Project lifecycle
# ---------------------------------------------------------------------------

PROJECT_STATUSES: Final[list[str]] = [
    "planning",
    "active",
    "on_hold",
    "completed",
    "cancelled",
]

PROJECT_ROLES: Final[list[str]] = [
    "owner",
    "admin",
    "member",
    "viewer",
]

MONTHLY_STATUSES: Final[list[str]] = [
    "planned",
    "in_progress",
    "completed",
    "delayed",
    "on_hold",
    "cancelled",
]

# ---------------------------------------------------------------------------
# Accepted period bounds for budget input
# ---------------------------------------------------------------------------

YEAR_MIN: Final[int] = 2020
YEAR_MAX: Final[int] = 2030
MONTHS: Final[range] = range(1, 13)

# ---------------------------------------------------------------------------
# Advertising media types
# ---------------------------------------------------------------------------

MEDIA_TYPES: Final[list[str]] = [
    "digital",
    "tv",
    "newspaper",
    "magazine",
    "outdoor",
    "radio",
    "other",
]

DEFAULT_MEDIA_TYPE: Final[str] = "digital"

# Media type -> spend bucket column on MonthlyAdvertisingSpend.
# Must list every entry of MEDIA_TYPES; None means no bucket is written.
MEDIA_TYPE_SPEND_COLUMN: Final[dict[str, str | None]] = {
    "digital": "online_spend",
    "tv": "broadcast_spend",
    "newspaper": "print_spend",
    "magazine": "print_spend",
    "outdoor": None,
    "radio": "broadcast_spend",
    "other": "other_spend",
}

SPEND_BUCKET_COLUMNS: Final[list[str]] = [
    "online_spend",
    "print_spend",
    "broadcast_spend",
    "social_media_spend",
    "other_spend",
]
