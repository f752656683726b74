"""Data models for Datables."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import math

import pandas as pd


RESERVATION_STATUSES = ("pending", "confirmed", "seated", "completed", "no-show", "cancelled")
RESERVATION_SOURCES = ("ios-app", "phone", "walk-in", "web")
SEATING_PREFERENCES = ("inside", "bar", "patio", "any")
TABLE_STATUSES = ("available", "reserved", "occupied", "finishing", "blocked")
TABLE_SHAPES = ("circle", "square", "rectangle", "booth")
WAITLIST_STATUSES = ("waiting", "notified", "seated", "expired", "cancelled")
SMS_TEMPLATE_TYPES = ("waitlist-ready", "reservation-confirm", "reservation-reminder", "custom")

LOCATION_NAMES = {
    "tustin": "Tustin",
    "santa-ana": "Santa Ana",
}


def location_name(location_id: str) -> str:
    """Display name for a location id, falling back to the id itself."""
    return LOCATION_NAMES.get(location_id, location_id)


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    text = str(value).strip()
    return not text or text.lower() == "nan"


def parse_optional(value: object) -> Optional[str]:
    """Return stripped text, or ``None`` for empty cells."""
    if _is_blank(value):
        return None
    return str(value).strip()


def parse_int(value: object, default: int = 0) -> int:
    """Parse an integer cell. Empty values return ``default``."""
    if _is_blank(value):
        return default
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise ValueError(f"Expected a whole number, got {text!r}")
        return int(number)


def parse_datetime(value: object) -> datetime:
    """Parse an ISO-ish timestamp into a naive ``datetime``.

    Timezone aware input keeps its wall clock time and loses the offset.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if _is_blank(value):
        raise ValueError("Missing timestamp")
    stamp = pd.Timestamp(str(value).strip())
    return stamp.tz_localize(None).to_pydatetime() if stamp.tzinfo else stamp.to_pydatetime()


@dataclass
class Reservation:
    """A booked or walk-in party at one location."""

    id: str
    location_id: str
    guest_name: str
    guest_phone: str
    party_size: int
    date_time: datetime
    status: str = "pending"
    source: str = "web"
    seating_preference: str = "any"
    guest_email: Optional[str] = None
    table_id: Optional[str] = None
    special_requests: Optional[str] = None
    high_chairs: int = 0
    kids_in_party: int = 0


@dataclass
class Table:
    """Floor-plan table definition."""

    id: str
    location_id: str
    number: str
    capacity: int
    shape: str = "square"
    status: str = "available"
    section: str = ""
    x: float = 0.0
    y: float = 0.0


@dataclass
class WaitlistEntry:
    """Walk-in party waiting for a table."""

    id: str
    location_id: str
    guest_name: str
    guest_phone: str
    party_size: int
    quoted_wait_time: int
    joined_at: datetime
    status: str = "waiting"
    seating_preference: str = "any"
    special_requests: Optional[str] = None


@dataclass
class TableRecommendation:
    """Score of one table for one reservation."""

    table: Table
    score: int
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class NotificationLog:
    """Record of an outbound SMS."""

    id: str
    location_id: str
    type: str
    phone: str
    message: str
    sent_at: datetime
    status: str
    related_id: Optional[str] = None
