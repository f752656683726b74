"""Reservation and table analytics for a single location."""
from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from .models import RESERVATION_SOURCES, Reservation, Table, WaitlistEntry

logger = logging.getLogger(__name__)

# Typical restaurant hours, both ends inclusive.
OPEN_HOUR = 11
CLOSE_HOUR = 23

IN_USE_STATUSES = ("occupied", "reserved")
SEATED_COVER_RATIO = 0.8


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going toward positive infinity."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return int(round_half_up(100 * part / whole))


# ----------------------------- core metrics -----------------------------
def total_covers(reservations: Sequence[Reservation]) -> int:
    """Guests across all reservations."""
    return sum(r.party_size for r in reservations)


def average_party_size(reservations: Sequence[Reservation]) -> float:
    """Mean party size rounded to one decimal."""
    if not reservations:
        return 0
    return round_half_up(total_covers(reservations) / len(reservations), 1)


def no_show_rate(reservations: Sequence[Reservation]) -> int:
    no_shows = sum(1 for r in reservations if r.status == "no-show")
    return percent(no_shows, len(reservations))


def walk_in_rate(reservations: Sequence[Reservation]) -> int:
    walk_ins = sum(1 for r in reservations if r.source == "walk-in")
    return percent(walk_ins, len(reservations))


def table_utilization(tables: Sequence[Table]) -> int:
    """Share of tables occupied or reserved, as a percentage."""
    in_use = sum(1 for t in tables if t.status in IN_USE_STATUSES)
    return percent(in_use, len(tables))


def average_wait_time(waitlist: Sequence[WaitlistEntry]) -> int:
    """Mean quoted wait in minutes."""
    if not waitlist:
        return 0
    return int(round_half_up(sum(w.quoted_wait_time for w in waitlist) / len(waitlist)))


def currently_seated(tables: Sequence[Table]) -> int:
    """Approximate seated guests from occupied table capacity."""
    return sum(math.ceil(t.capacity * SEATED_COVER_RATIO) for t in tables if t.status == "occupied")


def source_breakdown(reservations: Sequence[Reservation]) -> List[Dict[str, int | str]]:
    """Count and share of reservations per booking source."""
    if not reservations:
        return []
    counts = {source: 0 for source in RESERVATION_SOURCES}
    for r in reservations:
        counts[r.source] = counts.get(r.source, 0) + 1
    return [
        {"source": source, "count": counts[source], "percentage": percent(counts[source], len(reservations))}
        for source in RESERVATION_SOURCES
    ]


# ----------------------------- bucketing -----------------------------
def hourly_data(
    reservations: Sequence[Reservation],
    open_hour: int = OPEN_HOUR,
    close_hour: int = CLOSE_HOUR,
) -> List[Dict[str, int]]:
    """Per-hour reservations, covers and utilization across opening hours.

    Utilization is relative to the busiest hour. Reservations that start
    outside ``open_hour``..``close_hour`` get no bucket and are logged.
    """
    stats: Dict[int, Dict[str, int]] = {
        hour: {"reservations": 0, "covers": 0} for hour in range(open_hour, close_hour + 1)
    }
    dropped = 0
    for r in reservations:
        bucket = stats.get(r.date_time.hour)
        if bucket is None:
            dropped += 1
            continue
        bucket["reservations"] += 1
        bucket["covers"] += r.party_size
    if dropped:
        logger.warning(
            "%d reservation(s) outside %02d:00-%02d:59 left out of hourly stats",
            dropped, open_hour, close_hour,
        )

    peak = max([s["reservations"] for s in stats.values()] + [1])
    return [
        {
            "hour": hour,
            "reservations": s["reservations"],
            "covers": s["covers"],
            "utilization": percent(s["reservations"], peak),
        }
        for hour, s in sorted(stats.items())
    ]


def day_summary(day: date, reservations: Sequence[Reservation]) -> Dict[str, int | str]:
    """Trend record for the reservations falling on ``day``."""
    day_res = [r for r in reservations if r.date_time.date() == day]
    return {
        "date": day.isoformat(),
        "reservations": len(day_res),
        "covers": total_covers(day_res),
        "no_shows": sum(1 for r in day_res if r.status == "no-show"),
        "walk_ins": sum(1 for r in day_res if r.source == "walk-in"),
    }


def trend_data(
    reservations: Sequence[Reservation],
    days: int = 7,
    today: Optional[date] = None,
) -> List[Dict[str, int | str]]:
    """One record per day for the ``days`` days ending ``today``, oldest first."""
    today = today or date.today()
    return [day_summary(today - timedelta(days=offset), reservations) for offset in range(days - 1, -1, -1)]


# ----------------------------- windows -----------------------------
def today_reservations(
    reservations: Sequence[Reservation], location_id: str, now: Optional[datetime] = None
) -> List[Reservation]:
    today = (now or datetime.now()).date()
    return [r for r in reservations if r.location_id == location_id and r.date_time.date() == today]


def week_reservations(
    reservations: Sequence[Reservation], location_id: str, now: Optional[datetime] = None
) -> List[Reservation]:
    """Reservations in the seven days up to ``now``."""
    now = now or datetime.now()
    week_ago = now - timedelta(days=7)
    return [r for r in reservations if r.location_id == location_id and week_ago <= r.date_time <= now]


def location_analytics(
    reservations: Sequence[Reservation],
    tables: Sequence[Table],
    waitlist: Sequence[WaitlistEntry],
    location_id: str,
    now: Optional[datetime] = None,
) -> Dict[str, object]:
    """Dashboard bundle of today, week, source, hourly and trend figures."""
    now = now or datetime.now()
    location_res = [r for r in reservations if r.location_id == location_id]
    location_tables = [t for t in tables if t.location_id == location_id]
    waiting = [w for w in waitlist if w.location_id == location_id and w.status == "waiting"]

    today_res = today_reservations(reservations, location_id, now)
    week_res = week_reservations(reservations, location_id, now)

    return {
        "location_id": location_id,
        "today": {
            "total_reservations": len(today_res),
            "total_covers": total_covers(today_res),
            "average_party_size": average_party_size(today_res),
            "currently_seated": currently_seated(location_tables),
            "table_utilization": table_utilization(location_tables),
            "waitlist_depth": len(waiting),
            "average_wait_time": average_wait_time(waiting),
        },
        "week": {
            "total_reservations": len(week_res),
            "total_covers": total_covers(week_res),
            "no_show_rate": no_show_rate(week_res),
            "average_party_size": average_party_size(week_res),
        },
        "source_breakdown": source_breakdown(week_res),
        "hourly": hourly_data(week_res),
        "trend": trend_data(location_res, 7, now.date()),
    }


# ----------------------------- display -----------------------------
def format_hour(hour: int) -> str:
    """Render an hour of day as ``5:00 PM``."""
    period = "PM" if hour >= 12 else "AM"
    display = hour - 12 if hour > 12 else (12 if hour == 0 else hour)
    return f"{display}:00 {period}"


def calculate_change(current: float, previous: float) -> Dict[str, object]:
    """Percentage change from ``previous`` to ``current`` with a signed label."""
    if previous == 0:
        return {"value": 0, "is_positive": True, "display": "+0%"}
    value = round_half_up((current - previous) / previous * 100, 1)
    shown = int(value) if float(value).is_integer() else value
    sign = "+" if value >= 0 else ""
    return {"value": value, "is_positive": value >= 0, "display": f"{sign}{shown}%"}
