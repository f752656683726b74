"""Cross-location comparison reports and their CSV/JSON exports."""
from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Sequence

import pandas as pd

from .analytics import (
    average_party_size,
    day_summary,
    no_show_rate,
    round_half_up,
    table_utilization,
    total_covers,
    walk_in_rate,
)
from .models import Reservation, Table, location_name

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def filter_by_date_range(
    reservations: Sequence[Reservation], start: date | datetime, end: date | datetime
) -> List[Reservation]:
    """Reservations from the start of ``start`` to the end of ``end``."""
    first, last = _as_date(start), _as_date(end)
    return [r for r in reservations if first <= r.date_time.date() <= last]


def location_metrics(
    reservations: Sequence[Reservation],
    tables: Sequence[Table],
    location_id: str,
    start: date | datetime,
    end: date | datetime,
) -> Dict[str, object]:
    """Headline metrics for one location over a date range."""
    in_range = filter_by_date_range([r for r in reservations if r.location_id == location_id], start, end)
    location_tables = [t for t in tables if t.location_id == location_id]
    return {
        "location_id": location_id,
        "location_name": location_name(location_id),
        "total_reservations": len(in_range),
        "total_covers": total_covers(in_range),
        "no_show_rate": no_show_rate(in_range),
        "average_party_size": average_party_size(in_range),
        "table_utilization": table_utilization(location_tables),
        "walk_in_rate": walk_in_rate(in_range),
    }


def trend_for_range(
    reservations: Sequence[Reservation], start: date | datetime, end: date | datetime
) -> List[Dict[str, int | str]]:
    """Daily trend records for every day from ``start`` to ``end``."""
    first, last = _as_date(start), _as_date(end)
    days = (last - first).days + 1
    return [day_summary(first + timedelta(days=i), reservations) for i in range(max(days, 0))]


def _mean(values: List[int]) -> int:
    if not values:
        return 0
    return int(round_half_up(sum(values) / len(values)))


def location_comparison(
    reservations: Sequence[Reservation],
    tables: Sequence[Table],
    location_ids: Sequence[str],
    start: date | datetime,
    end: date | datetime,
) -> Dict[str, object]:
    """Side-by-side metrics, combined totals and daily trends for several locations."""
    if _as_date(end) < _as_date(start):
        raise ValueError(f"Date range ends before it starts: {start} to {end}")

    locations = [location_metrics(reservations, tables, loc, start, end) for loc in location_ids]
    combined = {
        "total_reservations": sum(loc["total_reservations"] for loc in locations),
        "total_covers": sum(loc["total_covers"] for loc in locations),
        "average_no_show_rate": _mean([loc["no_show_rate"] for loc in locations]),
        "average_utilization": _mean([loc["table_utilization"] for loc in locations]),
    }
    trends = [
        {
            "location_id": loc,
            "data": trend_for_range([r for r in reservations if r.location_id == loc], start, end),
        }
        for loc in location_ids
    ]
    logger.debug("Compared %d locations from %s to %s", len(location_ids), start, end)
    return {
        "date_range": {"start": _as_date(start).isoformat(), "end": _as_date(end).isoformat()},
        "locations": locations,
        "combined": combined,
        "trends": trends,
    }


# ----------------------------- export -----------------------------
def comparison_frame(report: Dict[str, object]) -> pd.DataFrame:
    """Per-location metrics as a DataFrame, one row per location."""
    columns = [
        "location_id", "location_name", "total_reservations", "total_covers",
        "no_show_rate", "average_party_size", "table_utilization", "walk_in_rate",
    ]
    return pd.DataFrame(report["locations"], columns=columns)


def export_to_csv(report: Dict[str, object]) -> str:
    """Multi-section text report: locations, combined totals, daily trends."""
    span = report["date_range"]
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["Cross-Location Comparison Report"])
    w.writerow([f"Date Range: {span['start']} to {span['end']}"])
    w.writerow([])
    w.writerow(["Location", "Reservations", "Covers", "No-Show Rate", "Avg Party Size",
                "Table Utilization", "Walk-In Rate"])
    for loc in report["locations"]:
        w.writerow([
            loc["location_name"],
            loc["total_reservations"],
            loc["total_covers"],
            f"{loc['no_show_rate']}%",
            f"{loc['average_party_size']:.1f}",
            f"{loc['table_utilization']}%",
            f"{loc['walk_in_rate']}%",
        ])

    combined = report["combined"]
    w.writerow([])
    w.writerow(["Combined Totals"])
    w.writerow(["Total Reservations", combined["total_reservations"]])
    w.writerow(["Total Covers", combined["total_covers"]])
    w.writerow(["Average No-Show Rate", f"{combined['average_no_show_rate']}%"])
    w.writerow(["Average Utilization", f"{combined['average_utilization']}%"])
    w.writerow([])
    w.writerow(["Daily Trends by Location"])
    for trend in report["trends"]:
        w.writerow([])
        w.writerow([f"{location_name(trend['location_id'])} Daily Data"])
        w.writerow(["Date", "Reservations", "Covers", "No-Shows", "Walk-Ins"])
        for day in trend["data"]:
            w.writerow([day["date"], day["reservations"], day["covers"], day["no_shows"], day["walk_ins"]])
    # No newline after the last row.
    return buf.getvalue().rstrip("\n")


def export_to_json(report: Dict[str, object]) -> str:
    return json.dumps(report, indent=2)


def export_report(report: Dict[str, object], fmt: str) -> str:
    """Serialize a comparison report as ``csv`` or ``json`` text."""
    if fmt == "json":
        return export_to_json(report)
    if fmt == "csv":
        return export_to_csv(report)
    raise ValueError(f"Unsupported export format: {fmt}")


def export_filename(report: Dict[str, object], fmt: str) -> str:
    span = report["date_range"]
    return f"analytics-comparison-{span['start']}-to-{span['end']}.{fmt}"
