"""Datables package."""
from .models import Reservation, Table, WaitlistEntry, TableRecommendation
from .csv_loader import (
    load_reservations,
    load_tables,
    load_waitlist,
    load_all,
)
from .recommend import score_table_for_reservation, recommend_tables, best_table
from .analytics import (
    total_covers,
    average_party_size,
    no_show_rate,
    table_utilization,
    hourly_data,
    trend_data,
    location_analytics,
)
from .comparison import location_comparison

__all__ = [
    "Reservation",
    "Table",
    "WaitlistEntry",
    "TableRecommendation",
    "load_reservations",
    "load_tables",
    "load_waitlist",
    "load_all",
    "score_table_for_reservation",
    "recommend_tables",
    "best_table",
    "total_covers",
    "average_party_size",
    "no_show_rate",
    "table_utilization",
    "hourly_data",
    "trend_data",
    "location_analytics",
    "location_comparison",
]
