"""CSV loading utilities."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Iterable, List, Sequence, Union

import pandas as pd

from .models import (
    RESERVATION_SOURCES,
    RESERVATION_STATUSES,
    SEATING_PREFERENCES,
    TABLE_SHAPES,
    TABLE_STATUSES,
    WAITLIST_STATUSES,
    Reservation,
    Table,
    WaitlistEntry,
    parse_datetime,
    parse_int,
    parse_optional,
)

logger = logging.getLogger(__name__)

Source = Union[Path, str, IO[Any]]

MAX_PARTY_SIZE = 20
MAX_TABLE_CAPACITY = 20
MAX_QUOTED_WAIT = 180
MAX_NAME_LENGTH = 100
MAX_REQUEST_LENGTH = 500
MAX_TABLE_NUMBER_LENGTH = 10
MIN_PHONE_LENGTH = 10
MAX_PHONE_LENGTH = 20


def _read(path: Source, required: Sequence[str], label: str) -> pd.DataFrame:
    # Text columns only, so phone numbers and ids are never coerced to numbers.
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"Error in {label}: missing columns: {', '.join(missing)}")
    return df


def _choice(row: pd.Series, column: str, allowed: Iterable[str], default: str, where: str) -> str:
    value = parse_optional(row.get(column, "")) or default
    value = value.lower()
    if value not in allowed:
        raise ValueError(f"{where}: invalid {column} {value!r}")
    return value


def _bounded(row: pd.Series, column: str, low: int, high: int, where: str, default: int | None = None) -> int:
    raw = row.get(column, "")
    if parse_optional(raw) is None and default is None:
        raise ValueError(f"{where}: {column} is required")
    try:
        value = parse_int(raw, default if default is not None else 0)
    except ValueError as exc:
        raise ValueError(f"{where}: invalid {column} {raw!r}") from exc
    if not low <= value <= high:
        raise ValueError(f"{where}: {column} must be between {low} and {high}, got {value}")
    return value


def _coord(row: pd.Series, column: str, where: str) -> float:
    raw = parse_optional(row.get(column, ""))
    try:
        return float(raw or 0)
    except ValueError as exc:
        raise ValueError(f"{where}: invalid {column} {raw!r}") from exc


def _text(row: pd.Series, column: str, low: int, high: int, where: str) -> str:
    text = parse_optional(row.get(column, "")) or ""
    if not text:
        raise ValueError(f"{where}: {column} is required")
    if not low <= len(text) <= high:
        raise ValueError(f"{where}: {column} must be {low} to {high} characters, got {len(text)}")
    return text


def _name(row: pd.Series, column: str, where: str) -> str:
    name = parse_optional(row.get(column, ""))
    if not name:
        raise ValueError(f"{where}: {column} is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"{where}: {column} is longer than {MAX_NAME_LENGTH} characters")
    return name


def _requests(row: pd.Series, where: str) -> str | None:
    text = parse_optional(row.get("special_requests", ""))
    if text and len(text) > MAX_REQUEST_LENGTH:
        raise ValueError(f"{where}: special_requests is longer than {MAX_REQUEST_LENGTH} characters")
    return text


def _check_unique(ids: List[str], label: str) -> None:
    seen = set()
    for item in ids:
        if item in seen:
            raise ValueError(f"Duplicate id in {label}: {item}")
        seen.add(item)


def load_tables(path: Source) -> List[Table]:
    """Load floor-plan tables from ``tables.csv``."""
    df = _read(path, ["id", "location_id", "number", "capacity", "section"], "tables.csv")
    tables: List[Table] = []
    for idx, row in df.iterrows():
        where = f"tables.csv row {idx + 2}"
        tables.append(
            Table(
                id=str(row["id"]).strip(),
                location_id=str(row["location_id"]).strip(),
                number=_text(row, "number", 1, MAX_TABLE_NUMBER_LENGTH, where),
                capacity=_bounded(row, "capacity", 1, MAX_TABLE_CAPACITY, where),
                shape=_choice(row, "shape", TABLE_SHAPES, "square", where),
                status=_choice(row, "status", TABLE_STATUSES, "available", where),
                section=_text(row, "section", 1, MAX_NAME_LENGTH, where),
                x=_coord(row, "x", where),
                y=_coord(row, "y", where),
            )
        )
    _check_unique([t.id for t in tables], "tables.csv")
    logger.debug("Loaded %d tables", len(tables))
    return tables


def load_reservations(path: Source, table_ids: set[str] | None = None) -> List[Reservation]:
    """Load reservations from ``reservations.csv``.

    If ``table_ids`` is provided it validates that assigned tables exist.
    """
    df = _read(
        path,
        ["id", "location_id", "guest_name", "guest_phone", "party_size", "date_time"],
        "reservations.csv",
    )
    reservations: List[Reservation] = []
    for idx, row in df.iterrows():
        where = f"reservations.csv row {idx + 2}"
        table_id = parse_optional(row.get("table_id", ""))
        if table_id and table_ids is not None and table_id not in table_ids:
            raise ValueError(f"{where}: unknown table_id {table_id}")
        try:
            date_time = parse_datetime(row["date_time"])
        except ValueError as exc:
            raise ValueError(f"{where}: invalid date_time {row['date_time']!r}") from exc
        reservations.append(
            Reservation(
                id=str(row["id"]).strip(),
                location_id=str(row["location_id"]).strip(),
                guest_name=_name(row, "guest_name", where),
                guest_phone=_text(row, "guest_phone", MIN_PHONE_LENGTH, MAX_PHONE_LENGTH, where),
                party_size=_bounded(row, "party_size", 1, MAX_PARTY_SIZE, where),
                date_time=date_time,
                status=_choice(row, "status", RESERVATION_STATUSES, "pending", where),
                source=_choice(row, "source", RESERVATION_SOURCES, "web", where),
                seating_preference=_choice(row, "seating_preference", SEATING_PREFERENCES, "any", where),
                guest_email=parse_optional(row.get("guest_email", "")),
                table_id=table_id,
                special_requests=_requests(row, where),
                high_chairs=_bounded(row, "high_chairs", 0, MAX_PARTY_SIZE, where, default=0),
                kids_in_party=_bounded(row, "kids_in_party", 0, MAX_PARTY_SIZE, where, default=0),
            )
        )
    _check_unique([r.id for r in reservations], "reservations.csv")
    logger.debug("Loaded %d reservations", len(reservations))
    return reservations


def load_waitlist(path: Source) -> List[WaitlistEntry]:
    """Load waitlist entries from ``waitlist.csv``."""
    df = _read(
        path,
        ["id", "location_id", "guest_name", "guest_phone", "party_size", "quoted_wait_time", "joined_at"],
        "waitlist.csv",
    )
    entries: List[WaitlistEntry] = []
    for idx, row in df.iterrows():
        where = f"waitlist.csv row {idx + 2}"
        try:
            joined_at = parse_datetime(row["joined_at"])
        except ValueError as exc:
            raise ValueError(f"{where}: invalid joined_at {row['joined_at']!r}") from exc
        entries.append(
            WaitlistEntry(
                id=str(row["id"]).strip(),
                location_id=str(row["location_id"]).strip(),
                guest_name=_name(row, "guest_name", where),
                guest_phone=_text(row, "guest_phone", MIN_PHONE_LENGTH, MAX_PHONE_LENGTH, where),
                party_size=_bounded(row, "party_size", 1, MAX_PARTY_SIZE, where),
                quoted_wait_time=_bounded(row, "quoted_wait_time", 0, MAX_QUOTED_WAIT, where),
                joined_at=joined_at,
                status=_choice(row, "status", WAITLIST_STATUSES, "waiting", where),
                seating_preference=_choice(row, "seating_preference", SEATING_PREFERENCES, "any", where),
                special_requests=_requests(row, where),
            )
        )
    _check_unique([w.id for w in entries], "waitlist.csv")
    logger.debug("Loaded %d waitlist entries", len(entries))
    return entries


def load_all(reservations_path: Source, tables_path: Source, waitlist_path: Source | None = None):
    """Convenience wrapper returning reservations, tables and waitlist."""
    tables = load_tables(tables_path)
    reservations = load_reservations(reservations_path, {t.id for t in tables})
    waitlist = load_waitlist(waitlist_path) if waitlist_path is not None else []
    return reservations, tables, waitlist
