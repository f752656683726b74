"""
Table recommendation scoring.

Point scale per component, summed and capped at 100:
    party size fit: 30 exact, 25 one spare seat, 15 larger, 5 too small
    seating preference: 25 match, 15 no preference, 5 mismatch
    availability: 20 available, 15 finishing, 0 otherwise
    high chairs: 15 in a Main section, 5 elsewhere
    table type: 10 booth for four or fewer, 10 rectangle for six or more
    celebration: 5 booth or patio for birthdays and anniversaries
Scores are graded excellent, good or fair for display.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .models import Reservation, Table, TableRecommendation

logger = logging.getLogger(__name__)


# ----------------------------- weights -----------------------------
MAX_SCORE = 100

_SIZE_POINTS = {
    "exact": 30,
    "one_spare": 25,
    "larger": 15,
    "too_small": 5,
}

_PREFERENCE_POINTS = {
    "match": 25,
    "any": 15,
    "mismatch": 5,
}

_AVAILABILITY_POINTS = {
    "available": 20,
    "finishing": 15,
}

HIGH_CHAIR_NEAR = 15
HIGH_CHAIR_FAR = 5
HIGH_CHAIR_SECTION = "Main"
TABLE_TYPE_BONUS = 10
CELEBRATION_BONUS = 5
CELEBRATION_WORDS = ("birthday", "anniversary")

# Statuses a table can be offered in.
OFFERABLE_STATUSES = ("available", "finishing")


# ----------------------------- scoring helpers -----------------------------
def _size_fit(table: Table, party: int, reasons: List[str], warnings: List[str]) -> int:
    if table.capacity == party:
        reasons.append("Perfect fit for party size")
        return _SIZE_POINTS["exact"]
    if table.capacity == party + 1:
        reasons.append(f"Fits {party} guests comfortably")
        return _SIZE_POINTS["one_spare"]
    if table.capacity > party:
        reasons.append(f"Can accommodate {party} guests")
        warnings.append(f"Table is sized for {table.capacity} guests")
        return _SIZE_POINTS["larger"]
    warnings.append("Table may be too small")
    return _SIZE_POINTS["too_small"]


def _preference_fit(table: Table, preference: str, reasons: List[str], warnings: List[str]) -> int:
    if preference == "any":
        reasons.append("Guest has no seating preference")
        return _PREFERENCE_POINTS["any"]
    if preference.lower() in table.section.lower():
        reasons.append(f"Matches {preference} preference")
        return _PREFERENCE_POINTS["match"]
    warnings.append(f"Guest prefers {preference} seating")
    return _PREFERENCE_POINTS["mismatch"]


def _availability(table: Table, reasons: List[str], warnings: List[str]) -> int:
    if table.status == "available":
        reasons.append("Available immediately")
    elif table.status == "finishing":
        reasons.append("Will be available soon")
    else:
        warnings.append(f"Table is currently {table.status}")
    return _AVAILABILITY_POINTS.get(table.status, 0)


def is_celebration(reservation: Reservation) -> bool:
    text = (reservation.special_requests or "").lower()
    return any(word in text for word in CELEBRATION_WORDS)


def score_table_for_reservation(table: Table, reservation: Reservation) -> TableRecommendation:
    """Score how well ``table`` suits ``reservation``.

    Returns a :class:`TableRecommendation` whose score lies in ``[0, 100]``.
    Identical inputs always produce identical scores and messages.
    """
    reasons: List[str] = []
    warnings: List[str] = []
    party = reservation.party_size

    score = _size_fit(table, party, reasons, warnings)
    score += _preference_fit(table, reservation.seating_preference, reasons, warnings)
    score += _availability(table, reasons, warnings)

    if reservation.high_chairs:
        if HIGH_CHAIR_SECTION in table.section:
            score += HIGH_CHAIR_NEAR
            reasons.append("Located near high chair storage")
        else:
            score += HIGH_CHAIR_FAR

    if table.shape == "booth" and party <= 4:
        score += TABLE_TYPE_BONUS
        reasons.append("Cozy booth seating")
    elif table.shape == "rectangle" and party >= 6:
        score += TABLE_TYPE_BONUS
        reasons.append("Large table for group")

    if is_celebration(reservation) and (table.shape == "booth" or "Patio" in table.section):
        score += CELEBRATION_BONUS
        reasons.append("Special table for celebration")

    return TableRecommendation(
        table=table,
        score=max(0, min(MAX_SCORE, score)),
        reasons=reasons,
        warnings=warnings,
    )


def match_level(score: int) -> str:
    """Label a score for display."""
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    return "fair"


# ----------------------------- ranking -----------------------------
def candidate_tables(reservation: Reservation, tables: Sequence[Table], available_only: bool = True) -> List[Table]:
    """Tables at the reservation's location, optionally only those that can be offered."""
    out = [t for t in tables if t.location_id == reservation.location_id]
    if available_only:
        out = [t for t in out if t.status in OFFERABLE_STATUSES]
    return out


def recommend_tables(
    reservation: Reservation,
    tables: Sequence[Table],
    available_only: bool = True,
    limit: Optional[int] = None,
) -> List[TableRecommendation]:
    """Rank candidate tables for a reservation, best first.

    Sorting is stable so equal scores keep the input table order.
    """
    candidates = candidate_tables(reservation, tables, available_only)
    ranked = sorted(
        (score_table_for_reservation(t, reservation) for t in candidates),
        key=lambda rec: rec.score,
        reverse=True,
    )
    logger.debug(
        "Ranked %d of %d tables for reservation %s", len(ranked), len(tables), reservation.id
    )
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def best_table(reservation: Reservation, tables: Sequence[Table]) -> Optional[TableRecommendation]:
    """Top recommendation, or ``None`` when no table can be offered."""
    ranked = recommend_tables(reservation, tables, limit=1)
    return ranked[0] if ranked else None
