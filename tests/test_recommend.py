"""
Tests for table recommendation scoring.
"""

import pathlib
import sys
from datetime import datetime

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from datables.models import Reservation, Table
from datables.recommend import (
    best_table,
    match_level,
    recommend_tables,
    score_table_for_reservation,
)


def _reservation(**overrides):
    data = dict(
        id="r1",
        location_id="tustin",
        guest_name="John Smith",
        guest_phone="+17145551234",
        party_size=4,
        date_time=datetime(2026, 10, 15, 18, 30),
        seating_preference="any",
    )
    data.update(overrides)
    return Reservation(**data)


def _table(**overrides):
    data = dict(
        id="t1",
        location_id="tustin",
        number="1",
        capacity=4,
        shape="square",
        status="available",
        section="Main Dining",
    )
    data.update(overrides)
    return Table(**data)


class TestScoreTable:
    """Component scores of the weighted sum."""

    def test_exact_fit_any_preference_available(self):
        rec = score_table_for_reservation(_table(), _reservation())
        # 30 size + 15 no preference + 20 available
        assert rec.score == 65
        assert "Perfect fit for party size" in rec.reasons
        assert "Guest has no seating preference" in rec.reasons
        assert "Available immediately" in rec.reasons
        assert rec.warnings == []

    def test_party_size_tiers(self):
        res = _reservation(party_size=4)
        scores = {
            cap: score_table_for_reservation(_table(capacity=cap), res).score
            for cap in (2, 4, 5, 8)
        }
        assert scores[4] - scores[5] == 5
        assert scores[5] - scores[8] == 10
        assert scores[8] - scores[2] == 10

    def test_oversized_and_undersized_warnings(self):
        res = _reservation(party_size=4)
        big = score_table_for_reservation(_table(capacity=8), res)
        small = score_table_for_reservation(_table(capacity=2), res)
        assert "Table is sized for 8 guests" in big.warnings
        assert "Can accommodate 4 guests" in big.reasons
        assert "Table may be too small" in small.warnings

    def test_preference_match_is_case_insensitive(self):
        rec = score_table_for_reservation(_table(section="Patio"), _reservation(seating_preference="patio"))
        assert rec.score == 30 + 25 + 20
        assert "Matches patio preference" in rec.reasons

    def test_preference_mismatch_warns(self):
        rec = score_table_for_reservation(_table(section="Bar"), _reservation(seating_preference="patio"))
        assert rec.score == 30 + 5 + 20
        assert "Guest prefers patio seating" in rec.warnings

    def test_availability_points(self):
        res = _reservation()
        finishing = score_table_for_reservation(_table(status="finishing"), res)
        occupied = score_table_for_reservation(_table(status="occupied"), res)
        assert finishing.score == 30 + 15 + 15
        assert "Will be available soon" in finishing.reasons
        assert occupied.score == 30 + 15
        assert "Table is currently occupied" in occupied.warnings

    def test_high_chairs_prefer_main_section(self):
        res = _reservation(high_chairs=1)
        main = score_table_for_reservation(_table(section="Main Dining"), res)
        bar = score_table_for_reservation(_table(section="Bar"), res)
        assert main.score - bar.score == 10
        assert "Located near high chair storage" in main.reasons

    def test_table_type_bonus(self):
        booth = score_table_for_reservation(_table(shape="booth"), _reservation(party_size=4))
        big_booth = score_table_for_reservation(
            _table(shape="booth", capacity=6), _reservation(party_size=6)
        )
        rect = score_table_for_reservation(
            _table(shape="rectangle", capacity=6), _reservation(party_size=6)
        )
        assert "Cozy booth seating" in booth.reasons
        assert booth.score == 75
        assert big_booth.score == 65
        assert "Large table for group" in rect.reasons
        assert rect.score == 75

    def test_celebration_bonus(self):
        res = _reservation(special_requests="Birthday celebration, need cake")
        booth = score_table_for_reservation(_table(shape="booth"), res)
        patio = score_table_for_reservation(_table(section="Patio"), res)
        plain = score_table_for_reservation(_table(), res)
        assert "Special table for celebration" in booth.reasons
        assert patio.score == plain.score + 5
        assert "Special table for celebration" not in plain.reasons

    def test_score_is_capped_at_100(self):
        res = _reservation(
            party_size=4,
            seating_preference="inside",
            high_chairs=1,
            special_requests="Anniversary",
        )
        table = _table(shape="booth", section="Main Inside")
        rec = score_table_for_reservation(table, res)
        # 30 + 25 + 20 + 15 + 10 + 5 = 105 before the cap
        assert rec.score == 100

    def test_deterministic(self):
        res = _reservation(special_requests="anniversary", high_chairs=2)
        table = _table(shape="booth")
        first = score_table_for_reservation(table, res)
        second = score_table_for_reservation(table, res)
        assert first == second


def test_better_capacity_never_scores_lower():
    res = _reservation(party_size=3)
    tiers = [_table(capacity=2), _table(capacity=6), _table(capacity=4), _table(capacity=3)]
    scores = [score_table_for_reservation(t, res).score for t in tiers]
    assert scores == sorted(scores)
    assert all(0 <= s <= 100 for s in scores)


def test_recommend_tables_orders_and_filters():
    res = _reservation(seating_preference="inside", special_requests="Birthday celebration")
    tables = [
        _table(id="t1", number="1", capacity=2, shape="circle"),
        _table(id="t2", number="12", capacity=4, shape="booth"),
        _table(id="t3", number="8", capacity=4, section="Patio"),
        _table(id="t4", number="5+6", capacity=6, shape="rectangle"),
        _table(id="t5", number="20", status="occupied"),
        _table(id="s1", number="1", location_id="santa-ana"),
    ]
    ranked = recommend_tables(res, tables)
    assert [r.table.id for r in ranked] == ["t2", "t3", "t4", "t1"]
    assert [r.score for r in ranked] == [70, 60, 40, 30]

    everything = recommend_tables(res, tables, available_only=False)
    assert {r.table.id for r in everything} == {"t1", "t2", "t3", "t4", "t5"}

    assert len(recommend_tables(res, tables, limit=2)) == 2


def test_recommend_ties_keep_input_order():
    res = _reservation()
    tables = [_table(id="a"), _table(id="b"), _table(id="c")]
    assert [r.table.id for r in recommend_tables(res, tables)] == ["a", "b", "c"]


def test_best_table_none_when_nothing_offered():
    res = _reservation()
    assert best_table(res, [_table(status="blocked")]) is None
    assert best_table(res, []) is None
    assert best_table(res, [_table(id="x")]).table.id == "x"


def test_match_level():
    assert match_level(100) == "excellent"
    assert match_level(80) == "excellent"
    assert match_level(79) == "good"
    assert match_level(60) == "good"
    assert match_level(59) == "fair"
