import csv
import json
import pathlib
import sys

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from datables import cli

DATA = pathlib.Path(__file__).parent / "data"
INPUTS = ["--reservations", str(DATA / "reservations.csv"), "--tables", str(DATA / "tables.csv")]


def test_recommend_flow(tmp_path, capsys):
    out = tmp_path / "ranking.csv"
    cli.main(["recommend", *INPUTS, "--reservation-id", "r3", "--out", str(out)])

    printed = capsys.readouterr().out
    assert "Maria Garcia, party of 6 at Tustin" in printed
    assert "Table 5+6 score=80 level=excellent section=Main Dining [BEST]" in printed

    with out.open() as f:
        rows = list(csv.DictReader(f))
    assert [r["table"] for r in rows][0] == "5+6"
    assert len(rows) == 4
    scores = [int(r["score"]) for r in rows]
    assert scores == sorted(scores, reverse=True)


def test_analytics_flow(tmp_path, capsys):
    out = tmp_path / "analytics.json"
    cli.main([
        "analytics", *INPUTS,
        "--waitlist", str(DATA / "waitlist.csv"),
        "--location", "tustin",
        "--now", "2026-10-15T21:00:00",
        "--out", str(out),
    ])
    printed = capsys.readouterr().out
    assert "[TODAY] Tustin reservations=3 covers=12" in printed
    assert "waitlist=2 avg_wait=23m" in printed
    assert "[WEEK] reservations=5 covers=23 no_show=20% avg_party=4.6" in printed
    assert "[HOUR] 6:00 PM reservations=2 covers=6 utilization=100%" in printed

    data = json.loads(out.read_text())
    assert data["today"]["currently_seated"] == 4
    assert data["today"]["table_utilization"] == 33
    assert {s["source"]: s["percentage"] for s in data["source_breakdown"]}["ios-app"] == 40


def test_compare_flow(tmp_path, capsys):
    report_csv = tmp_path / "report.csv"
    cli.main([
        "compare", *INPUTS,
        "--locations", "tustin", "santa-ana",
        "--start", "2026-10-13", "--end", "2026-10-15",
        "--format", "json",
        "--out", str(tmp_path),
        "--out-report", str(report_csv),
    ])
    printed = capsys.readouterr().out
    assert "[REPORT] Tustin reservations=5 covers=23" in printed
    assert "[COMBINED] reservations=7 covers=30 no_show=35% utilization=29%" in printed

    exported = tmp_path / "analytics-comparison-2026-10-13-to-2026-10-15.json"
    assert json.loads(exported.read_text())["combined"]["total_covers"] == 30

    with report_csv.open() as f:
        rows = list(csv.DictReader(f))
    assert [r["location_name"] for r in rows] == ["Tustin", "Santa Ana"]


def test_unknown_reservation_exits_with_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["recommend", *INPUTS, "--reservation-id", "nope"])
    assert exc.value.code == 2
    assert "Unknown reservation: nope" in capsys.readouterr().err


@pytest.mark.parametrize("limit", ["0", "-3", "two"])
def test_limit_must_be_positive(limit, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["recommend", *INPUTS, "--reservation-id", "r3", "--limit", limit])
    assert exc.value.code == 2
    assert "--limit" in capsys.readouterr().err
