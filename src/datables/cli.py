"""Command line interface for Datables."""
from __future__ import annotations

import argparse
import csv
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Sequence

from .analytics import format_hour, location_analytics
from .comparison import EXPORT_FORMATS, comparison_frame, export_filename, export_report, location_comparison
from .csv_loader import load_reservations, load_tables, load_waitlist
from .models import LOCATION_NAMES, location_name
from .recommend import match_level, recommend_tables

logger = logging.getLogger(__name__)


def _date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {text!r}")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _datetime(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="datables", description="Restaurant front-of-house reports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics.")
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("recommend", help="Rank tables for one reservation.")
    rec.add_argument("--reservations", required=True, help="Path to reservations.csv")
    rec.add_argument("--tables", required=True, help="Path to tables.csv")
    rec.add_argument("--reservation-id", required=True, help="Reservation to seat.")
    rec.add_argument("--include-unavailable", action="store_true",
                     help="Also score occupied, reserved and blocked tables.")
    rec.add_argument("--limit", type=_positive_int, help="Show at most this many tables.")
    rec.add_argument("--out", type=Path, help="Write ranking CSV: table,score,level,reasons,warnings.")

    ana = sub.add_parser("analytics", help="Dashboard figures for one location.")
    ana.add_argument("--reservations", required=True, help="Path to reservations.csv")
    ana.add_argument("--tables", required=True, help="Path to tables.csv")
    ana.add_argument("--waitlist", help="Path to waitlist.csv")
    ana.add_argument("--location", required=True, help="Location id, e.g. tustin.")
    ana.add_argument("--now", type=_datetime, help="Reference time (default: current time).")
    ana.add_argument("--out", type=Path, help="Write the analytics bundle as JSON.")

    cmp_ = sub.add_parser("compare", help="Compare locations over a date range.")
    cmp_.add_argument("--reservations", required=True, help="Path to reservations.csv")
    cmp_.add_argument("--tables", required=True, help="Path to tables.csv")
    cmp_.add_argument("--locations", nargs="+", default=sorted(LOCATION_NAMES),
                      help="Location ids to compare.")
    cmp_.add_argument("--start", type=_date, required=True, help="First day, YYYY-MM-DD.")
    cmp_.add_argument("--end", type=_date, required=True, help="Last day, YYYY-MM-DD.")
    cmp_.add_argument("--format", choices=EXPORT_FORMATS, default="csv", help="Export format.")
    cmp_.add_argument("--out", type=Path,
                      help="Export file or directory. A directory gets the default file name.")
    cmp_.add_argument("--out-report", type=Path, help="Write per-location metrics CSV.")
    return parser


def _run_recommend(args: argparse.Namespace) -> None:
    tables = load_tables(args.tables)
    reservations = load_reservations(args.reservations, {t.id for t in tables})
    reservation = next((r for r in reservations if r.id == args.reservation_id), None)
    if reservation is None:
        raise ValueError(f"Unknown reservation: {args.reservation_id}")

    ranked = recommend_tables(
        reservation, tables, available_only=not args.include_unavailable, limit=args.limit
    )
    print(f"{reservation.guest_name}, party of {reservation.party_size} at {location_name(reservation.location_id)}")
    if not ranked:
        print("No tables available")
    for i, rec in enumerate(ranked):
        best = " [BEST]" if i == 0 else ""
        print(f"Table {rec.table.number} score={rec.score} level={match_level(rec.score)} "
              f"section={rec.table.section}{best}")
        for reason in rec.reasons:
            print(f"  + {reason}")
        for warning in rec.warnings:
            print(f"  ! {warning}")

    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        with args.out.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["table", "score", "level", "reasons", "warnings"])
            for rec in ranked:
                w.writerow([rec.table.number, rec.score, match_level(rec.score),
                            "|".join(rec.reasons), "|".join(rec.warnings)])


def _run_analytics(args: argparse.Namespace) -> None:
    tables = load_tables(args.tables)
    reservations = load_reservations(args.reservations, {t.id for t in tables})
    waitlist = load_waitlist(args.waitlist) if args.waitlist else []

    data = location_analytics(reservations, tables, waitlist, args.location, now=args.now)
    today, week = data["today"], data["week"]
    print(f"[TODAY] {location_name(args.location)} reservations={today['total_reservations']} "
          f"covers={today['total_covers']} avg_party={today['average_party_size']} "
          f"seated={today['currently_seated']} utilization={today['table_utilization']}% "
          f"waitlist={today['waitlist_depth']} avg_wait={today['average_wait_time']}m")
    print(f"[WEEK] reservations={week['total_reservations']} covers={week['total_covers']} "
          f"no_show={week['no_show_rate']}% avg_party={week['average_party_size']}")
    for s in data["source_breakdown"]:
        print(f"[SOURCE] {s['source']} count={s['count']} share={s['percentage']}%")
    for h in data["hourly"]:
        if h["reservations"]:
            print(f"[HOUR] {format_hour(h['hour'])} reservations={h['reservations']} "
                  f"covers={h['covers']} utilization={h['utilization']}%")
    for d in data["trend"]:
        print(f"[DAY] {d['date']} reservations={d['reservations']} covers={d['covers']} "
              f"no_shows={d['no_shows']} walk_ins={d['walk_ins']}")

    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(json.dumps(data, indent=2))


def _run_compare(args: argparse.Namespace) -> None:
    tables = load_tables(args.tables)
    reservations = load_reservations(args.reservations, {t.id for t in tables})

    report = location_comparison(reservations, tables, args.locations, args.start, args.end)
    for loc in report["locations"]:
        print(f"[REPORT] {loc['location_name']} reservations={loc['total_reservations']} "
              f"covers={loc['total_covers']} no_show={loc['no_show_rate']}% "
              f"avg_party={loc['average_party_size']:.1f} utilization={loc['table_utilization']}% "
              f"walk_in={loc['walk_in_rate']}%")
    combined = report["combined"]
    print(f"[COMBINED] reservations={combined['total_reservations']} covers={combined['total_covers']} "
          f"no_show={combined['average_no_show_rate']}% utilization={combined['average_utilization']}%")

    if args.out:
        target = args.out
        if target.is_dir():
            target = target / export_filename(report, args.format)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(export_report(report, args.format))
        logger.info("Wrote %s", target)

    if args.out_report:
        args.out_report.parent.mkdir(parents=True, exist_ok=True)
        comparison_frame(report).to_csv(args.out_report, index=False)


_COMMANDS = {
    "recommend": _run_recommend,
    "analytics": _run_analytics,
    "compare": _run_compare,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point used by ``python -m datables.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        _COMMANDS[args.command](args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
