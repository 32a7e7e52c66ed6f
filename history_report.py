#!/usr/bin/env python3
"""
League History Report CLI

Builds all-time statistics from the league's JSON history files.
Owners come from data/owners-data.json, standings from
data/season_standings-data.json, weekly games from
data/weekly_matchups-data.json and week boundaries from
data/league-metadata.json.

Usage:
    python history_report.py --report records
    python history_report.py --report all-play --season 2006
    python history_report.py --report head-to-head --excel exports/history.xlsx
    python history_report.py --report trends
    python history_report.py --report scatter --season 2006
    python history_report.py --report validate
"""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from leaguehistory import LeagueHistory, export_history_workbook
from leaguehistory.config import get_data_dir, get_data_files, get_league_name
from leaguehistory.logging_config import setup_logging
from leaguehistory.models import RecordMatrix
from leaguehistory.utils import format_record, save_json
from leaguehistory.validators import validate_data_files

REPORTS = (
    'records', 'all-play', 'head-to-head', 'consistency', 'luck', 'champions', 'starters',
    'trends', 'scatter', 'validate',
)


def print_matrix(matrix: RecordMatrix) -> None:
    """Print each team's total record from a matrix."""
    print(f"Weeks counted: {matrix.weeks_count}")
    for rank, name in enumerate(matrix.team_names, 1):
        total = matrix.get_total_record(name)
        print(f"  {rank}. {name}: {format_record(total.wins, total.losses, total.ties)}")


def print_records(history: LeagueHistory) -> list[dict]:
    rows = history.all_time_records()
    print(f"{'Owner':<22} {'W-L-T':>10} {'Win %':>7} {'All-Play %':>10} {'PF':>10}")
    for row in rows:
        record = format_record(row.wins, row.losses, row.ties)
        print(
            f"{row.owner_name:<22} {record:>10} {row.win_pct:>7.2f} "
            f"{row.all_play_win_pct:>10.2f} {row.points_for:>10.2f}"
        )
    return [asdict(row) for row in rows]


def matrix_snapshot(matrix: RecordMatrix) -> dict:
    return {
        'teamNames': matrix.team_names,
        'weeksCount': matrix.weeks_count,
        'records': {
            row: {
                col: asdict(matrix.get_record(row, col))
                for col in matrix.team_names if col != row
            }
            for row in matrix.team_names
        },
    }


def main():
    parser = argparse.ArgumentParser(description="League history statistics and data checks")
    parser.add_argument(
        "--report", "-r",
        choices=REPORTS,
        default="records",
        help="Report to build",
    )
    parser.add_argument(
        "--season", "-y",
        default=None,
        help="Season for single-season reports (all-play, scatter); all-time if omitted",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Path to data directory (defaults to the configured data_dir)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the report as a JSON snapshot to this path",
    )
    parser.add_argument(
        "--excel",
        default=None,
        help="Also export records and matrices to this .xlsx workbook",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for log files (defaults to the configured log_dir)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors",
    )

    args = parser.parse_args()

    setup_logging(
        log_dir=args.log_dir,
        level=logging.WARNING if args.quiet else logging.INFO,
    )

    data_dir = Path(args.data_dir) if args.data_dir else None
    if data_dir is not None and not data_dir.exists():
        print(f"❌ Data directory not found: {data_dir}")
        sys.exit(1)

    if args.report == 'validate':
        file_errors = validate_data_files(data_dir or get_data_dir(), get_data_files())
        if file_errors:
            print("❌ Data files failed validation:")
            for message in file_errors:
                print(f"  - {message}")
            sys.exit(1)

    print(f"📊 {get_league_name()}")
    history = LeagueHistory.from_directory(data_dir)
    snapshot = None

    if args.report == 'records':
        snapshot = print_records(history)

    elif args.report == 'all-play':
        if args.season:
            matrix = history.all_play_matrix(str(args.season))
        else:
            matrix = history.career_all_play_matrix()
        if matrix is None:
            print("⚠️  No usable weekly data for an all-play matrix")
            sys.exit(0)
        print_matrix(matrix)
        snapshot = matrix_snapshot(matrix)

    elif args.report == 'head-to-head':
        matrix = history.head_to_head_matrix()
        if matrix is None:
            print("⚠️  No owners or weekly data for a head-to-head matrix")
            sys.exit(0)
        print_matrix(matrix)
        snapshot = matrix_snapshot(matrix)

    elif args.report == 'consistency':
        rows = history.career_consistency_index()
        for row in rows:
            print(
                f"  {row.owner_name}: IQR {row.average_season_iqr:.2f}, "
                f"std dev {row.average_ppg_std_dev:.2f} over {row.seasons_included} seasons"
            )
        snapshot = [asdict(row) for row in rows]

    elif args.report == 'luck':
        rows = history.career_luck()
        for row in sorted(rows, key=lambda r: r.career_luck, reverse=True):
            print(
                f"  {row.owner_name}: {row.actual_wins} wins vs "
                f"{row.expected_wins:.1f} expected ({row.career_luck:+.1f})"
            )
        snapshot = [asdict(row) for row in rows]

    elif args.report == 'champions':
        rows = history.champions_timeline()
        for row in rows:
            print(f"  {row.year}: {row.owner_name} ({row.team_name})")
        snapshot = [asdict(row) for row in rows]

    elif args.report == 'starters':
        games = history.top_starter_single_game_records()
        seasons = history.top_starter_season_records()
        print("Top single-game starters:")
        for row in games:
            print(f"  {row.points:6.2f}  {row.player_name} ({row.owner_name}, {row.year} week {row.week})")
        print("Top single-season starters:")
        for row in seasons:
            print(f"  {row.points:6.2f}  {row.player_name} ({row.owner_name}, {row.year})")
        snapshot = {
            'singleGame': [asdict(row) for row in games],
            'season': [asdict(row) for row in seasons],
        }

    elif args.report == 'trends':
        trend = history.win_pct_over_time()
        if trend is None:
            print("⚠️  No standings to chart")
            sys.exit(0)
        print("Career win % by season:")
        for series in trend.series:
            cells = [
                f"{point.career_win_pct:6.1f}" if point else "     -"
                for point in series.points
            ]
            print(f"  {series.owner_name:<22} {' '.join(cells)}")
        high_low = history.season_high_low_points()
        print("Regular-season weekly score range:")
        for row in high_low:
            print(f"  {row.label}: {row.min_points:.2f} - {row.max_points:.2f}")
        snapshot = {
            'winPctOverTime': asdict(trend),
            'seasonHighLow': [asdict(row) for row in high_low],
        }

    elif args.report == 'scatter':
        if args.season:
            scatter = history.season_points_scatter(str(args.season))
        else:
            scatter = history.career_points_scatter()
        if scatter is None:
            print("⚠️  No standings for a points scatter")
            sys.exit(0)
        print(f"Average PF {scatter.avg_points_for:.2f}, average PA {scatter.avg_points_against:.2f}")
        for point in scatter.points:
            print(
                f"  {point.name}: PF {point.points_for:.2f}, PA {point.points_against:.2f}, "
                f"diff {point.points_diff:+.2f}, luck {point.luck:+.2f}"
            )
        snapshot = asdict(scatter)

    elif args.report == 'validate':
        report = history.data_quality_report()
        problems = sum(len(messages) for messages in report.values())
        for check, messages in report.items():
            status = "✓" if not messages else f"{len(messages)} issue(s)"
            print(f"{check}: {status}")
            for message in messages:
                print(f"  - {message}")
        snapshot = report
        if problems:
            print(f"\n{problems} data quality issue(s) found")

    if history.diagnostics.entries:
        counts = ", ".join(f"{kind}={count}" for kind, count in history.diagnostics.summary().items())
        print(f"\nDiagnostics: {counts}")

    if args.output and snapshot is not None:
        save_json(args.output, snapshot)
        print(f"Snapshot written: {args.output}")

    if args.excel:
        season_matrix = history.all_play_matrix(str(args.season)) if args.season else None
        path = export_history_workbook(
            args.excel,
            history.all_time_records(),
            head_to_head=history.head_to_head_matrix(),
            all_play=season_matrix or history.career_all_play_matrix(),
            consistency=history.career_consistency_index(),
        )
        print(f"Workbook written: {path}")


if __name__ == "__main__":
    main()
