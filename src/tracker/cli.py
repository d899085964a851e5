"""CLI entry point for validating, converting and summarizing sprint data.

Usage:
  python -m src.tracker validate <file> [--settings settings.yaml]
  python -m src.tracker export <file.json> --format csv|json [--output PATH | --output-dir DIR]
  python -m src.tracker import <file> [--output PATH]
  python -m src.tracker metrics <file> [--trend-window 3]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sprint data tracker CLI")
    parser.add_argument("--settings", default=None, help="YAML settings file with default config")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate a CSV or JSON data file")
    validate_parser.add_argument("file", help="Data file (.csv or .json)")

    export_parser = subparsers.add_parser("export", help="Export a dataset as CSV or JSON")
    export_parser.add_argument("file", help="Data file (.csv or .json)")
    export_parser.add_argument("--format", choices=["csv", "json"], default="csv", help="Output format")
    export_parser.add_argument("--output", default=None, help="Output path")
    export_parser.add_argument(
        "--output-dir", default=".", help="Directory for a generated filename (when --output is not set)"
    )

    import_parser = subparsers.add_parser("import", help="Import a data file and print normalized JSON")
    import_parser.add_argument("file", help="Data file (.csv or .json)")
    import_parser.add_argument("--output", default=None, help="Write JSON here instead of stdout")

    metrics_parser = subparsers.add_parser("metrics", help="Show dashboard and forecasting metrics")
    metrics_parser.add_argument("file", help="Data file (.csv or .json)")
    metrics_parser.add_argument("--trend-window", type=int, default=3, help="Sprints per trend window")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_FAILURE)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    defaults = _load_settings(args.settings)
    data = asyncio.run(_load_data(args.file, defaults))

    if args.command == "validate":
        print(f"Valid: {len(data.sprints)} sprint(s), {len(data.config.team_members)} team member(s)")
    elif args.command == "export":
        _export_command(args, data)
    elif args.command == "import":
        _import_command(args, data)
    elif args.command == "metrics":
        _metrics_command(args, data)


def _load_settings(path: str | None):
    from src.tracker.config import load_defaults
    from src.tracker.exceptions import ConfigError
    from src.tracker.models import default_config

    if path is None:
        return default_config()
    try:
        return load_defaults(path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)


def _print_error(error) -> None:
    from src.errors.recovery import format_error_for_display

    display = format_error_for_display(error)
    print(f"{display['title']}: {display['message']}", file=sys.stderr)
    for suggestion in display["suggestions"]:
        print(f"  - {suggestion}", file=sys.stderr)


async def _load_data(file: str, defaults):
    from src.serialization.files import import_file

    result = await import_file(file, defaults)
    if not result.success:
        _print_error(result.error)
        sys.exit(EXIT_FAILURE)
    return result.data


def _write(text: str, output: Path) -> None:
    from src.errors.boundary import with_error_handling

    result = with_error_handling(lambda: output.write_text(text, encoding="utf-8"), "write_output")
    if not result.success:
        _print_error(result.error)
        sys.exit(EXIT_FAILURE)


def _export_command(args, data) -> None:
    from src.serialization.csv_codec import encode_csv
    from src.serialization.files import generate_filename
    from src.serialization.json_codec import encode_json

    text = encode_csv(data.sprints) if args.format == "csv" else encode_json(data)
    if args.output:
        output = Path(args.output)
    else:
        output = Path(args.output_dir) / generate_filename("sprint-data", args.format)
    _write(text, output)
    print(f"Exported {len(data.sprints)} sprint(s) to {output}")


def _import_command(args, data) -> None:
    from src.serialization.json_codec import encode_json

    text = encode_json(data)
    if args.output:
        _write(text, Path(args.output))
        print(f"Imported {len(data.sprints)} sprint(s) into {args.output}")
    else:
        print(text)


def _metrics_command(args, data) -> None:
    from src.metrics.forecasting import (
        calculate_dashboard_metrics,
        calculate_velocity_trend,
        calculate_working_hours,
        get_forecasting_insights,
    )

    dashboard = calculate_dashboard_metrics(data.sprints, data.config)
    status = dashboard.current_sprint_status
    print(f"Current sprint: {status.sprint_name}")
    print(f"  Completed: {status.points_completed:g}/{status.planned_points:g} points ({status.percent_complete:.1f}%)")
    print(f"Average velocity: {dashboard.average_velocity:.3f} points/hour")
    print(f"Forecasted capacity: {dashboard.forecasted_capacity:.1f} points")
    print(f"Capacity utilization: {dashboard.capacity_utilization:.1f}%")
    print(f"Completion rate: {dashboard.sprint_completion_rate:.1f}%")

    trend = calculate_velocity_trend(data.sprints, args.trend_window)
    print(f"Velocity trend: {trend.trend} ({trend.trend_strength}, {trend.change_percent:+.1f}%)")

    upcoming = (
        calculate_working_hours(data.config.team_members)
        if data.config.team_members
        else (data.sprints[-1].working_hours if data.sprints else 0)
    )
    insights = get_forecasting_insights(
        data.sprints, upcoming, data.config.velocity_calculation_sprints
    )
    print(f"Forecast data quality: {insights.data_quality} ({insights.sprints_used} sprint(s))")
    for warning in insights.warnings:
        print(f"  ! {warning}")
    for recommendation in insights.recommendations:
        print(f"  > {recommendation}")


if __name__ == "__main__":
    main()
