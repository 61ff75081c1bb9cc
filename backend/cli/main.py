"""Command line entrypoint for the workout map."""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from backend.core.config import SessionConfig
from backend.core.logger import setup_logger
from backend.workout.export import export_workouts_csv, export_workouts_json
from backend.workout.render import build_entry
from backend.workout.storage import JsonFileStorage, StorageError, WorkoutRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Map-based running and cycling log")
    parser.add_argument("--host", default="127.0.0.1", help="Host bind for the web UI")
    parser.add_argument("--port", type=int, default=8088, help="Port for the web UI")
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Storage file (default: ~/.workout-map/storage.json)",
    )
    parser.add_argument(
        "--geolocation-timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for the browser position before disabling the map",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Fail loudly on session invariant violations",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (DEBUG, INFO, ...)")
    parser.add_argument("--log-file", default=None, help="Optional rotating log file")
    parser.add_argument("--list", action="store_true", help="Print saved workouts and exit")
    parser.add_argument(
        "--export-csv",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write saved workouts to a CSV file and exit",
    )
    parser.add_argument(
        "--export-json",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write saved workouts to a JSON file and exit",
    )
    parser.add_argument("--reset", action="store_true", help="Delete all saved workouts")
    return parser


def run_list(repository: WorkoutRepository) -> int:
    stored = repository.load()
    if not stored.records:
        print("No saved workouts")
        return 0

    for record in stored.records:
        entry = build_entry(record)
        metric = entry.details[2]
        print(
            f"{record.description:<24} {record.distance_km:>7.2f} km "
            f"{record.duration_min:>6.0f} min {metric.text:>6} {metric.unit:<6} "
            f"clicks={stored.clicks.get(record.id, 0)}"
        )
    return 0


def run_export(repository: WorkoutRepository, out_path: Path, fmt: str = "csv") -> int:
    stored = repository.load()
    if fmt == "json":
        export_workouts_json(stored.records, stored.clicks, out_path)
    else:
        export_workouts_csv(stored.records, stored.clicks, out_path)
    print(f"Exported {len(stored.records)} workouts to {out_path}")
    return 0


def run_reset(repository: WorkoutRepository) -> int:
    try:
        repository.clear()
    except StorageError as exc:
        logger.error(f"Could not clear saved workouts: {exc}")
        return 1
    print("Saved workouts cleared")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(level=args.log_level.upper(), log_file=args.log_file)

    config = SessionConfig(
        geolocation_timeout_sec=args.geolocation_timeout if args.geolocation_timeout > 0 else None,
        debug=args.debug,
    )
    repository = WorkoutRepository(JsonFileStorage(args.data_file), key=config.storage_key)

    if args.reset:
        return run_reset(repository)
    if args.list:
        return run_list(repository)
    if args.export_csv is not None:
        return run_export(repository, args.export_csv)
    if args.export_json is not None:
        return run_export(repository, args.export_json, fmt="json")

    from backend.ui.web_app import run_web_ui

    return run_web_ui(
        host=args.host,
        port=args.port,
        data_file=args.data_file,
        config=config,
    )


if __name__ == "__main__":
    raise SystemExit(main())
