"""Terminal CLI entrypoint for Mapty."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mapty.ui.controller import FormValues, WorkoutController
from mapty.ui.formatting import workout_summary
from mapty.workout.metrics import InvalidInputError
from mapty.workout.model import WORKOUT_KINDS, Coords, Workout, WorkoutKind
from mapty.workout.store import FileSlotStorage, WorkoutStore


class ConsoleGateway:
    """Prints render commands instead of drawing them."""

    def place_marker(self, coords: Coords, kind: WorkoutKind, description: str) -> None:
        print(f"Marker: {description} at {coords[0]:.5f}, {coords[1]:.5f}")

    def append_list_item(self, workout: Workout) -> None:
        print(workout_summary(workout))

    def center_on(self, coords: Coords) -> None:
        print(f"Centered on {coords[0]:.5f}, {coords[1]:.5f}")

    def show_form(self) -> None:
        pass

    def hide_form(self) -> None:
        pass

    def clear_workouts(self) -> None:
        print("All workouts deleted")

    def alert(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty workout tracker")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch the web UI (NiceGUI) with the workout map",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8089, help="Port for --ui-web")
    parser.add_argument("--zoom", type=int, default=13, help="Map zoom level for --ui-web")
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help="Directory holding stored workouts (default: ~/.mapty)",
    )
    parser.add_argument("--list", action="store_true", help="List stored workouts")
    parser.add_argument("--reset", action="store_true", help="Delete every stored workout")
    parser.add_argument(
        "--add",
        choices=WORKOUT_KINDS,
        default=None,
        help="Log a workout at --lat/--lng",
    )
    parser.add_argument("--lat", type=float, default=None, help="Workout latitude")
    parser.add_argument("--lng", type=float, default=None, help="Workout longitude")
    parser.add_argument("--distance", default=None, help="Distance in km")
    parser.add_argument("--duration", default=None, help="Duration in minutes")
    parser.add_argument("--cadence", default=None, help="Running cadence in steps/min")
    parser.add_argument("--elevation", default=None, help="Cycling elevation gain in meters")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def _warn_skipped(store: WorkoutStore) -> None:
    if store.skipped_entries:
        print(
            f"Warning: {store.skipped_entries} stored workouts could not be read; "
            f"original data kept under '{store.backup_key}'",
            file=sys.stderr,
        )


def run_list(store: WorkoutStore) -> int:
    workouts = store.rehydrate()
    _warn_skipped(store)
    if not workouts:
        print("No workouts stored")
        return 0
    for workout in workouts:
        print(workout_summary(workout))
    return 0


def run_reset(store: WorkoutStore) -> int:
    WorkoutController(store, ConsoleGateway()).reset()
    return 0


def run_add(store: WorkoutStore, args: argparse.Namespace) -> int:
    if args.lat is None or args.lng is None:
        print("Error: --add requires --lat and --lng", file=sys.stderr)
        return 2

    store.rehydrate()
    _warn_skipped(store)
    controller = WorkoutController(store, ConsoleGateway())
    controller.on_map_clicked((args.lat, args.lng))
    try:
        controller.submit(
            FormValues(
                kind=args.add,
                distance=args.distance,
                duration=args.duration,
                cadence=args.cadence,
                elevation_gain=args.elevation,
            )
        )
    except InvalidInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.ui_web:
        from mapty.ui.web_app import run_web_ui

        return run_web_ui(
            storage_dir=args.storage_dir,
            host=args.web_host,
            port=args.web_port,
            zoom=args.zoom,
        )

    store = WorkoutStore(FileSlotStorage(args.storage_dir))
    if args.reset:
        return run_reset(store)
    if args.add is not None:
        return run_add(store, args)
    if args.list:
        return run_list(store)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
