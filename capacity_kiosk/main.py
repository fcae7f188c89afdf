"""
Cell Capacity Kiosk — Main Entry Point
======================================

MODES:
  (default)     Kiosk window: start -> analysis reveal -> cell results
  --headless    Run the analysis reveal in the terminal only

SERIES:
  --series voltage-time       canned 100-point trace for --cell (50 s)
  --series current-voltage    IV sweep from --csv, sorted on voltage (25 s)

Run:
  python3 -m capacity_kiosk.main
  python3 -m capacity_kiosk.main --series current-voltage --csv sweep.csv
  python3 -m capacity_kiosk.main --headless --duration 10 --verbose
"""

import argparse
import math
import sys
import time
from pathlib import Path

from capacity_kiosk.chart_data import load_csv_series, make_series, voltage_time_series
from capacity_kiosk.config import (
    CELL_NUMBERS, FRAME_INTERVAL_MS, INITIAL_SAMPLE_COUNT,
    SERIES_PRESETS, VERBOSE_REVEAL,
)
from capacity_kiosk.frame_clock import ManualFrameClock
from capacity_kiosk.reveal import RevealScheduler


def build_series(args):
    """Resolve the series to reveal from CLI args. Exits on user error."""
    preset = SERIES_PRESETS[args.series]
    if args.csv:
        csv_path = Path(args.csv).expanduser().resolve()
        if not csv_path.exists():
            print(f"ERROR: CSV file not found: {csv_path}")
            sys.exit(1)
        try:
            series = load_csv_series(csv_path, sort_by_x=preset["sort_by_x"])
        except ValueError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        if not series:
            print(f"ERROR: CSV file contains no rows: {csv_path}")
            sys.exit(1)
        print(f"Loaded {len(series)} points from {csv_path}")
        return series

    if args.series == "current-voltage":
        print("ERROR: --series current-voltage needs a recorded sweep (--csv FILE)")
        sys.exit(1)

    series = voltage_time_series(args.cell)
    if preset["sort_by_x"]:
        series = make_series([s.x for s in series], [s.y for s in series], sort_by_x=True)
    return series


def run_headless(series, duration_ms, initial_sample_count, frame_ms, verbose=False):
    """Drive the reveal from a wall-clock loop. Returns the scheduler."""
    clock = ManualFrameClock()
    done = []

    scheduler = RevealScheduler(
        series, duration_ms, clock,
        on_complete=lambda: done.append(True),
        initial_sample_count=initial_sample_count,
        verbose=verbose,
        name="headless",
    )
    scheduler.start()
    last_pct = -1
    try:
        while not done:
            loop_start = time.monotonic()
            clock.tick(loop_start * 1000.0)
            pct = round(scheduler.progress * 100)
            if not verbose and pct // 10 != last_pct // 10:
                print(f"[Reveal] {scheduler.revealed_count}/{len(series)} ({pct}%)")
                last_pct = pct
            # Maintain frame timing
            sleep_time = frame_ms / 1000.0 - (time.monotonic() - loop_start)
            if sleep_time > 0:
                time.sleep(sleep_time)
    finally:
        scheduler.stop()
    return scheduler


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Real Time Cell Capacity Estimation — Kiosk Demo"
    )
    parser.add_argument(
        "--series", choices=sorted(SERIES_PRESETS), default="voltage-time",
        help="Which measurement series the analysis screen reveals"
    )
    parser.add_argument(
        "--csv", type=str, metavar="FILE",
        help="Replay a recorded sweep (voltage_v,current_a columns)"
    )
    parser.add_argument(
        "--cell", type=int, choices=CELL_NUMBERS, default=1,
        help="Cell whose voltage trace is revealed (voltage-time only)"
    )
    parser.add_argument(
        "--duration", type=float, default=None,
        help="Reveal duration in seconds (default: preset duration)"
    )
    parser.add_argument(
        "--initial-points", type=int, default=INITIAL_SAMPLE_COUNT,
        help=f"Points shown before the animation begins (default: {INITIAL_SAMPLE_COUNT})"
    )
    parser.add_argument(
        "--frame-ms", type=int, default=FRAME_INTERVAL_MS,
        help=f"Frame interval in ms (default: {FRAME_INTERVAL_MS})"
    )
    parser.add_argument(
        "--headless", action="store_true",
        help="Run the reveal in the terminal without a window"
    )
    parser.add_argument(
        "--verbose", action="store_true", default=VERBOSE_REVEAL,
        help="Print per-frame reveal progress and screen changes"
    )
    args = parser.parse_args(argv)

    if args.duration is not None and not math.isfinite(args.duration):
        print(f"ERROR: --duration must be a finite number of seconds, got {args.duration}")
        sys.exit(1)

    series = build_series(args)
    preset = SERIES_PRESETS[args.series]
    duration_ms = args.duration * 1000.0 if args.duration is not None else preset["duration_ms"]

    print("=" * 60)
    print("  Real Time Cell Capacity Estimation — Kiosk")
    print(f"  Series: {preset['title']} ({len(series)} points)")
    print(f"  Reveal: {duration_ms / 1000:.1f}s, {args.initial_points} initial points")
    print(f"  Mode: {'Headless' if args.headless else 'Kiosk window'}")
    print("=" * 60)
    print()

    if args.headless:
        run_headless(series, duration_ms, args.initial_points, args.frame_ms, args.verbose)
        print("[Reveal] Analysis complete.")
        return

    from capacity_kiosk.dashboard.app import KioskWindow

    print("Launching kiosk... (Enter to analyse, 1-5 for results, close window to exit)")
    print()
    window = KioskWindow(
        series,
        preset=args.series,
        duration_ms=duration_ms,
        initial_sample_count=args.initial_points,
        frame_interval_ms=args.frame_ms,
        verbose=args.verbose,
    )
    try:
        window.run()
    finally:
        window.teardown()


if __name__ == "__main__":
    main()
