#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from handgest.export.csv_export import CsvExporter
from handgest.streaming.config import EngineConfig, default_engine_config, load_engine_config
from handgest.streaming.engine import GestureEngine
from handgest.transport.http_app import create_app


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Receive packed IMU batches, recognize hand gestures, count gyro swings.")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read JSON envelopes (one per line) from stdin instead of serving HTTP (useful for local smoke tests).",
    )
    parser.add_argument("--replace", action="store_true", help="With --stdin: treat every line as a full-history replace.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)

    parser.add_argument("--config", default=None, help="Gesture config JSON. Default: built-in hand up/down bands.")
    parser.add_argument("--export-dir", default=None, help="Directory for gesture segment / history / points CSVs.")

    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--quiet", action="store_true", help="Reduce console output.")
    return parser.parse_args()


def _run_stdin(engine: GestureEngine, *, replace: bool, quiet: bool) -> None:
    for line in sys.stdin:
        if not line.strip():
            continue
        result = engine.handle_envelope(line, replace=replace)
        if quiet:
            continue
        points = engine.points()
        out = {
            **result.to_dict(),
            "mode": engine.mode.value,
            "message": engine.latest_classification().message,
            "blue_points": points.blue,
            "red_points": points.red,
        }
        print(json.dumps(out))


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")

    try:
        config: EngineConfig = load_engine_config(args.config) if args.config else default_engine_config()
    except (OSError, ValueError) as e:
        raise SystemExit(f"Bad config: {e}")

    exporter = CsvExporter(args.export_dir) if args.export_dir else None
    engine = GestureEngine(config, segment_exporter=exporter)
    engine.reset_points()

    if not args.quiet:
        if args.stdin:
            print("Input: stdin (one JSON envelope per line)")
        else:
            print(f"Serving HTTP on {args.host}:{args.port}")
        print(f"Gestures: {', '.join(g.name for g in config.gestures)}")
        triggers = {name: effect.value for name, effect in config.transitions.items()}
        print(f"Triggers: {triggers}")
        print(f"Point threshold: |gx| > {config.point_threshold:g}")
        print(f"Export dir: {args.export_dir or '(none)'}")
        print()

    try:
        if args.stdin:
            _run_stdin(engine, replace=args.replace, quiet=args.quiet)
        else:
            app = create_app(engine, exporter=exporter)
            app.run(host=args.host, port=args.port, threaded=True)
    except KeyboardInterrupt:
        if not args.quiet:
            print("\nStopping…")
    finally:
        points = engine.points()
        if not args.quiet:
            print(f"Blue: {points.blue} | Red: {points.red}")
        if exporter is not None:
            exporter.write_points(points)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
