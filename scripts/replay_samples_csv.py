#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from handgest.export.csv_export import read_samples_csv
from handgest.streaming.config import default_engine_config, load_engine_config
from handgest.streaming.engine import GestureEngine
from handgest.streaming.protocol import encode_packed_batch


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Replay an exported samples CSV through a fresh engine and print mode changes.")
    p.add_argument("csv_path", help="CSV with columns ts,gx,gy,gz,ax,ay,az (e.g. an imu_samples_*.csv export).")
    p.add_argument("--config", default=None)
    p.add_argument("--batch-size", type=int, default=10)
    return p.parse_args()


def main() -> int:
    args = _parse_args()
    if args.batch_size <= 0:
        raise SystemExit("--batch-size must be > 0")

    samples = read_samples_csv(args.csv_path)
    if not samples:
        raise SystemExit(f"No samples in {args.csv_path}")

    config = load_engine_config(args.config) if args.config else default_engine_config()
    segments: list[int] = []
    engine = GestureEngine(config, segment_exporter=lambda seg: segments.append(len(seg)))
    engine.reset_points()

    mode = engine.mode
    for start in range(0, len(samples), args.batch_size):
        chunk = samples[start : start + args.batch_size]
        engine.ingest_append(encode_packed_batch(chunk, accel_scale=config.accel_scale))
        if engine.mode is not mode:
            mode = engine.mode
            print(json.dumps({"ts": chunk[-1].ts, "mode": mode.value, "message": engine.latest_classification().message}))

    points = engine.points()
    print(
        json.dumps(
            {
                "samples": len(samples),
                "segments": segments,
                "blue_points": points.blue,
                "red_points": points.red,
                "final_mode": engine.mode.value,
            }
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
