#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import math
import random
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from handgest.streaming.protocol import Sample, encode_packed_batch
from handgest.utils import set_seed

# (ax, ay, az) centres per phase; hand up/down sit inside the default bands.
_PHASES = {
    "idle": (0.0, 0.0, 9.8),
    "up": (9.5, -2.5, 3.7),
    "down": (-10.0, -3.0, 1.5),
}


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate fake packed IMU envelopes (for local smoke tests).")
    p.add_argument("--sample-rate-hz", type=float, default=50.0)
    p.add_argument("--batch-size", type=int, default=10)
    p.add_argument("--phase-seconds", type=float, default=2.0, help="Duration of each idle/up/down phase.")
    p.add_argument("--cycles", type=int, default=2, help="Number of idle -> up -> down cycles.")
    p.add_argument("--swing-hz", type=float, default=1.5, help="Gyro x swing frequency while the hand is up.")
    p.add_argument("--swing-amplitude", type=float, default=900.0)
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--realtime", action="store_true", help="Sleep between batches to simulate real-time streaming.")
    return p.parse_args()


def main() -> int:
    args = _parse_args()
    set_seed(args.seed)

    sr = float(args.sample_rate_hz)
    if sr <= 0 or args.batch_size <= 0:
        raise SystemExit("--sample-rate-hz and --batch-size must be > 0")
    dt = 1.0 / sr
    per_phase = max(1, int(round(args.phase_seconds * sr)))

    t0_ms = int(time.time() * 1000)
    i = 0
    batch: list[Sample] = []
    for _ in range(int(args.cycles)):
        for phase in ("idle", "up", "down"):
            cx, cy, cz = _PHASES[phase]
            for _k in range(per_phase):
                t = i * dt
                gx = random.uniform(-50.0, 50.0)
                if phase == "up":
                    gx += args.swing_amplitude * math.sin(2.0 * math.pi * args.swing_hz * t)

                batch.append(
                    Sample(
                        gx=round(gx, 1),
                        gy=round(random.uniform(-50.0, 50.0), 1),
                        gz=round(random.uniform(-50.0, 50.0), 1),
                        ax=cx + random.uniform(-0.2, 0.2),
                        ay=cy + random.uniform(-0.2, 0.2),
                        az=cz + random.uniform(-0.2, 0.2),
                        ts=t0_ms + int(round(t * 1000)),
                    )
                )
                i += 1

                if len(batch) >= args.batch_size:
                    sys.stdout.write(json.dumps({"data": encode_packed_batch(batch)}) + "\n")
                    sys.stdout.flush()
                    batch = []
                    if args.realtime:
                        time.sleep(dt * args.batch_size)

    if batch:
        sys.stdout.write(json.dumps({"data": encode_packed_batch(batch)}) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
