from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import pandas as pd

from handgest.streaming.points import Points
from handgest.streaming.protocol import Sample
from handgest.utils import ensure_dir, timestamped_name

logger = logging.getLogger(__name__)

SAMPLE_FIELDS = ["ts", "gx", "gy", "gz", "ax", "ay", "az"]
POINT_FIELDS = ["blue_points", "red_points"]


class CsvExporter:
    """Writes sample sequences and point totals as timestamped CSV files.

    Instances are callable with a list of samples, so one can be passed
    straight to GestureEngine(segment_exporter=...).
    """

    def __init__(self, out_dir: str | Path, *, segment_prefix: str = "gesture_segment"):
        self.out_dir = Path(out_dir)
        self.segment_prefix = segment_prefix

    def _create(self, prefix: str) -> tuple[Path, TextIO]:
        """Create a new, uniquely named file; never reuses an existing name."""

        base = ensure_dir(self.out_dir) / timestamped_name(prefix)
        path = base
        n = 1
        while True:
            try:
                return path, path.open("x", newline="", encoding="utf-8")
            except FileExistsError:
                path = base.with_name(f"{base.stem}_{n}{base.suffix}")
                n += 1

    def write_samples(self, samples: Sequence[Sample], *, prefix: str) -> Path:
        if not samples:
            raise ValueError("No samples to export")

        path, fh = self._create(prefix)
        with fh:
            writer = csv.DictWriter(fh, fieldnames=SAMPLE_FIELDS)
            writer.writeheader()
            for s in samples:
                writer.writerow({"ts": s.ts, "gx": s.gx, "gy": s.gy, "gz": s.gz, "ax": s.ax, "ay": s.ay, "az": s.az})

        logger.info("Exported %d samples to %s", len(samples), path)
        return path

    def write_points(self, points: Points) -> Path:
        path, fh = self._create("points")
        with fh:
            writer = csv.DictWriter(fh, fieldnames=POINT_FIELDS)
            writer.writeheader()
            writer.writerow({"blue_points": points.blue, "red_points": points.red})

        logger.info("Exported points blue=%d red=%d to %s", points.blue, points.red, path)
        return path

    def __call__(self, segment: list[Sample]) -> Path:
        return self.write_samples(segment, prefix=self.segment_prefix)


def read_samples_csv(path: str | Path) -> list[Sample]:
    """Load a file written by CsvExporter.write_samples back into samples."""

    df = pd.read_csv(path, float_precision="round_trip")
    missing = [c for c in SAMPLE_FIELDS if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}")
    df = df.dropna(subset=SAMPLE_FIELDS).copy()
    for col in SAMPLE_FIELDS:
        df[col] = pd.to_numeric(df[col], errors="raise")

    return [
        Sample(
            gx=float(row.gx),
            gy=float(row.gy),
            gz=float(row.gz),
            ax=float(row.ax),
            ay=float(row.ay),
            az=float(row.az),
            ts=int(row.ts),
        )
        for row in df.itertuples(index=False)
    ]
