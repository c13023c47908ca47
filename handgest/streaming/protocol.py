from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "|"
FIELD_SEPARATOR = ","
RECORD_ARITY = 7

# Fixed detail strings returned to callers of the ingestion endpoints.
DETAIL_INVALID_JSON = "Invalid JSON"
DETAIL_EMPTY_DATA = "Empty data"
DETAIL_NO_VALID_SAMPLES = "No valid samples"


class PayloadError(ValueError):
    """A batch-level rejection. `detail` is one of the DETAIL_* strings."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class Sample:
    gx: float
    gy: float
    gz: float
    ax: float
    ay: float
    az: float
    ts: int

    def as_row(self) -> tuple[float, float, float, float, float, float, int]:
        return (self.gx, self.gy, self.gz, self.ax, self.ay, self.az, self.ts)


@dataclass(frozen=True)
class ParsedBatch:
    samples: list[Sample]
    dropped: int


def _to_finite(text: str) -> float:
    v = float(text)
    if not math.isfinite(v):
        raise ValueError(f"non-finite value: {text!r}")
    return v


def _parse_record(record: str, *, accel_scale: float) -> Sample:
    parts = record.split(FIELD_SEPARATOR)
    if len(parts) != RECORD_ARITY:
        raise ValueError(f"expected {RECORD_ARITY} fields, got {len(parts)}")

    gx, gy, gz, raw_ax, raw_ay, raw_az = (_to_finite(p) for p in parts[:6])
    ts = int(parts[6])

    return Sample(
        gx=gx,
        gy=gy,
        gz=gz,
        ax=raw_ax / accel_scale,
        ay=raw_ay / accel_scale,
        az=raw_az / accel_scale,
        ts=ts,
    )


def parse_packed_batch(packed: str, *, accel_scale: float = 100.0) -> ParsedBatch:
    """Decode `gx,gy,gz,rawAx,rawAy,rawAz,ts|...` into samples.

    Malformed records are dropped one by one and counted; blank records are
    skipped without counting. Raw acceleration is fixed-point with
    `accel_scale` (100 -> two decimals of g).
    """

    samples: list[Sample] = []
    dropped = 0
    for raw in packed.split(RECORD_SEPARATOR):
        record = raw.strip()
        if not record:
            continue
        try:
            samples.append(_parse_record(record, accel_scale=accel_scale))
        except ValueError:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d malformed record(s), kept %d", dropped, len(samples))
    return ParsedBatch(samples=samples, dropped=dropped)


def decode_envelope(body: bytes | str) -> str:
    """Extract the packed `data` string from a JSON envelope `{"data": "..."}`.

    Raises PayloadError for a body that is not a JSON object and for an
    absent or blank `data` field.
    """

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    try:
        obj: Any = json.loads(body)
    except ValueError:
        raise PayloadError(DETAIL_INVALID_JSON) from None
    if not isinstance(obj, dict):
        raise PayloadError(DETAIL_INVALID_JSON)

    data = obj.get("data")
    if data is None:
        raise PayloadError(DETAIL_EMPTY_DATA)
    packed = str(data).strip()
    if not packed:
        raise PayloadError(DETAIL_EMPTY_DATA)
    return packed


def encode_packed_batch(samples: list[Sample], *, accel_scale: float = 100.0) -> str:
    """Inverse of parse_packed_batch, used by the replay and fake-data tools."""

    records = []
    for s in samples:
        raw = (round(s.ax * accel_scale), round(s.ay * accel_scale), round(s.az * accel_scale))
        records.append(FIELD_SEPARATOR.join(str(v) for v in (s.gx, s.gy, s.gz, *raw, s.ts)))
    return RECORD_SEPARATOR.join(records)
