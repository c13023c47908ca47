from __future__ import annotations

from handgest.streaming.protocol import Sample, encode_packed_batch

HAND_UP = (9.5, -2.5, 3.7)
HAND_DOWN = (-10.0, -3.0, 1.5)
IDLE = (0.0, 0.0, 9.8)


def sample(ts: int, accel: tuple[float, float, float] = IDLE, *, gx: float = 0.0) -> Sample:
    ax, ay, az = accel
    return Sample(gx=gx, gy=0.0, gz=0.0, ax=ax, ay=ay, az=az, ts=ts)


def run(start_ts: int, n: int, accel: tuple[float, float, float] = IDLE, *, step_ms: int = 20) -> list[Sample]:
    return [sample(start_ts + i * step_ms, accel) for i in range(n)]


def pack(samples: list[Sample]) -> str:
    return encode_packed_batch(samples)
