from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from handgest.streaming.bands import GestureDefinition, match_gestures, out_of_band_counts
from handgest.streaming.capture import SegmentRecorder
from handgest.streaming.config import EngineConfig, default_engine_config
from handgest.streaming.mode import Mode, ModeStateMachine
from handgest.streaming.points import Points, ThresholdEventCounter
from handgest.streaming.protocol import (
    DETAIL_NO_VALID_SAMPLES,
    PayloadError,
    Sample,
    decode_envelope,
    parse_packed_batch,
)
from handgest.streaming.windowing import WindowManager

logger = logging.getLogger(__name__)

SegmentExporter = Callable[[list[Sample]], Any]


@dataclass(frozen=True)
class IngestResult:
    status: str
    received: int = 0
    total: int = 0
    last_second: int = 0
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def error(cls, detail: str) -> "IngestResult":
        return cls(status="error", detail=detail)

    def to_dict(self) -> dict[str, object]:
        if not self.ok:
            return {"status": self.status, "detail": self.detail}
        return {
            "status": self.status,
            "received": self.received,
            "total": self.total,
            "last_second": self.last_second,
        }


@dataclass(frozen=True)
class Classification:
    message: str
    active: tuple[str, ...]


class GestureEngine:
    """Owns the sample windows, mode, capture buffer and point counters.

    Each batch is classified, applied and published under one lock, so
    concurrent callers are serialized and readers never see a half-applied
    batch. Completed segments are handed to `segment_exporter` after the lock
    is released.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        segment_exporter: SegmentExporter | None = None,
    ):
        self.config = config or default_engine_config()
        self.segment_exporter = segment_exporter

        self._lock = threading.Lock()
        self._windows = WindowManager(
            display_window_ms=self.config.display_window_ms,
            eval_window_ms=self.config.eval_window_ms,
        )
        self._mode = ModeStateMachine(transitions=self.config.transitions)
        self._recorder = SegmentRecorder()
        self._counter = ThresholdEventCounter(threshold=self.config.point_threshold)
        self._classification = Classification(message=self.config.no_gesture_message, active=())

    # Ingestion

    def handle_envelope(self, body: bytes | str, *, replace: bool = False) -> IngestResult:
        try:
            packed = decode_envelope(body)
        except PayloadError as e:
            logger.warning("Rejected batch: %s", e.detail)
            return IngestResult.error(e.detail)
        return self._ingest(packed, replace=replace)

    def ingest_append(self, packed: str) -> IngestResult:
        return self._ingest(packed, replace=False)

    def ingest_replace(self, packed: str) -> IngestResult:
        return self._ingest(packed, replace=True)

    def _ingest(self, packed: str, *, replace: bool) -> IngestResult:
        samples = parse_packed_batch(packed, accel_scale=self.config.accel_scale).samples
        if not samples:
            logger.warning("Rejected batch: %s", DETAIL_NO_VALID_SAMPLES)
            return IngestResult.error(DETAIL_NO_VALID_SAMPLES)

        with self._lock:
            eval_view = self._windows.preview_eval(samples, replace=replace)
            active = match_gestures(eval_view, self.config.gestures)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Eval window: samples=%d out_of_band=%s",
                    len(eval_view),
                    out_of_band_counts(eval_view, self.config.gestures),
                )
            transition = self._mode.update(active)

            self._windows.commit(samples, eval_view, replace=replace)
            if replace:
                # Resynced history is not part of any episode.
                self._recorder.clear()
                segment = self._recorder.update([], transition)
            else:
                segment = self._recorder.update(samples, transition)
            if transition.current is Mode.GESTURE:
                self._counter.update(samples)

            self._publish(active)
            result = IngestResult(
                status="ok",
                received=len(samples),
                total=len(self._windows.history),
                last_second=len(self._windows.display),
            )

        if segment:
            self._export_segment(segment)
        return result

    def _publish(self, active: list[GestureDefinition]) -> None:
        if active:
            message = self.config.message_separator.join(g.message for g in active)
        else:
            message = self.config.no_gesture_message
        self._classification = Classification(message=message, active=tuple(g.name for g in active))

    def _export_segment(self, segment: list[Sample]) -> None:
        logger.info("Gesture segment complete: %d samples", len(segment))
        if self.segment_exporter is None:
            return
        try:
            self.segment_exporter(segment)
        except Exception:
            logger.exception("Segment export failed (%d samples)", len(segment))

    # Session control

    def reset_points(self) -> None:
        with self._lock:
            self._counter.reset()

    # Read side

    @property
    def mode(self) -> Mode:
        with self._lock:
            return self._mode.current

    def points(self) -> Points:
        with self._lock:
            return self._counter.points()

    def latest_classification(self) -> Classification:
        with self._lock:
            return self._classification

    def display_window(self) -> list[Sample]:
        with self._lock:
            return self._windows.display.snapshot()

    def history(self) -> list[Sample]:
        with self._lock:
            return self._windows.history.snapshot()

    def capture(self) -> list[Sample]:
        """Samples of the GESTURE episode in progress (empty while waiting)."""

        with self._lock:
            return self._recorder.snapshot()

    def capture_size(self) -> int:
        with self._lock:
            return len(self._recorder)

    def display_span(self) -> tuple[int, int, int] | None:
        """(min_ts, mid_ts, max_ts) of the display window, None when empty."""

        samples = self.display_window()
        if not samples:
            return None
        lo = min(s.ts for s in samples)
        hi = max(s.ts for s in samples)
        return lo, lo + (hi - lo) // 2, hi
