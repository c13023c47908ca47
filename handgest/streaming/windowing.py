from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from handgest.streaming.protocol import Sample


def samples_to_array(samples: Sequence[Sample]) -> np.ndarray:
    """Stack samples into an (N, 7) float64 array: [gx, gy, gz, ax, ay, az, ts]."""

    if not samples:
        return np.empty((0, 7), dtype=np.float64)
    return np.array([s.as_row() for s in samples], dtype=np.float64)


def _retain(samples: list[Sample], retention_ms: int | None) -> list[Sample]:
    if retention_ms is None or not samples:
        return samples
    threshold = max(s.ts for s in samples) - retention_ms
    return [s for s in samples if s.ts >= threshold]


class TrailingWindow:
    """Arrival-ordered samples bounded relative to the newest `ts` they hold.

    `retention_ms=None` means unbounded (append-only history).
    """

    def __init__(self, *, retention_ms: int | None):
        if retention_ms is not None and retention_ms <= 0:
            raise ValueError("retention_ms must be > 0")
        self.retention_ms = retention_ms
        self._samples: list[Sample] = []

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def max_ts(self) -> int | None:
        if not self._samples:
            return None
        return max(s.ts for s in self._samples)

    def preview(self, batch: Iterable[Sample]) -> list[Sample]:
        """What the window would hold after append(batch), without mutating it."""

        return _retain(self._samples + list(batch), self.retention_ms)

    def append(self, batch: Iterable[Sample]) -> None:
        if self.retention_ms is None:
            self._samples.extend(batch)
            return
        self._samples = self.preview(batch)

    def replace(self, samples: Iterable[Sample]) -> None:
        self._samples = _retain(list(samples), self.retention_ms)

    def assign(self, retained: Iterable[Sample]) -> None:
        """Adopt samples already bounded by this window's retention (see preview)."""

        self._samples = list(retained)

    def snapshot(self) -> list[Sample]:
        return list(self._samples)


class WindowManager:
    """History plus the display and evaluation views of one sample stream."""

    def __init__(self, *, display_window_ms: int = 1000, eval_window_ms: int = 500):
        self.history = TrailingWindow(retention_ms=None)
        self.display = TrailingWindow(retention_ms=display_window_ms)
        self.evaluation = TrailingWindow(retention_ms=eval_window_ms)

    def preview_eval(self, batch: Sequence[Sample], *, replace: bool = False) -> list[Sample]:
        if replace:
            return _retain(list(batch), self.evaluation.retention_ms)
        return self.evaluation.preview(batch)

    def commit(self, batch: Sequence[Sample], eval_view: Sequence[Sample], *, replace: bool = False) -> None:
        """Apply a batch; `eval_view` is the matching preview_eval(batch, replace=replace) result."""

        for w in (self.history, self.display):
            if replace:
                w.replace(batch)
            else:
                w.append(batch)
        self.evaluation.assign(eval_view)
