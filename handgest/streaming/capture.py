from __future__ import annotations

from collections.abc import Sequence

from handgest.streaming.mode import Mode, ModeTransition
from handgest.streaming.protocol import Sample


class SegmentRecorder:
    """Collects the samples of one GESTURE episode.

    update() returns the completed segment on the batch that leaves GESTURE
    mode, and None otherwise. The segment includes both the batch that entered
    and the batch that left GESTURE mode. A returned segment is never empty and
    is never returned twice.
    """

    def __init__(self) -> None:
        self._buffer: list[Sample] = []

    def __len__(self) -> int:
        return len(self._buffer)

    def update(self, batch: Sequence[Sample], transition: ModeTransition) -> list[Sample] | None:
        if transition.current is Mode.GESTURE:
            if transition.entered:
                self._buffer = []
            self._buffer.extend(batch)
            return None

        if transition.exited:
            segment = self._buffer + list(batch)
            self._buffer = []
            return segment or None

        return None

    def clear(self) -> None:
        self._buffer = []

    def snapshot(self) -> list[Sample]:
        return list(self._buffer)
