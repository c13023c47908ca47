from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from handgest.streaming.protocol import Sample


class ArmState(Enum):
    ARMED = "armed"
    DISARMED = "disarmed"


class Crossing(Enum):
    NONE = "none"
    BLUE = "blue"  # gx below -threshold
    RED = "red"  # gx above +threshold


def step_arm_state(state: ArmState, gx: float, *, threshold: float) -> tuple[ArmState, Crossing]:
    """One debounce step: count an excursion once, re-arm only back inside the band."""

    if state is ArmState.ARMED:
        if gx < -threshold:
            return ArmState.DISARMED, Crossing.BLUE
        if gx > threshold:
            return ArmState.DISARMED, Crossing.RED
        return state, Crossing.NONE

    if -threshold <= gx <= threshold:
        return ArmState.ARMED, Crossing.NONE
    return state, Crossing.NONE


@dataclass(frozen=True)
class Points:
    blue: int
    red: int


class ThresholdEventCounter:
    """Edge-triggered counter on gyro x. Counters and arm state survive mode changes."""

    def __init__(self, *, threshold: float):
        if threshold < 0:
            raise ValueError("threshold must be >= 0")
        self.threshold = float(threshold)
        self.blue = 0
        self.red = 0
        self.state = ArmState.ARMED

    def reset(self) -> None:
        self.blue = 0
        self.red = 0
        self.state = ArmState.ARMED

    def update(self, samples: Iterable[Sample]) -> Points:
        for s in samples:
            self.state, crossing = step_arm_state(self.state, s.gx, threshold=self.threshold)
            if crossing is Crossing.BLUE:
                self.blue += 1
            elif crossing is Crossing.RED:
                self.red += 1
        return self.points()

    def points(self) -> Points:
        return Points(blue=self.blue, red=self.red)

    @property
    def armed(self) -> bool:
        return self.state is ArmState.ARMED
