from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from handgest.streaming.protocol import Sample
from handgest.streaming.windowing import samples_to_array

_ACCEL_COLUMNS = slice(3, 6)


@dataclass(frozen=True)
class AccelBands:
    """Inclusive acceleration ranges (g) per axis."""

    ax_min: float
    ax_max: float
    ay_min: float
    ay_max: float
    az_min: float
    az_max: float

    def __post_init__(self) -> None:
        for axis in ("ax", "ay", "az"):
            lo = getattr(self, f"{axis}_min")
            hi = getattr(self, f"{axis}_max")
            if lo > hi:
                raise ValueError(f"{axis}_min ({lo}) must be <= {axis}_max ({hi})")

    def lower(self) -> np.ndarray:
        return np.array([self.ax_min, self.ay_min, self.az_min], dtype=np.float64)

    def upper(self) -> np.ndarray:
        return np.array([self.ax_max, self.ay_max, self.az_max], dtype=np.float64)


@dataclass(frozen=True)
class GestureDefinition:
    name: str
    message: str
    bands: AccelBands


def _accel_matrix(window: Sequence[Sample]) -> np.ndarray:
    return samples_to_array(window)[:, _ACCEL_COLUMNS]


def match_gestures(
    window: Sequence[Sample],
    gestures: Sequence[GestureDefinition],
) -> list[GestureDefinition]:
    """Return the gestures whose bands hold for every sample in `window`.

    Configuration order is preserved and several gestures may match at once.
    An empty window matches nothing.
    """

    if not window:
        return []

    accel = _accel_matrix(window)
    active: list[GestureDefinition] = []
    for g in gestures:
        inside = (accel >= g.bands.lower()) & (accel <= g.bands.upper())
        if bool(inside.all()):
            active.append(g)
    return active


def out_of_band_counts(
    window: Sequence[Sample],
    gestures: Sequence[GestureDefinition],
) -> dict[str, int]:
    """Per-gesture number of samples that fall outside its bands (diagnostics)."""

    if not window:
        return {g.name: 0 for g in gestures}
    accel = _accel_matrix(window)
    counts: dict[str, int] = {}
    for g in gestures:
        inside = ((accel >= g.bands.lower()) & (accel <= g.bands.upper())).all(axis=1)
        counts[g.name] = int((~inside).sum())
    return counts
