from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from handgest.streaming.bands import AccelBands, GestureDefinition
from handgest.streaming.mode import TransitionEffect

_BAND_KEYS = ("ax_min", "ax_max", "ay_min", "ay_max", "az_min", "az_max")


@dataclass(frozen=True)
class EngineConfig:
    gestures: tuple[GestureDefinition, ...]
    transitions: Mapping[str, TransitionEffect] = field(default_factory=dict)
    display_window_ms: int = 1000
    eval_window_ms: int = 500
    accel_scale: float = 100.0
    point_gyro_threshold: float = 7.0
    point_gyro_scale: float = 100.0
    no_gesture_message: str = "No gesture detected"
    message_separator: str = "; "

    def __post_init__(self) -> None:
        names = [g.name for g in self.gestures]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate gesture names: {dupes}")

        unknown = sorted(set(self.transitions) - set(names))
        if unknown:
            raise ValueError(f"Transitions reference unknown gestures: {unknown}")
        for name, effect in self.transitions.items():
            if not isinstance(effect, TransitionEffect):
                raise ValueError(f"Transition for {name!r} must be a TransitionEffect, got {effect!r}")

        if self.display_window_ms <= 0 or self.eval_window_ms <= 0:
            raise ValueError("Window sizes must be > 0")
        if self.accel_scale <= 0:
            raise ValueError("accel_scale must be > 0")
        if self.point_gyro_threshold < 0 or self.point_gyro_scale < 0:
            raise ValueError("point_gyro_threshold and point_gyro_scale must be >= 0")

    @property
    def point_threshold(self) -> float:
        return self.point_gyro_threshold * self.point_gyro_scale


def default_gestures() -> tuple[GestureDefinition, ...]:
    return (
        GestureDefinition(
            name="Hand up",
            message="Gesture detected: hand up",
            bands=AccelBands(ax_min=8.5, ax_max=10.5, ay_min=-5.0, ay_max=0.0, az_min=2.5, az_max=5.0),
        ),
        GestureDefinition(
            name="Hand down",
            message="Gesture detected: hand down",
            bands=AccelBands(ax_min=-11.0, ax_max=-9.0, ay_min=-4.0, ay_max=-2.0, az_min=0.0, az_max=3.0),
        ),
    )


def default_engine_config() -> EngineConfig:
    return EngineConfig(
        gestures=default_gestures(),
        transitions={
            "Hand up": TransitionEffect.ENTER_GESTURE,
            "Hand down": TransitionEffect.EXIT_GESTURE,
        },
    )


def _parse_effect(name: str, value: Any) -> TransitionEffect:
    try:
        return TransitionEffect(str(value))
    except ValueError:
        allowed = [e.value for e in TransitionEffect]
        raise ValueError(f"Unknown transition effect {value!r} for {name!r}. Expected one of {allowed}.") from None


def _parse_gesture(d: dict[str, Any]) -> GestureDefinition:
    bands = d.get("bands")
    if not isinstance(bands, dict):
        raise ValueError(f"Gesture {d.get('name')!r} needs a 'bands' object")
    missing = [k for k in _BAND_KEYS if k not in bands]
    if missing:
        raise ValueError(f"Gesture {d.get('name')!r} is missing band keys: {missing}")

    name = str(d["name"])
    return GestureDefinition(
        name=name,
        message=str(d.get("message", name)),
        bands=AccelBands(**{k: float(bands[k]) for k in _BAND_KEYS}),
    )


def engine_config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from a JSON-shaped dict.

    {
      "gestures": [{"name": ..., "message": ..., "bands": {"ax_min": ..., ...}}],
      "transitions": {"<gesture name>": "enter_gesture" | "exit_gesture" | "no_effect"},
      "display_window_ms": 1000, ...
    }
    """

    raw_gestures = data.get("gestures")
    if not isinstance(raw_gestures, list) or not raw_gestures:
        raise ValueError("Config needs a non-empty 'gestures' list")

    gestures = tuple(_parse_gesture(g) for g in raw_gestures)
    transitions = {str(k): _parse_effect(str(k), v) for k, v in (data.get("transitions") or {}).items()}

    overrides: dict[str, Any] = {}
    for key in ("display_window_ms", "eval_window_ms"):
        if key in data:
            overrides[key] = int(data[key])
    for key in ("accel_scale", "point_gyro_threshold", "point_gyro_scale"):
        if key in data:
            overrides[key] = float(data[key])
    for key in ("no_gesture_message", "message_separator"):
        if key in data:
            overrides[key] = str(data[key])

    return EngineConfig(gestures=gestures, transitions=transitions, **overrides)


def load_engine_config(path: str | Path) -> EngineConfig:
    with Path(path).open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return engine_config_from_dict(data)
