from __future__ import annotations

import pytest

from handgest.streaming.points import ArmState, Crossing, Points, ThresholdEventCounter, step_arm_state
from helpers import sample


def _gx(*values: float):
    return [sample(i, gx=v) for i, v in enumerate(values)]


def test_debounce_counts_one_per_excursion():
    counter = ThresholdEventCounter(threshold=700)

    assert counter.update(_gx(-800, -850, -300, 900)) == Points(blue=1, red=1)
    assert not counter.armed


def test_rearms_only_inside_band():
    counter = ThresholdEventCounter(threshold=700)
    counter.update(_gx(-800, 900, 950))

    assert counter.points() == Points(blue=1, red=0)

    counter.update(_gx(700, 901))
    assert counter.points() == Points(blue=1, red=1)


def test_threshold_edges_do_not_count():
    counter = ThresholdEventCounter(threshold=700)

    assert counter.update(_gx(-700, 700)) == Points(blue=0, red=0)


def test_reset_zeroes_and_arms():
    counter = ThresholdEventCounter(threshold=700)
    counter.update(_gx(-800))

    counter.reset()

    assert counter.points() == Points(blue=0, red=0)
    assert counter.armed


@pytest.mark.parametrize(
    "state, gx, expected",
    [
        (ArmState.ARMED, -701, (ArmState.DISARMED, Crossing.BLUE)),
        (ArmState.ARMED, 701, (ArmState.DISARMED, Crossing.RED)),
        (ArmState.ARMED, 0, (ArmState.ARMED, Crossing.NONE)),
        (ArmState.DISARMED, -900, (ArmState.DISARMED, Crossing.NONE)),
        (ArmState.DISARMED, 0, (ArmState.ARMED, Crossing.NONE)),
    ],
)
def test_step_arm_state(state, gx, expected):
    assert step_arm_state(state, gx, threshold=700) == expected


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        ThresholdEventCounter(threshold=-1)
