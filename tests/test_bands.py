from __future__ import annotations

import pytest

from handgest.streaming.bands import AccelBands, GestureDefinition, match_gestures, out_of_band_counts
from handgest.streaming.config import default_gestures
from helpers import HAND_DOWN, HAND_UP, run, sample

UP, DOWN = default_gestures()


def test_every_sample_in_band_activates():
    assert match_gestures(run(0, 10, HAND_UP), default_gestures()) == [UP]


def test_single_outlier_deactivates_whole_window():
    window = run(0, 10, HAND_UP) + [sample(200, (9.5, 0.5, 3.7))] + run(220, 5, HAND_UP)

    assert match_gestures(window, default_gestures()) == []
    assert out_of_band_counts(window, default_gestures()) == {"Hand up": 1, "Hand down": 16}


def test_bounds_are_inclusive():
    edges = [sample(0, (8.5, -5.0, 2.5)), sample(10, (10.5, 0.0, 5.0))]

    assert match_gestures(edges, default_gestures()) == [UP]


def test_empty_window_matches_nothing():
    assert match_gestures([], default_gestures()) == []
    assert out_of_band_counts([], default_gestures()) == {"Hand up": 0, "Hand down": 0}


def test_overlapping_gestures_keep_configuration_order():
    wide = GestureDefinition("Anything", "any", AccelBands(-20, 20, -20, 20, -20, 20))
    gestures = (wide, UP, DOWN)

    assert match_gestures(run(0, 5, HAND_DOWN), gestures) == [wide, DOWN]
    assert match_gestures(run(0, 5, HAND_UP), gestures) == [wide, UP]


def test_inverted_band_rejected():
    with pytest.raises(ValueError, match="ay_min"):
        AccelBands(ax_min=0, ax_max=1, ay_min=2, ay_max=1, az_min=0, az_max=1)
