"""
Grading Scale Tests

Validates the KJSEA band lookup:
1. Exact band boundaries
2. Points and grades never decrease as the score rises
3. Remarks, pass mark and out-of-range scores
4. Custom scales are validated and injected without touching the defaults
"""

import pytest

from config import GRADE_BANDS
from grading import (
    DEFAULT_SCALE,
    GradingScale,
    grade,
    grade_thresholds,
    is_passing,
    points,
    remark,
)


@pytest.mark.parametrize("score, expected", [
    (89, "EE2"), (90, "EE1"),
    (74, "ME1"), (75, "EE2"),
    (57, "ME2"), (58, "ME1"),
    (40, "AE1"), (41, "ME2"),
    (30, "AE2"), (31, "AE1"),
    (20, "BE1"), (21, "AE2"),
    (10, "BE2"), (11, "BE1"),
    (0, "BE2"), (100, "EE1"),
])
def test_band_boundaries(score, expected):
    assert grade(score) == expected


@pytest.mark.parametrize("score, expected", [
    (100, 8), (90, 8), (89, 7), (75, 7), (74, 6), (58, 6), (57, 5),
    (41, 5), (40, 4), (31, 4), (30, 3), (21, 3), (20, 2), (11, 2), (10, 1), (0, 1),
])
def test_points_per_band(score, expected):
    assert points(score) == expected


def test_grades_and_points_are_monotonic():
    """A higher score never earns fewer points or a worse band."""
    labels = DEFAULT_SCALE.labels  # Best first
    scores = [s / 2 for s in range(-20, 221)]  # -10.0 .. 110.0 in half steps

    for low, high in zip(scores, scores[1:]):
        assert points(low) <= points(high)
        assert labels.index(grade(low)) >= labels.index(grade(high))


def test_fractional_scores_use_the_threshold_inclusively():
    assert grade(89.99) == "EE2"
    assert grade(90.0) == "EE1"
    assert grade(40.99) == "AE1"


def test_out_of_range_scores_are_graded_not_rejected():
    assert grade(-5) == "BE2"
    assert points(-5) == 1
    assert grade(150) == "EE1"
    assert points(150) == 8


@pytest.mark.parametrize("label, expected", [
    ("EE1", "Exceptional"),
    ("EE2", "Very Good"),
    ("ME1", "Good"),
    ("ME2", "Fair"),
    ("AE1", "Needs Improvement"),
    ("AE2", "Below Average"),
    ("BE1", "Well Below Average"),
    ("BE2", "Minimal"),
])
def test_remarks(label, expected):
    assert remark(label) == expected


def test_unknown_label_has_empty_remark():
    assert remark("XYZ") == ""


def test_pass_mark_is_inclusive():
    assert is_passing(41)
    assert not is_passing(40)
    assert not is_passing(40.99)


def test_labels_follow_band_order():
    assert DEFAULT_SCALE.labels == ["EE1", "EE2", "ME1", "ME2", "AE1", "AE2", "BE1", "BE2"]


def test_grade_thresholds_legend():
    legend = grade_thresholds()

    assert len(legend) == len(GRADE_BANDS)
    assert legend[0] == {'label': "EE1", 'min': 90, 'max': None, 'points': 8, 'remark': "Exceptional"}
    assert legend[3] == {'label': "ME2", 'min': 41, 'max': 58, 'points': 5, 'remark': "Fair"}
    assert legend[-1] == {'label': "BE2", 'min': None, 'max': 11, 'points': 1, 'remark': "Minimal"}


def test_custom_scale_is_injected_without_touching_default():
    pass_fail = GradingScale(
        bands=((50, "P", 1), (None, "F", 0)),
        remarks={"P": "Pass", "F": "Fail"},
        pass_mark=50,
    )

    assert grade(55, pass_fail) == "P"
    assert grade(49, pass_fail) == "F"
    assert points(49, pass_fail) == 0
    assert remark("P", pass_fail) == "Pass"
    assert is_passing(50, pass_fail)

    # Default scale unchanged
    assert grade(55) == "ME2"
    assert remark("P") == ""


@pytest.mark.parametrize("bands", [
    (),
    ((50, "P", 1), (20, "F", 0)),                  # No floor band
    ((50, "A", 2), (60, "B", 1), (None, "F", 0)),  # Not descending
    ((50, "A", 2), (50, "B", 1), (None, "F", 0)),  # Duplicate threshold
    ((None, "A", 2), (None, "F", 0)),              # Floor band in the middle
])
def test_invalid_scales_are_rejected(bands):
    with pytest.raises(ValueError):
        GradingScale(bands=bands)
