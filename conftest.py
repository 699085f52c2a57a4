"""Pytest fixtures shared across the analytics test modules."""

import pytest

from config import SUBJECTS


def make_raw_student(student_id, scores, name=None, gender="M", stream="8 Suswa", **extra):
    """
    Build a raw input row the way parse_scores_csv returns it.

    scores may be a single number (used for every subject) or a list in
    SUBJECTS order.
    """
    if not isinstance(scores, (list, tuple)):
        scores = [scores] * len(SUBJECTS)
    row = {
        'StudentID': student_id,
        'Name': name or f"Student {student_id}",
        'Gender': gender,
        'Stream': stream,
    }
    row.update(dict(zip(SUBJECTS, scores)))
    row.update(extra)
    return row


@pytest.fixture
def raw_student():
    """Factory for raw input rows."""
    return make_raw_student


@pytest.fixture
def example_scores():
    """Scores 80, 70, ..., 10 across the nine subjects (total 450)."""
    return [80, 70, 90, 60, 50, 40, 30, 20, 10]


@pytest.fixture
def small_cohort():
    """
    Five students over two streams.

    Averages: S1 85, S2 60, S3 60 (tie with S2), S4 35, S5 20.
    S4 and S5 fail every subject; S3 fails two.
    """
    return [
        make_raw_student("S1", 85, name="Agnes Wangui", gender="F", stream="8 Suswa"),
        make_raw_student("S2", 60, name="Brian Muiruri", gender="M", stream="8 Suswa"),
        make_raw_student("S3", [80, 80, 80, 80, 80, 80, 60, 0, 0], name="Cindy Njoki",
                         gender="F", stream="8 Longonot"),
        make_raw_student("S4", 35, name="Dennis Kimeu", gender="M", stream="8 Longonot"),
        make_raw_student("S5", 20, name="Esther Nyambura", gender="F", stream="8 Suswa"),
    ]
