"""
KJSEA Grading Scale

Pure lookups from a score to its grade label and points, and from a label
to its descriptive remark. Scores are not range-checked here: a negative
score lands in the floor band and anything above 100 in the top band.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from config import GRADE_BANDS, GRADE_REMARKS, PASS_MARK


Band = Tuple[Optional[float], str, int]


@dataclass(frozen=True)
class GradingScale:
    """
    An ordered set of grade bands plus the pass mark.

    Bands are (minimum score, label, points), highest threshold first.
    The last band is the floor and has no minimum (None).
    """
    bands: Tuple[Band, ...] = GRADE_BANDS
    remarks: Dict[str, str] = field(default_factory=lambda: dict(GRADE_REMARKS))
    pass_mark: float = PASS_MARK

    def __post_init__(self):
        if not self.bands:
            raise ValueError("A grading scale needs at least one band")

        *graded, floor = self.bands
        if floor[0] is not None:
            raise ValueError(f"Last band '{floor[1]}' must be the floor band (minimum None)")

        thresholds = [band[0] for band in graded]
        if any(t is None for t in thresholds):
            raise ValueError("Only the last band may omit its minimum score")
        if any(high <= low for high, low in zip(thresholds, thresholds[1:])):
            raise ValueError(f"Band thresholds must be strictly descending: {thresholds}")

    @property
    def labels(self) -> List[str]:
        """Grade labels in band order (best first)."""
        return [label for _, label, _ in self.bands]

    def band_for(self, score: float) -> Band:
        """Return the first band whose minimum the score reaches."""
        for band in self.bands[:-1]:
            if score >= band[0]:
                return band
        return self.bands[-1]


DEFAULT_SCALE = GradingScale()


def grade(score: float, scale: GradingScale = DEFAULT_SCALE) -> str:
    """Grade label for a score, e.g. 92 -> "EE1"."""
    return scale.band_for(score)[1]


def points(score: float, scale: GradingScale = DEFAULT_SCALE) -> int:
    """Achievement-level points for a score (8 for EE1 down to 1 for BE2)."""
    return scale.band_for(score)[2]


def remark(label: str, scale: GradingScale = DEFAULT_SCALE) -> str:
    """Descriptive remark for a grade label. Unknown labels get an empty string."""
    return scale.remarks.get(label, "")


def is_passing(score: float, scale: GradingScale = DEFAULT_SCALE) -> bool:
    return score >= scale.pass_mark


def grade_thresholds(scale: GradingScale = DEFAULT_SCALE) -> List[Dict[str, Any]]:
    """
    Full grading scale for legends and report footers.

    Returns:
        One dict per band with label, min, max, points and remark.
        max is exclusive (the next band's min). The top band has no max
        and the floor band has no min.
    """
    thresholds = []
    upper = None
    for minimum, label, band_points in scale.bands:
        thresholds.append({
            'label': label,
            'min': minimum,
            'max': upper,
            'points': band_points,
            'remark': remark(label, scale)
        })
        upper = minimum
    return thresholds
