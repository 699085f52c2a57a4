"""
Grade 8 Analytics Engine

Turns raw per-student subject scores into a ranked, graded cohort report:

- Normalizes raw rows (strings from a parsed CSV) into typed student records
- Aggregates each student (total, average, points, failed subjects, grade)
- Ranks by average (stable sort, sequential positions 1..N)
- Builds cohort statistics: gender, streams, per-subject stats and grade
  histograms, top/bottom lists and the remediation watch-list

Every call is a pure function of its input. Nothing is cached between batches.
"""

import logging
import math
import numbers
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from operator import attrgetter
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from config import (
    DERIVED_FIELDS,
    GENDERS,
    IDENTITY_FIELDS,
    REMEDIATION_THRESHOLD,
    SUBJECTS,
    TOP_N,
)
from grading import DEFAULT_SCALE, GradingScale, grade, points, remark


logger = logging.getLogger(__name__)


# ==================== ERRORS ====================

class AnalyticsError(ValueError):
    """Base class for errors raised while processing a batch."""


class MalformedRecord(AnalyticsError):
    """A record is missing a required field or holds a value that cannot be used."""

    def __init__(self, message: str, row: Optional[int] = None, field_name: Optional[str] = None):
        self.row = row
        self.field_name = field_name
        if row is not None:
            message = f"Row {row}: {message}"
        super().__init__(message)


class EmptyBatch(AnalyticsError):
    """No student records were supplied."""


# ==================== DATA MODEL ====================

@dataclass(frozen=True)
class StudentRecord:
    """One validated input row."""
    student_id: str
    name: str
    gender: str
    stream: str
    scores: Mapping[str, float]
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))  # Columns outside the schema, kept for export
    field_order: Tuple[str, ...] = ()  # Column order of the source row


@dataclass(frozen=True)
class ProcessedStudent:
    """A student record plus everything derived from its scores."""
    student_id: str
    name: str
    gender: str
    stream: str
    scores: Mapping[str, float]
    average: float
    total_marks: float
    total_points: int
    failed_subjects: int
    overall_grade: str
    position: int = 0  # Assigned by rank_students
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    field_order: Tuple[str, ...] = ()

    def score(self, subject: str) -> float:
        return self.scores[subject]

    def to_row(self) -> Dict[str, Any]:
        """
        Flatten to a single row keyed by the original column names.

        Source columns come first in their original order, then the derived
        fields (Average, TotalMarks, ..., Position).
        """
        identity = {
            'StudentID': self.student_id,
            'Name': self.name,
            'Gender': self.gender,
            'Stream': self.stream,
        }
        order = list(self.field_order)
        order += [k for k in identity if k not in order]
        order += [k for k in self.scores if k not in order]
        order += [k for k in self.extra if k not in order]

        row = {}
        for key in order:
            if key in identity:
                row[key] = identity[key]
            elif key in self.scores:
                row[key] = self.scores[key]
            elif key in self.extra:
                row[key] = self.extra[key]

        row.update({
            'Average': self.average,
            'TotalMarks': self.total_marks,
            'TotalPoints': self.total_points,
            'FailedSubjects': self.failed_subjects,
            'OverallGrade': self.overall_grade,
            'Position': self.position,
        })
        return row


@dataclass(frozen=True)
class SubjectStats:
    """Cohort statistics for one subject."""
    name: str
    mean: float
    pass_rate: float            # Percentage of scores at or above the pass mark
    min: float
    max: float
    grade_distribution: Mapping[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'mean': self.mean,
            'passRate': self.pass_rate,
            'min': self.min,
            'max': self.max,
            'gradeDistribution': dict(self.grade_distribution),
        }


@dataclass(frozen=True)
class CohortSummary:
    """Cohort-level fields computed from a ranked student list."""
    gender_distribution: Mapping[str, int]
    stream_stats: Mapping[str, Mapping[str, float]]
    subject_stats: Tuple[SubjectStats, ...]
    top10: Tuple[ProcessedStudent, ...]
    bottom10: Tuple[ProcessedStudent, ...]
    students_failing_2plus: Tuple[ProcessedStudent, ...]
    overall_mean: float


@dataclass(frozen=True)
class AnalyticsResult:
    """
    Complete analytics report for one batch of students.

    Read-only all the way down: mappings are MappingProxyType views and
    student lists are tuples, so a cached result cannot be edited in place.
    """
    total_students: int
    gender_distribution: Mapping[str, int]
    stream_stats: Mapping[str, Mapping[str, float]]
    subject_stats: Tuple[SubjectStats, ...]
    top10: Tuple[ProcessedStudent, ...]
    bottom10: Tuple[ProcessedStudent, ...]
    students_failing_2plus: Tuple[ProcessedStudent, ...]
    overall_mean: float
    processed_data: Tuple[ProcessedStudent, ...]

    def student(self, student_id: str) -> Optional[ProcessedStudent]:
        """Look up a processed student by identifier."""
        for student in self.processed_data:
            if student.student_id == student_id:
                return student
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping using the report's published key names."""
        return {
            'totalStudents': self.total_students,
            'genderDistribution': dict(self.gender_distribution),
            'streamStats': {k: dict(v) for k, v in self.stream_stats.items()},
            'subjectStats': [s.to_dict() for s in self.subject_stats],
            'top10': [s.to_row() for s in self.top10],
            'bottom10': [s.to_row() for s in self.bottom10],
            'studentsFailing2Plus': [s.to_row() for s in self.students_failing_2plus],
            'overallMean': self.overall_mean,
            'processedData': [s.to_row() for s in self.processed_data],
        }


# ==================== HELPERS ====================

def round_half_up(value: float, places: int) -> float:
    """
    Round on the decimal representation, halves away from zero.

    round() in Python rounds halves to even and works on the binary value,
    so 50.125 would become 50.12. This gives 50.13.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def _as_number(value: Any):
    """Plain Python int for integral values, float otherwise (unwraps numpy scalars)."""
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _mean_2dp(values: Iterable[float]) -> float:
    values = list(values)
    return round_half_up(math.fsum(values) / len(values), 2)


# ==================== NORMALIZATION ====================

def _coerce_score(value: Any, subject: str, row: Optional[int]):
    """Convert a raw subject value (number or numeric string) to a number."""
    if value is None or isinstance(value, bool):
        raise MalformedRecord(f"{subject} has no usable value ({value!r})", row, subject)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise MalformedRecord(f"{subject} is empty", row, subject)
        try:
            number = float(text)
        except ValueError:
            raise MalformedRecord(f"{subject} is not a number: {value!r}", row, subject) from None
    elif isinstance(value, numbers.Real):
        number = float(value)
    else:
        raise MalformedRecord(f"{subject} is not a number: {value!r}", row, subject)

    if not math.isfinite(number):
        raise MalformedRecord(f"{subject} is not a finite number: {value!r}", row, subject)

    return _as_number(number)


def _normalize_gender(value: Any, row: Optional[int]) -> str:
    text = str(value).strip().upper()
    if text in ("MALE", "FEMALE"):
        text = text[0]
    if text not in GENDERS:
        raise MalformedRecord(
            f"Gender must be one of {', '.join(GENDERS)}, got {value!r}", row, 'Gender'
        )
    return text


def normalize_record(raw: Mapping[str, Any],
                     subjects: Sequence[str] = SUBJECTS,
                     row: Optional[int] = None) -> StudentRecord:
    """
    Validate one raw row and coerce its subject scores to numbers.

    Out-of-range scores are NOT clamped or rejected; they are graded by
    whichever band their magnitude falls in.

    Args:
        raw: Mapping of column name to value (strings are fine)
        subjects: Subject columns every record must carry
        row: Position of the row in its batch, used in error messages

    Returns:
        A new StudentRecord. The raw mapping is left untouched.

    Raises:
        MalformedRecord: missing identity or subject field, non-numeric score,
            or a gender outside GENDERS
    """
    for key in IDENTITY_FIELDS:
        value = raw.get(key)
        if (value is None or (isinstance(value, float) and math.isnan(value))
                or not str(value).strip()):
            raise MalformedRecord(f"Missing required field '{key}'", row, key)

    missing = [s for s in subjects if s not in raw]
    if missing:
        raise MalformedRecord(
            f"Missing subject field(s): {', '.join(missing)}", row, missing[0]
        )

    scores = {subject: _coerce_score(raw[subject], subject, row) for subject in subjects}

    # Derived columns from a previous export are recomputed, never trusted
    known = set(IDENTITY_FIELDS) | set(subjects)
    extra = {
        k: v for k, v in raw.items()
        if k not in known and k not in DERIVED_FIELDS
    }
    field_order = tuple(k for k in raw.keys() if k not in DERIVED_FIELDS)

    return StudentRecord(
        student_id=str(raw['StudentID']).strip(),
        name=str(raw['Name']).strip(),
        gender=_normalize_gender(raw['Gender'], row),
        stream=str(raw['Stream']).strip(),
        scores=MappingProxyType(scores),
        extra=MappingProxyType(extra),
        field_order=field_order,
    )


def normalize_records(raws: Iterable[Mapping[str, Any]],
                      subjects: Sequence[str] = SUBJECTS) -> List[StudentRecord]:
    """Normalize a whole batch; any bad row fails the batch."""
    records = []
    seen_ids = {}
    for i, raw in enumerate(raws):
        record = raw if isinstance(raw, StudentRecord) else normalize_record(raw, subjects, row=i)
        if record.student_id in seen_ids:
            raise MalformedRecord(
                f"Duplicate StudentID '{record.student_id}' (first seen in row {seen_ids[record.student_id]})",
                i, 'StudentID'
            )
        seen_ids[record.student_id] = i
        records.append(record)
    return records


# ==================== PER-STUDENT AGGREGATION ====================

def aggregate_student(record: StudentRecord,
                      subjects: Sequence[str] = SUBJECTS,
                      scale: GradingScale = DEFAULT_SCALE) -> ProcessedStudent:
    """Compute totals, average, points and overall grade for one student (position 0)."""
    total = 0
    total_points = 0
    failed = 0
    for subject in subjects:
        score = record.scores[subject]
        total += score
        total_points += points(score, scale)
        if score < scale.pass_mark:
            failed += 1

    average = round_half_up(total / len(subjects), 2)

    return ProcessedStudent(
        student_id=record.student_id,
        name=record.name,
        gender=record.gender,
        stream=record.stream,
        scores=MappingProxyType(dict(record.scores)),
        average=average,
        total_marks=_as_number(total),
        total_points=total_points,
        failed_subjects=failed,
        overall_grade=grade(average, scale),
        extra=MappingProxyType(dict(record.extra)),
        field_order=record.field_order,
    )


# ==================== RANKING ====================

def rank_students(students: Iterable[ProcessedStudent]) -> List[ProcessedStudent]:
    """
    Sort by average (highest first) and number positions 1..N.

    Ties keep their input order and still get distinct positions, so two
    students on the same average are numbered one after the other.
    """
    ordered = sorted(students, key=attrgetter('average'), reverse=True)
    return [replace(s, position=i) for i, s in enumerate(ordered, 1)]


# ==================== COHORT AGGREGATION ====================

def _students_frame(ranked: Sequence[ProcessedStudent], subjects: Sequence[str]) -> pd.DataFrame:
    rows = []
    for s in ranked:
        row = {subject: s.scores[subject] for subject in subjects}
        row.update({
            '_gender': s.gender,
            '_stream': s.stream,
            '_average': s.average,
            '_failed': s.failed_subjects,
        })
        rows.append(row)
    return pd.DataFrame(rows)


def calculate_subject_statistics(scores: pd.Series,
                                 subject: str,
                                 scale: GradingScale = DEFAULT_SCALE) -> SubjectStats:
    """Mean, pass rate, min/max and grade histogram for one subject column."""
    count = len(scores)
    passed = int((scores >= scale.pass_mark).sum())

    graded = scores.map(lambda s: grade(s, scale)).value_counts()
    distribution = {label: int(graded.get(label, 0)) for label in scale.labels}

    return SubjectStats(
        name=subject,
        mean=_mean_2dp(scores.tolist()),
        pass_rate=round_half_up(passed / count * 100, 1),
        min=_as_number(scores.min()),
        max=_as_number(scores.max()),
        grade_distribution=MappingProxyType(distribution),
    )


def aggregate_cohort(ranked: Sequence[ProcessedStudent],
                     subjects: Sequence[str] = SUBJECTS,
                     scale: GradingScale = DEFAULT_SCALE) -> CohortSummary:
    """
    Cohort statistics over an already-ranked student list.

    Raises:
        EmptyBatch: if the list is empty
    """
    ranked = list(ranked)
    if not ranked:
        raise EmptyBatch("Cannot compute cohort statistics for zero students")

    frame = _students_frame(ranked, subjects)

    gender_counts = frame['_gender'].value_counts()
    gender_distribution = MappingProxyType({g: int(gender_counts.get(g, 0)) for g in GENDERS})

    stream_stats = {}
    for stream, group in frame.groupby('_stream', sort=False):
        stream_stats[stream] = MappingProxyType({
            'count': int(len(group)),
            'mean': _mean_2dp(group['_average'].tolist()),
        })

    subject_stats = [calculate_subject_statistics(frame[subject], subject, scale) for subject in subjects]
    subject_stats.sort(key=attrgetter('mean'), reverse=True)

    failing = [s for s in ranked if s.failed_subjects >= REMEDIATION_THRESHOLD]

    return CohortSummary(
        gender_distribution=gender_distribution,
        stream_stats=MappingProxyType(stream_stats),
        subject_stats=tuple(subject_stats),
        top10=tuple(ranked[:TOP_N]),
        bottom10=tuple(ranked[-TOP_N:]),
        students_failing_2plus=tuple(failing),
        overall_mean=_mean_2dp(s.average for s in ranked),
    )


# ==================== REPORT ASSEMBLY ====================

def process_data(raw_records: Iterable[Mapping[str, Any]],
                 subjects: Sequence[str] = SUBJECTS,
                 scale: GradingScale = DEFAULT_SCALE) -> AnalyticsResult:
    """
    Build the full analytics report for one batch of students.

    This is the main entry point of the engine.

    Args:
        raw_records: One mapping per student (e.g. rows from parse_scores_csv)
        subjects: Subject columns to aggregate
        scale: Grading scale for grades, points and the pass mark

    Returns:
        AnalyticsResult with every student ranked and all cohort statistics

    Raises:
        EmptyBatch: no records were supplied
        MalformedRecord: any record is invalid (no partial results)
    """
    raw_records = list(raw_records)
    if not raw_records:
        raise EmptyBatch("No student records supplied")

    records = normalize_records(raw_records, subjects)
    logger.debug("Normalized %d records", len(records))

    aggregated = [aggregate_student(r, subjects, scale) for r in records]
    ranked = rank_students(aggregated)
    logger.debug("Ranked %d students", len(ranked))

    cohort = aggregate_cohort(ranked, subjects, scale)

    logger.info("Processed %d students across %d subjects, overall mean %.2f",
                len(ranked), len(subjects), cohort.overall_mean)

    return AnalyticsResult(
        total_students=len(ranked),
        gender_distribution=cohort.gender_distribution,
        stream_stats=cohort.stream_stats,
        subject_stats=cohort.subject_stats,
        top10=cohort.top10,
        bottom10=cohort.bottom10,
        students_failing_2plus=cohort.students_failing_2plus,
        overall_mean=cohort.overall_mean,
        processed_data=tuple(ranked),
    )


def build_report_card(student: ProcessedStudent,
                      subjects: Sequence[str] = SUBJECTS,
                      scale: GradingScale = DEFAULT_SCALE) -> List[Dict[str, Any]]:
    """Per-subject rows (score, grade, points, remark) for a student's report card."""
    card = []
    for subject in subjects:
        score = student.scores[subject]
        label = grade(score, scale)
        card.append({
            'Subject': subject,
            'Score': score,
            'Grade': label,
            'Points': points(score, scale),
            'Remark': remark(label, scale),
        })
    return card
