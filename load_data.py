"""
Grade 8 Data Loader - CSV Edition

Loads student score sheets from CSV, feeds them to the analytics engine
and writes the results back out as CSV (processed data) or JSON (full report).

Expected CSV structure (one row per student):
- StudentID, Name, Gender (M/F), Stream
- One column per subject (English, Kiswahili, Mathematics, ...), scores 0-100
- Any extra columns are carried through to the export untouched
"""

import argparse
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from analytics import AnalyticsResult, ProcessedStudent, process_data
from config import (
    DEFAULT_STREAM,
    FEMALE_FIRST_NAMES,
    IDENTITY_FIELDS,
    MOCK_CLASS_LIST,
    MOCK_ID_PREFIX,
    MOCK_ID_START,
    SUBJECTS,
)


logger = logging.getLogger(__name__)


# ==================== CSV INGESTION ====================

def parse_scores_csv(source, subjects: Sequence[str] = SUBJECTS) -> List[Dict[str, Any]]:
    """
    Parse a student score sheet into raw records for process_data.

    Every cell is read as text; the engine does the numeric coercion so that
    a bad score is reported against its row instead of silently becoming NaN.

    Args:
        source: Path or file-like object (e.g. a Streamlit upload)
        subjects: Subject columns the sheet must contain

    Returns:
        One dict per student row, keys in the sheet's column order

    Raises:
        ValueError: required columns are missing or the sheet has no students
    """
    df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding='utf-8')

    # Clean column names
    df.columns = df.columns.str.strip()

    missing = [col for col in list(IDENTITY_FIELDS) + list(subjects) if col not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

    # Remove rows where every cell is blank (trailing lines from spreadsheets)
    if not df.empty:
        blank = df.apply(lambda col: col.str.strip() == '').all(axis=1)
        if blank.any():
            logger.warning("Dropping %d blank row(s)", int(blank.sum()))
            df = df[~blank]

    if df.empty:
        raise ValueError("CSV contains no student rows")

    logger.info("Loaded %d student rows from %s", len(df), getattr(source, 'name', source))
    return df.to_dict(orient='records')


# ==================== MOCK DATA ====================

def guess_gender(name: str) -> str:
    """Guess gender from the first name (mock data only, not reliable)."""
    first = name.split(' ')[0].lower()
    return 'F' if first in FEMALE_FIRST_NAMES else 'M'


def generate_mock_data(seed: Optional[int] = None,
                       class_list: Optional[Sequence[str]] = None,
                       stream: str = DEFAULT_STREAM,
                       subjects: Sequence[str] = SUBJECTS) -> List[Dict[str, Any]]:
    """
    Generate a demo cohort with realistic score spreads.

    Each student gets a base aptitude between 40 and 80; every subject
    score is that aptitude +/- 15, floored and clamped to 0-100.
    Pass a seed for a reproducible cohort. class_list defaults to MOCK_CLASS_LIST.
    """
    if class_list is None:
        class_list = MOCK_CLASS_LIST
    rng = np.random.default_rng(seed)

    students = []
    for index, name in enumerate(class_list):
        student = {
            'StudentID': f"{MOCK_ID_PREFIX}-{MOCK_ID_START + index}",
            'Name': name,
            'Gender': guess_gender(name),
            'Stream': stream,
        }

        aptitude = rng.random() * 40 + 40
        for subject in subjects:
            score = math.floor(aptitude + (rng.random() * 30 - 15))
            student[subject] = max(0, min(100, score))

        students.append(student)

    return students


# ==================== EXPORT ====================

def export_to_csv(data: Union[AnalyticsResult, Sequence[ProcessedStudent]],
                  output_path: Optional[str] = None) -> str:
    """
    Serialize processed students to CSV.

    Columns keep the order of the uploaded sheet, with Average, TotalMarks,
    TotalPoints, FailedSubjects, OverallGrade and Position appended.

    Returns:
        The CSV text (also written to output_path when given)
    """
    students = data.processed_data if isinstance(data, AnalyticsResult) else list(data)
    df = pd.DataFrame([s.to_row() for s in students])
    csv_text = df.to_csv(index=False)

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(csv_text, encoding='utf-8')
        logger.info("Exported %d students to %s", len(students), output_path)

    return csv_text


def save_analytics(result: AnalyticsResult,
                   output_path: str = "output/analytics.json") -> None:
    """Save the full analytics report to JSON for dashboard consumption."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)
    logger.info("Analytics saved to %s", output_path)


def load_analytics(json_path: str = "output/analytics.json") -> Dict[str, Any]:
    """Load a saved analytics report (plain dict, published key names)."""
    with open(json_path, 'r') as f:
        return json.load(f)


def build_report(csv_path: Optional[str] = None,
                 seed: Optional[int] = None) -> AnalyticsResult:
    """
    Build the analytics report from a CSV, or from a mock cohort if no path is given.
    """
    if csv_path:
        records = parse_scores_csv(csv_path)
    else:
        logger.info("No CSV given, generating mock cohort (seed=%s)", seed)
        records = generate_mock_data(seed=seed)
    return process_data(records)


# CLI entry point
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Grade 8 analytics report builder")
    parser.add_argument('csv', nargs='?', help="Student score sheet (omit to use a mock cohort)")
    parser.add_argument('--output', default="output/analytics.json", help="JSON report path")
    parser.add_argument('--export', help="Also write the processed students to this CSV path")
    parser.add_argument('--mock', action='store_true', help="Use a mock cohort even if a CSV is given")
    parser.add_argument('--seed', type=int, help="Seed for the mock cohort")
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("=" * 60)
    print("Grade 8 Analytics")
    print("=" * 60)

    try:
        result = build_report(None if args.mock else args.csv, seed=args.seed)
    except ValueError as e:
        print(f"\nERROR: {e}")
        return 1

    save_analytics(result, args.output)
    if args.export:
        export_to_csv(result, args.export)

    print("\n" + "=" * 60)
    print("Data Summary")
    print("=" * 60)
    print(f"  Total Students: {result.total_students}")
    print(f"  Gender: {result.gender_distribution['M']} M / {result.gender_distribution['F']} F")
    print(f"  Streams: {', '.join(result.stream_stats)}")
    print(f"  Overall Mean: {result.overall_mean:.2f}")
    print(f"  Needing Remediation (2+ fails): {len(result.students_failing_2plus)}")
    if result.subject_stats:
        best, worst = result.subject_stats[0], result.subject_stats[-1]
        print(f"  Best Subject: {best.name} ({best.mean:.2f})")
        print(f"  Weakest Subject: {worst.name} ({worst.mean:.2f})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
