"""Grade banding and report card aggregation.

Everything here is a pure function of its arguments: no database access,
no clock, no randomness. Callers filter mark rows by student and academic
year before handing them over.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from student_records.schemas.mark import MarkRecord
from student_records.schemas.report_card import GradeLabel, ReportSummary, SubjectAggregate

UNKNOWN_SUBJECT = "Unknown"

# (lower bound inclusive, label), checked top to bottom
GRADE_BANDS: tuple[tuple[int, GradeLabel], ...] = (
    (90, GradeLabel.A_PLUS),
    (80, GradeLabel.A),
    (70, GradeLabel.B_PLUS),
    (60, GradeLabel.B),
    (50, GradeLabel.C),
    (40, GradeLabel.D),
)

PERCENTAGE_PLACES = Decimal("0.01")


def classify_grade(percentage: Decimal | float | int) -> GradeLabel:
    """Map a percentage to its letter grade.

    Values above 100 stay A+ and negative values are F.
    """
    if isinstance(percentage, Decimal) and percentage.is_nan():
        return GradeLabel.F
    for lower_bound, label in GRADE_BANDS:
        if percentage >= lower_bound:
            return label
    return GradeLabel.F


def percentage_of(obtained: Decimal, maximum: Decimal) -> Decimal:
    """obtained / maximum * 100, or 0 when maximum is not positive."""
    if maximum <= 0:
        return Decimal("0")
    return obtained / maximum * 100


def round_percentage(value: Decimal) -> Decimal:
    """Two decimal places, halves rounded up."""
    return value.quantize(PERCENTAGE_PLACES, rounding=ROUND_HALF_UP)


def aggregate_marks(
    records: Iterable[MarkRecord],
) -> tuple[dict[str, SubjectAggregate], ReportSummary]:
    """Group marks by subject and total them for a report card.

    Subjects keep the order in which they first appear, and each subject's
    exams keep input order. Records whose max_marks is zero or negative are
    summed like any other.
    """
    subject_scores: dict[str, SubjectAggregate] = {}

    for record in records:
        key = record.subject_name or UNKNOWN_SUBJECT
        bucket = subject_scores.get(key)
        if bucket is None:
            bucket = subject_scores[key] = SubjectAggregate(exams=[])
        bucket.obtained += record.marks_obtained
        bucket.max += record.max_marks
        bucket.exams.append(record)

    total_marks = sum((s.obtained for s in subject_scores.values()), Decimal("0"))
    total_max_marks = sum((s.max for s in subject_scores.values()), Decimal("0"))

    # Grade from the unrounded figure; rounding is for display only
    percentage = percentage_of(total_marks, total_max_marks)

    summary = ReportSummary(
        total_marks=total_marks,
        total_max_marks=total_max_marks,
        overall_percentage=round_percentage(percentage),
        overall_grade=classify_grade(percentage),
    )
    return subject_scores, summary
