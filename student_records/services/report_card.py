"""Report card service."""

import logging
from collections.abc import Iterable, Mapping
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from student_records.core.exceptions import UpstreamFailureError
from student_records.models.mark import Mark
from student_records.models.subject import Subject
from student_records.schemas.mark import MarkRecord
from student_records.schemas.report_card import ReportCardResponse
from student_records.schemas.student import StudentResponse
from student_records.services.grading import (
    aggregate_marks,
    classify_grade,
    percentage_of,
    round_percentage,
)
from student_records.services.student import StudentService

logger = logging.getLogger(__name__)


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[MarkRecord]:
    """Validate raw mark rows into MarkRecords.

    A row with a missing or unparseable field raises UpstreamFailureError
    rather than reaching the aggregator.
    """
    records = []
    for position, row in enumerate(rows):
        try:
            records.append(MarkRecord.model_validate(dict(row)))
        except SchemaValidationError as e:
            logger.error("Unreadable mark row at position %d: %s", position, e)
            raise UpstreamFailureError(
                "Mark data could not be read",
                details={"row": position, "errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e
    return records


class ReportCardService:
    """Builds per-student, per-year report cards."""

    def __init__(self, db: Session):
        self.db = db

    def _fetch_mark_rows(self, student_id: int, academic_year: str) -> list[Mapping[str, Any]]:
        query = (
            select(
                Mark.id,
                Mark.student_id,
                Mark.subject_id,
                Subject.subject_name,
                Subject.subject_code,
                Mark.exam_type,
                Mark.marks_obtained,
                Mark.max_marks,
                Mark.exam_date,
                Mark.academic_year,
            )
            .outerjoin(Subject, Mark.subject_id == Subject.id)
            .where(
                Mark.student_id == student_id,
                Mark.academic_year == academic_year,
            )
            .order_by(Subject.subject_name, Mark.exam_type, Mark.id)
        )
        return list(self.db.execute(query).mappings().all())

    def get_report_card(self, student_id: int, academic_year: str) -> ReportCardResponse:
        """Totals, percentage and grade for one student and academic year."""
        student = StudentService(self.db).get_student(student_id)
        records = records_from_rows(self._fetch_mark_rows(student_id, academic_year))
        subject_scores, summary = aggregate_marks(records)

        return ReportCardResponse(
            student=StudentResponse.model_validate(student),
            academic_year=academic_year,
            subject_scores=subject_scores,
            marks=records,
            summary=summary,
        )

    def export_report_card(self, student_id: int, academic_year: str) -> tuple[str, bytes]:
        """Render the report card as a printable workbook.

        Returns a download file name and the .xlsx bytes.
        """
        card = self.get_report_card(student_id, academic_year)
        student = card.student

        wb = Workbook()
        ws = wb.active
        ws.title = "Report Card"

        # Styles
        title_font = Font(bold=True, size=14)
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        total_fill = PatternFill(start_color="B4C6E7", end_color="B4C6E7", fill_type="solid")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        center_align = Alignment(horizontal="center", vertical="center")

        ws.merge_cells("A1:E1")
        title_cell = ws.cell(row=1, column=1, value=f"Report Card - {student.first_name} {student.last_name}")
        title_cell.font = title_font
        title_cell.alignment = center_align

        details = [
            ("Admission No.", student.admission_number),
            ("Roll No.", student.roll_number or ""),
            ("Class / Section", f"{student.class_id or ''} {student.section or ''}".strip()),
            ("Academic Year", card.academic_year),
        ]
        for row_idx, (label, value) in enumerate(details, start=3):
            ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
            ws.cell(row=row_idx, column=2, value=value)

        header_row = len(details) + 4
        headers = ["Subject", "Marks Obtained", "Max Marks", "Percentage", "Grade"]
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=header_row, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = center_align

        row_idx = header_row
        for row_idx, (subject_name, scores) in enumerate(card.subject_scores.items(), start=header_row + 1):
            percentage = percentage_of(scores.obtained, scores.max)
            values = [
                subject_name,
                scores.obtained,
                scores.max,
                round_percentage(percentage),
                classify_grade(percentage).value,
            ]
            for col_idx, value in enumerate(values, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value).border = thin_border

        summary = card.summary
        totals = [
            "Total",
            summary.total_marks,
            summary.total_max_marks,
            summary.overall_percentage,
            summary.overall_grade.value,
        ]
        for col_idx, value in enumerate(totals, start=1):
            cell = ws.cell(row=row_idx + 1, column=col_idx, value=value)
            cell.font = Font(bold=True)
            cell.fill = total_fill
            cell.border = thin_border

        column_widths = {"A": 25, "B": 16, "C": 12, "D": 12, "E": 10}
        for col, width in column_widths.items():
            ws.column_dimensions[col].width = width

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        filename = f"report_card_{student.admission_number}_{card.academic_year}.xlsx"
        return filename, output.getvalue()
