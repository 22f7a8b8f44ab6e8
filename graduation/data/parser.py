"""
Transcript ingestion front ends.

This module turns uploaded files (transcript documents, eligibility tables,
secretary batch tables) into StudentTranscriptDraft values. Every front end
goes through the same field extractor so that document and table uploads
agree on identity fields.
"""

import logging
from dataclasses import replace

from ..config import GRADE_POINTS, ELIGIBILITY_HEADERS, CONFLICT_HEADERS, TABLE_DELIMITER
from ..models import (
    RawCourseRecord,
    StudentTranscriptDraft,
    UnresolvedField,
    IngestionWarning,
    WarningKind,
)
from .document import DocumentTextExtractor
from .fields import extract_fields
from .numbers import normalize_decimal
from .tabular import parse_table

logger = logging.getLogger(__name__)

# Draft attributes the field extractor can fill besides the identity fields
_HEADER_FIELDS = (
    "national_id",
    "faculty",
    "program",
    "education_level",
    "education_language",
    "registration_date",
    "registration_period",
    "registration_type",
    "graduation_date",
)

# Eligibility table column -> label understood by the English rules
_IDENTITY_LABELS = {
    "Student ID": "Student ID",
    "Student Name": "Student Name",
    "Department": "Department",
}


class TranscriptParser:
    """
    Parses uploaded transcripts into drafts.

    THREE INPUT SHAPES:
    - Documents (PDF bytes): text is recovered by DocumentTextExtractor, then
      label rules and course-table mode pick out fields and courses.
    - Eligibility tables: one row per course, identity repeated on every row.
      Rows are grouped by student in first-appearance order.
    - Conflict batches: one row per course as uploaded by a secretary, with
      the declared GPA repeated on every row. Each row becomes its own
      single-course draft; the conflict detector merges them afterwards.

    Every method returns (result, warnings). Fatal problems (missing headers,
    unreadable documents) raise GraduationError subclasses instead.

    Usage:
        parser = TranscriptParser()
        drafts, warnings = parser.parse_eligibility_table(csv_text)
    """

    def __init__(self, extractor: DocumentTextExtractor = None, delimiter: str = TABLE_DELIMITER):
        self.extractor = extractor or DocumentTextExtractor()
        self.delimiter = delimiter

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def parse_document(self, data: bytes) -> tuple:
        """
        Parse one transcript document.

        Returns:
            (StudentTranscriptDraft, [IngestionWarning, ...])

        Raises:
            NoReadableTextError: if no text can be recovered
        """
        text = self.extractor.extract(data)
        extraction = extract_fields(text.splitlines())

        draft = StudentTranscriptDraft(
            student_id=extraction.fields["student_id"],
            student_name=extraction.fields["student_name"],
            department=extraction.fields["department"],
            courses=tuple(extraction.courses),
            declared_gpa=extraction.fields.get("declared_gpa"),
            **{name: extraction.fields.get(name) for name in _HEADER_FIELDS},
        )
        logger.info(
            "Parsed document for student %s: %s courses, %s warnings",
            draft.student_id, len(draft.courses), len(extraction.warnings),
        )
        return draft, list(extraction.warnings)

    # -------------------------------------------------------------------------
    # Eligibility tables
    # -------------------------------------------------------------------------

    def parse_eligibility_table(self, text: str) -> tuple:
        """
        Parse an eligibility table into one draft per student.

        Identity comes from the first row seen for each student; its cells
        are flattened into "Label : value" lines and run through the same
        field extractor as documents. Each row contributes one course.

        Returns:
            ([StudentTranscriptDraft, ...], [IngestionWarning, ...])

        Raises:
            MissingHeadersError: if a required column is absent
        """
        table = parse_table(text, ELIGIBILITY_HEADERS, self.delimiter)
        warnings = list(table.warnings)

        # student key -> {"first_row": TableRow, "courses": [...]}, insertion-ordered.
        # A row without a student id is a student of its own.
        groups = {}
        for row in table.rows:
            key = row.fields["Student ID"] or (UnresolvedField("student_id"), row.line)
            group = groups.setdefault(key, {"first_row": row, "courses": []})
            course = self._course_from_row(
                row,
                code=row.fields["Course Code"],
                name=row.fields["Course Name"],
                credit=row.fields["Credits"],
                grade=row.fields["Grade"],
                semester=row.fields["Semester"],
                declared_type=row.fields["Course Type"] or None,
                warnings=warnings,
            )
            if course is not None:
                group["courses"].append(course)

        drafts = []
        for group in groups.values():
            first_row = group["first_row"]
            lines = [
                f"{label} : {first_row.fields[column]}"
                for column, label in _IDENTITY_LABELS.items()
            ]
            extraction = extract_fields(lines)
            warnings.extend(replace(w, line=first_row.line) for w in extraction.warnings)

            drafts.append(StudentTranscriptDraft(
                student_id=extraction.fields["student_id"],
                student_name=extraction.fields["student_name"],
                department=extraction.fields["department"],
                courses=tuple(group["courses"]),
                program=extraction.fields.get("program"),
                source_row=first_row.line,
            ))

        logger.info("Parsed eligibility table: %s students, %s warnings", len(drafts), len(warnings))
        return drafts, warnings

    # -------------------------------------------------------------------------
    # Conflict batches
    # -------------------------------------------------------------------------

    def parse_conflict_batch(self, text: str) -> tuple:
        """
        Parse a secretary batch into one single-course draft per row.

        The GPA cell is the declared GPA of the submission the row belongs
        to. An empty GPA is None; an unreadable one is None with a
        malformed_row warning.

        Returns:
            ([StudentTranscriptDraft, ...], [IngestionWarning, ...])

        Raises:
            MissingHeadersError: if a required column is absent
        """
        table = parse_table(text, CONFLICT_HEADERS, self.delimiter)
        warnings = list(table.warnings)

        drafts = []
        for row in table.rows:
            course = self._course_from_row(
                row,
                code=row.fields["CourseCode"],
                name=row.fields["CourseName"],
                credit=row.fields["Credit"],
                grade=row.fields["Grade"],
                semester=row.fields["Semester"],
                warnings=warnings,
            )

            identity = {}
            for attribute, column in (
                ("student_id", "StudentID"),
                ("student_name", "StudentName"),
                ("department", "Department"),
            ):
                value = row.fields[column]
                if not value:
                    message = f"Column '{column}' is empty"
                    logger.warning("line %s: %s", row.line, message)
                    warnings.append(IngestionWarning(
                        WarningKind.MISSING_FIELD, message, line=row.line, field=attribute,
                    ))
                    value = UnresolvedField(attribute)
                identity[attribute] = value

            drafts.append(StudentTranscriptDraft(
                courses=(course,) if course is not None else (),
                declared_gpa=self._gpa_from_row(row, warnings),
                source_row=row.line,
                **identity,
            ))

        logger.info("Parsed conflict batch: %s rows, %s warnings", len(drafts), len(warnings))
        return drafts, warnings

    # -------------------------------------------------------------------------
    # Row helpers
    # -------------------------------------------------------------------------

    def _course_from_row(self, row, code, name, credit, grade, semester, warnings,
                         declared_type=None):
        """Build a RawCourseRecord from table cells, or None with a warning."""
        grade = grade.upper()

        if not code:
            message = "Row has no course code; course skipped"
            logger.warning("line %s: %s", row.line, message)
            warnings.append(IngestionWarning(WarningKind.MALFORMED_ROW, message, line=row.line))
            return None

        try:
            credit_value = normalize_decimal(credit)
        except ValueError:
            credit_value = None
        if credit_value is None or credit_value < 0:
            message = f"Invalid credit '{credit}' for {code}; course skipped"
            logger.warning("line %s: %s", row.line, message)
            warnings.append(IngestionWarning(
                WarningKind.MALFORMED_ROW, message, line=row.line, field="credit",
            ))
            return None

        if grade not in GRADE_POINTS:
            message = f"Unknown grade '{grade}' for {code}; course skipped"
            logger.warning("line %s: %s", row.line, message)
            warnings.append(IngestionWarning(
                WarningKind.UNKNOWN_GRADE, message, line=row.line, field="grade",
            ))
            return None

        return RawCourseRecord(
            course_code=code,
            course_name=name,
            credit=credit_value,
            grade=grade,
            semester=semester,
            declared_type=declared_type,
        )

    @staticmethod
    def _gpa_from_row(row, warnings):
        raw = row.fields["GPA"]
        if not raw:
            return None
        try:
            return normalize_decimal(raw)
        except ValueError:
            message = f"Unreadable GPA '{raw}'"
            logger.warning("line %s: %s", row.line, message)
            warnings.append(IngestionWarning(
                WarningKind.MALFORMED_ROW, message, line=row.line, field="declared_gpa",
            ))
            return None
