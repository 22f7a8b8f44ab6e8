"""
GPA calculation and course classification.

This module attaches a CourseType to every course of a draft and computes
the derived numbers (GPA, credit total) the eligibility rules work from.
"""

import logging

from ..config import GRADE_POINTS, FAILING_GRADE, GPA_MISMATCH_TOLERANCE
from ..errors import UnclassifiedCourseError
from ..models import (
    CourseType,
    ParsedCourse,
    ClassifiedTranscript,
    IngestionWarning,
    WarningKind,
)

logger = logging.getLogger(__name__)


def calculate_gpa(courses) -> float:
    """
    Credit-weighted grade point average.

    FF courses and zero-credit courses are left out of both sums. Returns
    0.0 when nothing counts. The value is not rounded; rounding is a
    display concern (see ClassifiedTranscript.display_gpa).

    Example:
        CS101 4 credits AA (4.0) + CS102 4 credits BB (3.0)
        -> (16 + 12) / 8 = 3.5
    """
    weighted = 0.0
    credits = 0.0
    for course in courses:
        if course.grade == FAILING_GRADE or course.credit <= 0:
            continue
        weighted += GRADE_POINTS[course.grade] * course.credit
        credits += course.credit
    if credits == 0:
        return 0.0
    return weighted / credits


class CourseClassifier:
    """
    Classifies the courses of a draft transcript.

    CLASSIFICATION ORDER:
    --------------------
    1. The course's own declared type (the "Course Type" cell of a table).
       Parsed leniently, so "Technical Elective", "TE" and "technical"
       agree. A declared type that cannot be parsed is an error, never a
       silent default.
    2. The course-type map (usually a Curriculum's course_types).
    3. Mandatory, if default_to_mandatory is set. Each defaulted course is
       reported with an unclassified_default warning.
    4. Otherwise UnclassifiedCourseError.
    """

    def __init__(self, course_types: dict = None, default_to_mandatory: bool = False):
        self.course_types = dict(course_types or {})
        self.default_to_mandatory = default_to_mandatory

    def course_type_for(self, record, warnings: list) -> CourseType:
        """Resolve the CourseType of one RawCourseRecord."""
        if record.declared_type:
            course_type = CourseType.parse(record.declared_type)
            if course_type is None:
                raise UnclassifiedCourseError(record.course_code, record.declared_type)
            return course_type

        if record.course_code in self.course_types:
            return self.course_types[record.course_code]

        if self.default_to_mandatory:
            message = f"Course {record.course_code} is not in the course-type map; counted as Mandatory"
            logger.warning(message)
            warnings.append(IngestionWarning(
                WarningKind.UNCLASSIFIED_DEFAULT, message, field="course_type",
            ))
            return CourseType.MANDATORY

        raise UnclassifiedCourseError(record.course_code)

    def classify(self, draft) -> ClassifiedTranscript:
        """Classify a draft, discarding warnings. See classify_with_warnings."""
        transcript, _ = self.classify_with_warnings(draft)
        return transcript

    def classify_with_warnings(self, draft) -> tuple:
        """
        Classify every course of a draft and compute GPA and credits.

        Returns:
            (ClassifiedTranscript, [IngestionWarning, ...])

        Raises:
            UnclassifiedCourseError: on the first course with no usable type
        """
        warnings = []
        parsed = []
        for record in draft.courses:
            course_type = self.course_type_for(record, warnings)
            parsed.append(ParsedCourse(
                record=record,
                course_type=course_type,
                grade_points=GRADE_POINTS[record.grade],
            ))

        calculated_gpa = calculate_gpa(parsed)
        total_credits = sum(course.credit for course in parsed if course.is_passed)

        if draft.declared_gpa is not None and abs(draft.declared_gpa - calculated_gpa) > GPA_MISMATCH_TOLERANCE:
            message = (
                f"Declared GPA {draft.declared_gpa:.2f} differs from calculated GPA "
                f"{calculated_gpa:.2f} for student {draft.student_id}"
            )
            logger.warning(message)
            warnings.append(IngestionWarning(WarningKind.GPA_MISMATCH, message, field="declared_gpa"))

        transcript = ClassifiedTranscript(
            draft=draft,
            courses=tuple(parsed),
            calculated_gpa=calculated_gpa,
            total_credits=float(total_credits),
            mandatory=tuple(c for c in parsed if c.course_type is CourseType.MANDATORY),
            technical_electives=tuple(
                c for c in parsed if c.course_type is CourseType.TECHNICAL_ELECTIVE
            ),
            non_technical_electives=tuple(
                c for c in parsed if c.course_type is CourseType.NON_TECHNICAL_ELECTIVE
            ),
        )
        logger.debug(
            "Classified %s: GPA %.4f, %s credits", draft.student_id, calculated_gpa, total_credits,
        )
        return transcript, warnings
