"""
Course data models.

Contains the CourseType enum and the two course records that flow through
the pipeline: RawCourseRecord (what ingestion recovered) and ParsedCourse
(a raw record after classification).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import FAILING_GRADE


class CourseType(Enum):
    """
    The three mutually exclusive course categories used by the eligibility rules.

    MANDATORY: Required by the curriculum; coverage is checked course by course
    TECHNICAL_ELECTIVE: Counted against the technical elective minimum
    NON_TECHNICAL_ELECTIVE: Counted against the non-technical elective minimum
    """
    MANDATORY = "Mandatory"
    TECHNICAL_ELECTIVE = "Technical Elective"
    NON_TECHNICAL_ELECTIVE = "Non-Technical Elective"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["CourseType"]:
        """
        Leniently parse a course-type label.

        Spacing, case, hyphens and underscores are ignored, so "Technical
        Elective", "TechnicalElective" and "technical-elective" all match.
        Returns None when the label is not recognized.
        """
        if not text:
            return None
        key = "".join(ch for ch in text.lower() if ch.isalnum())
        return _TYPE_ALIASES.get(key)


_TYPE_ALIASES = {
    "mandatory": CourseType.MANDATORY,
    "compulsory": CourseType.MANDATORY,
    "required": CourseType.MANDATORY,
    "zorunlu": CourseType.MANDATORY,
    "m": CourseType.MANDATORY,
    "technicalelective": CourseType.TECHNICAL_ELECTIVE,
    "technical": CourseType.TECHNICAL_ELECTIVE,
    "te": CourseType.TECHNICAL_ELECTIVE,
    "tekniksecmeli": CourseType.TECHNICAL_ELECTIVE,
    "teknikseçmeli": CourseType.TECHNICAL_ELECTIVE,
    "nontechnicalelective": CourseType.NON_TECHNICAL_ELECTIVE,
    "nontechnical": CourseType.NON_TECHNICAL_ELECTIVE,
    "nte": CourseType.NON_TECHNICAL_ELECTIVE,
    "teknikolmayansecmeli": CourseType.NON_TECHNICAL_ELECTIVE,
    "teknikolmayanseçmeli": CourseType.NON_TECHNICAL_ELECTIVE,
}


@dataclass(frozen=True)
class RawCourseRecord:
    """
    A single course line recovered from a transcript.

    Grades on a RawCourseRecord have already been checked against the grade
    table; unknown grades never make it this far.

    Attributes:
        course_code: Course code as printed (e.g., "CENG111")
        course_name: Course title
        credit: Credit used for GPA weighting and totals (ECTS when the
                source printed both a local credit and an ECTS value)
        grade: Letter grade (AA ... FF)
        semester: Term label (e.g., "Güz", "Bahar", "F23")
        year: Academic year range (e.g., "2019-2020"), empty when unknown
        local_credit: National credit when the source also printed ECTS
        language: Instruction language annotation (e.g., "EN")
        declared_type: Raw "Course Type" cell from tabular sources
    """
    course_code: str
    course_name: str
    credit: float
    grade: str
    semester: str = ""
    year: str = ""
    local_credit: Optional[float] = None
    language: Optional[str] = None
    declared_type: Optional[str] = None

    @property
    def is_passed(self) -> bool:
        return self.grade != FAILING_GRADE


@dataclass(frozen=True)
class ParsedCourse:
    """A course record after classification, with its grade points resolved."""
    record: RawCourseRecord
    course_type: CourseType
    grade_points: float

    @property
    def course_code(self) -> str:
        return self.record.course_code

    @property
    def course_name(self) -> str:
        return self.record.course_name

    @property
    def credit(self) -> float:
        return self.record.credit

    @property
    def grade(self) -> str:
        return self.record.grade

    @property
    def is_passed(self) -> bool:
        return self.record.is_passed
