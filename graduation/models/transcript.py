"""
Transcript data models.

A StudentTranscriptDraft is what extraction produces; a ClassifiedTranscript
is a draft after the classifier has attached course categories and computed
the derived numbers.
"""

from dataclasses import dataclass, fields
from typing import Optional, Union


@dataclass(frozen=True)
class UnresolvedField:
    """
    Marker stored in place of an identity field that extraction could not find.

    It is falsy and prints as "<unresolved NAME>" (for example
    "<unresolved student_id>"), so it can never be mistaken for real data
    in a report or a storage call.
    """
    field: str

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"<unresolved {self.field}>"


IdentityValue = Union[str, UnresolvedField]


@dataclass(frozen=True)
class StudentTranscriptDraft:
    """
    A semi-structured transcript as recovered from one document or table.

    `student_id` is the natural key across the pipeline. `declared_gpa` is
    whatever the source printed; it is kept for cross-checking and for
    telling conflicting submissions apart, never used as the real GPA.
    """
    student_id: IdentityValue
    student_name: IdentityValue
    department: IdentityValue
    courses: tuple = ()
    declared_gpa: Optional[float] = None
    national_id: Optional[str] = None
    faculty: Optional[str] = None
    program: Optional[str] = None
    education_level: Optional[str] = None
    education_language: Optional[str] = None
    registration_date: Optional[str] = None
    registration_period: Optional[str] = None
    registration_type: Optional[str] = None
    graduation_date: Optional[str] = None
    source_row: Optional[int] = None

    @property
    def unresolved_fields(self) -> list:
        """Names of the fields that hold an UnresolvedField marker."""
        return [
            f.name for f in fields(self)
            if isinstance(getattr(self, f.name), UnresolvedField)
        ]

    @property
    def is_resolved(self) -> bool:
        return not self.unresolved_fields

    @property
    def group_key(self):
        """
        Key that collects the rows of one student.

        A draft without a student id never groups with another row; it is
        keyed by its own source row instead.
        """
        if isinstance(self.student_id, UnresolvedField):
            return (self.student_id, self.source_row)
        return self.student_id


@dataclass(frozen=True)
class ClassifiedTranscript:
    """
    A draft after classification.

    Example for a two-course transcript:
        calculated_gpa: 3.5       # unrounded, recomputed from courses
        total_credits: 8.0        # credits of passed (non-FF) courses
        mandatory: (CS101, CS102)
        technical_electives: ()
        non_technical_electives: ()
    """
    draft: StudentTranscriptDraft
    courses: tuple                 # ParsedCourse values, original order
    calculated_gpa: float
    total_credits: float
    mandatory: tuple
    technical_electives: tuple
    non_technical_electives: tuple

    @property
    def student_id(self) -> IdentityValue:
        return self.draft.student_id

    @property
    def student_name(self) -> IdentityValue:
        return self.draft.student_name

    @property
    def department(self) -> IdentityValue:
        return self.draft.department

    @property
    def declared_gpa(self) -> Optional[float]:
        return self.draft.declared_gpa

    @property
    def display_gpa(self) -> float:
        """GPA rounded to two decimals for display only."""
        return round(self.calculated_gpa, 2)
