"""
Eligibility data models.

Contains the per-institution EligibilityConfig and the verdict produced by
the eligibility analyzer.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..config import (
    DEFAULT_MIN_TECHNICAL_ELECTIVES,
    DEFAULT_MIN_NON_TECHNICAL_ELECTIVES,
    DEFAULT_MIN_TOTAL_CREDITS,
    DEFAULT_MIN_GPA,
)


@dataclass(frozen=True)
class EligibilityConfig:
    """
    Graduation thresholds for one curriculum.

    The defaults reflect one observed engineering-faculty policy. Institutions
    override them per department, usually through a curriculum file loaded by
    DataLoader.

    Attributes:
        required_mandatory_course_codes: Codes that must all be passed
        min_technical_electives: Passed technical electives needed
        min_non_technical_electives: Passed non-technical electives needed
        min_total_credits: Passed credits needed
        min_gpa: Minimum calculated GPA
        course_names: Display names used in missing-requirement messages
    """
    required_mandatory_course_codes: frozenset = frozenset()
    min_technical_electives: int = DEFAULT_MIN_TECHNICAL_ELECTIVES
    min_non_technical_electives: int = DEFAULT_MIN_NON_TECHNICAL_ELECTIVES
    min_total_credits: int = DEFAULT_MIN_TOTAL_CREDITS
    min_gpa: float = DEFAULT_MIN_GPA
    course_names: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: dict, course_names: Optional[dict] = None) -> "EligibilityConfig":
        """
        Build a config from a policy mapping (e.g., the "policy" block of a
        curriculum file). Missing keys keep their defaults.
        """
        defaults = cls()
        return cls(
            required_mandatory_course_codes=frozenset(
                data.get("required_mandatory_course_codes", defaults.required_mandatory_course_codes)
            ),
            min_technical_electives=int(
                data.get("min_technical_electives", defaults.min_technical_electives)
            ),
            min_non_technical_electives=int(
                data.get("min_non_technical_electives", defaults.min_non_technical_electives)
            ),
            min_total_credits=int(data.get("min_total_credits", defaults.min_total_credits)),
            min_gpa=float(data.get("min_gpa", defaults.min_gpa)),
            course_names=dict(course_names or {}),
        )


@dataclass(frozen=True)
class RuleOutcome:
    """
    Result of one eligibility rule.

    `required` and `actual` are the numbers the rule compared; for mandatory
    coverage they are course counts (required codes vs. covered codes).
    `message` is empty when the rule passed.
    """
    rule: str
    passed: bool
    required: float
    actual: float
    message: str = ""


@dataclass(frozen=True)
class EligibilityVerdict:
    """
    Graduation verdict for one classified transcript.

    is_eligible is the AND of the five rule booleans; missing_requirements
    lists one message per failed rule, in rule order.
    """
    student_id: object
    has_mandatory_courses: bool
    has_min_technical_electives: bool
    has_min_non_technical_electives: bool
    has_min_credits: bool
    has_min_gpa: bool
    is_eligible: bool
    missing_requirements: tuple
    rules: tuple
