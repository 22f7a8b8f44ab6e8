"""
Graduation Eligibility Engine.

This module evaluates a classified transcript against a department's
graduation policy.
"""

import logging

from ..models import EligibilityConfig, EligibilityVerdict, RuleOutcome

logger = logging.getLogger(__name__)


class EligibilityAnalyzer:
    """
    Evaluates graduation eligibility rule by rule.

    THE FIVE RULES (always evaluated, always in this order):
    -------------------------------------------------------
    mandatory:               every required mandatory code passed (grade != FF)
    technical_electives:     distinct passed technical electives >= minimum
    non_technical_electives: distinct passed non-technical electives >= minimum
    credits:                 total passed credits >= minimum
    gpa:                     calculated GPA >= minimum

    Rules are independent: a failure in one never skips another, so a
    student sees every missing requirement at once. Each failed rule adds
    exactly one message. Evaluation never raises; an incomplete transcript
    just fails more rules.

    Only codes classified as Mandatory count toward mandatory coverage. A
    required course taken under an elective category does not cover it.
    """

    def __init__(self, config: EligibilityConfig = None):
        self.config = config or EligibilityConfig()

    def evaluate(self, transcript) -> EligibilityVerdict:
        """
        Evaluate one ClassifiedTranscript.

        Returns:
            EligibilityVerdict with one RuleOutcome per rule
        """
        rules = (
            self._check_mandatory(transcript),
            self._check_elective_count(
                "technical_electives", "technical elective",
                transcript.technical_electives, self.config.min_technical_electives,
            ),
            self._check_elective_count(
                "non_technical_electives", "non-technical elective",
                transcript.non_technical_electives, self.config.min_non_technical_electives,
            ),
            self._check_credits(transcript),
            self._check_gpa(transcript),
        )

        verdict = EligibilityVerdict(
            student_id=transcript.student_id,
            has_mandatory_courses=rules[0].passed,
            has_min_technical_electives=rules[1].passed,
            has_min_non_technical_electives=rules[2].passed,
            has_min_credits=rules[3].passed,
            has_min_gpa=rules[4].passed,
            is_eligible=all(outcome.passed for outcome in rules),
            missing_requirements=tuple(outcome.message for outcome in rules if not outcome.passed),
            rules=rules,
        )
        logger.debug(
            "Eligibility for %s: %s (%s missing)",
            transcript.student_id, verdict.is_eligible, len(verdict.missing_requirements),
        )
        return verdict

    def _check_mandatory(self, transcript) -> RuleOutcome:
        required = self.config.required_mandatory_course_codes
        passed_codes = {c.course_code for c in transcript.mandatory if c.is_passed}
        # Sorted so the message is identical across runs
        missing = sorted(required - passed_codes)

        message = ""
        if missing:
            names = self.config.course_names
            listed = ", ".join(
                f"{code} ({names[code]})" if code in names else code for code in missing
            )
            message = f"Missing mandatory courses: {listed}"

        return RuleOutcome(
            rule="mandatory",
            passed=not missing,
            required=len(required),
            actual=len(required) - len(missing),
            message=message,
        )

    @staticmethod
    def _check_elective_count(rule: str, label: str, courses, minimum: int) -> RuleOutcome:
        completed = len({c.course_code for c in courses if c.is_passed})
        passed = completed >= minimum

        message = ""
        if not passed:
            message = (
                f"Need {minimum - completed} more {label} course(s) "
                f"({completed} of {minimum} completed)"
            )
        return RuleOutcome(rule=rule, passed=passed, required=minimum, actual=completed, message=message)

    def _check_credits(self, transcript) -> RuleOutcome:
        minimum = self.config.min_total_credits
        total = transcript.total_credits
        passed = total >= minimum

        message = ""
        if not passed:
            message = f"Need {minimum - total:g} more credits ({total:g} of {minimum:g} completed)"
        return RuleOutcome(rule="credits", passed=passed, required=minimum, actual=total, message=message)

    def _check_gpa(self, transcript) -> RuleOutcome:
        minimum = self.config.min_gpa
        gpa = transcript.calculated_gpa
        passed = gpa >= minimum

        message = ""
        if not passed:
            message = f"GPA {gpa:.2f} is below the minimum {minimum:.2f}"
        return RuleOutcome(rule="gpa", passed=passed, required=minimum, actual=gpa, message=message)
