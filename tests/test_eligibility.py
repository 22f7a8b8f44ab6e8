from dataclasses import replace

import pytest

from graduation.engines import EligibilityAnalyzer
from graduation.models import EligibilityConfig

from conftest import course

RULE_FLAGS = [
    "has_mandatory_courses",
    "has_min_technical_electives",
    "has_min_non_technical_electives",
    "has_min_credits",
    "has_min_gpa",
]


def failed_flags(verdict):
    return [flag for flag in RULE_FLAGS if not getattr(verdict, flag)]


def test_meeting_every_threshold_is_eligible(classify, eligible_courses, eligibility_config):
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(eligible_courses))

    assert verdict.is_eligible
    assert verdict.missing_requirements == ()
    assert failed_flags(verdict) == []
    assert [r.rule for r in verdict.rules] == [
        "mandatory", "technical_electives", "non_technical_electives", "credits", "gpa",
    ]


def test_missing_mandatory_course(classify, eligible_courses, eligibility_config):
    eligible_courses[1] = course("M3", "BB", 5, "Mandatory")
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(eligible_courses))

    assert failed_flags(verdict) == ["has_mandatory_courses"]
    assert verdict.missing_requirements == ("Missing mandatory courses: M2 (Course Two)",)
    assert not verdict.is_eligible


def test_failed_mandatory_course_does_not_cover_requirement(classify, eligibility_config):
    courses = [course("M1", "AA", 5, "M"), course("M2", "FF", 5, "M")]
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(courses))
    assert not verdict.has_mandatory_courses
    assert verdict.rules[0].actual == 1


def test_technical_elective_shortfall(classify, eligible_courses, eligibility_config):
    eligible_courses[3] = replace(eligible_courses[3], declared_type="Mandatory")
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(eligible_courses))

    assert failed_flags(verdict) == ["has_min_technical_electives"]
    assert verdict.missing_requirements == (
        "Need 1 more technical elective course(s) (1 of 2 completed)",
    )


def test_non_technical_elective_shortfall(classify, eligible_courses, eligibility_config):
    eligible_courses[4] = replace(eligible_courses[4], declared_type="Mandatory")
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(eligible_courses))

    assert failed_flags(verdict) == ["has_min_non_technical_electives"]
    assert verdict.missing_requirements == (
        "Need 1 more non-technical elective course(s) (0 of 1 completed)",
    )


def test_credit_shortfall(classify, eligible_courses, eligibility_config):
    config = replace(eligibility_config, min_total_credits=24)
    verdict = EligibilityAnalyzer(config).evaluate(classify(eligible_courses))

    assert failed_flags(verdict) == ["has_min_credits"]
    assert verdict.missing_requirements == ("Need 4 more credits (20 of 24 completed)",)


def test_gpa_below_minimum(classify, eligible_courses, eligibility_config):
    config = replace(eligibility_config, min_gpa=3.5)
    verdict = EligibilityAnalyzer(config).evaluate(classify(eligible_courses))

    assert failed_flags(verdict) == ["has_min_gpa"]
    assert verdict.missing_requirements == ("GPA 3.30 is below the minimum 3.50",)


def test_repeated_elective_counts_once(classify, eligibility_config):
    courses = [
        course("T1", "FF", 4, "TE"),
        course("T1", "CC", 4, "TE"),
        course("T1", "BB", 4, "TE"),
    ]
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify(courses))
    assert verdict.rules[1].actual == 1


def test_empty_transcript_fails_every_rule_without_raising(classify, eligibility_config):
    verdict = EligibilityAnalyzer(eligibility_config).evaluate(classify([]))

    assert failed_flags(verdict) == RULE_FLAGS
    assert len(verdict.missing_requirements) == 5
    assert verdict.missing_requirements[0] == "Missing mandatory courses: M1 (Course One), M2 (Course Two)"


def test_default_policy_thresholds():
    config = EligibilityConfig()
    assert config.min_technical_electives == 6
    assert config.min_non_technical_electives == 3
    assert config.min_total_credits == 240
    assert config.min_gpa == 2.0
    assert config.required_mandatory_course_codes == frozenset()


def test_config_from_dict_overrides_only_given_keys():
    config = EligibilityConfig.from_dict({"min_gpa": "2.5", "required_mandatory_course_codes": ["A"]})
    assert config.min_gpa == 2.5
    assert config.required_mandatory_course_codes == frozenset({"A"})
    assert config.min_total_credits == 240


def test_evaluation_is_deterministic(classify, eligible_courses, eligibility_config):
    analyzer = EligibilityAnalyzer(eligibility_config)
    transcript = classify(eligible_courses[:2])
    assert analyzer.evaluate(transcript) == analyzer.evaluate(transcript)


@pytest.mark.parametrize("gpa_floor, eligible", [(3.3, True), (3.31, False)])
def test_gpa_bound_is_inclusive(classify, eligible_courses, eligibility_config, gpa_floor, eligible):
    config = replace(eligibility_config, min_gpa=gpa_floor)
    assert EligibilityAnalyzer(config).evaluate(classify(eligible_courses)).is_eligible is eligible
