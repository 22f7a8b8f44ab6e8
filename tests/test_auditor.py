import pytest

from graduation import GraduationAuditor, InMemoryTranscriptRepository
from graduation.errors import (
    InvalidResolutionError,
    MissingHeadersError,
    UnclassifiedCourseError,
    UnknownConflictError,
)
from graduation.models import WarningKind

from conftest import CONFLICT_HEADER, ELIGIBILITY_HEADER

BATCH = (
    CONFLICT_HEADER + "\n"
    "123,Ann,CS101,Intro,4,AA,F23,3.40,CE\n"
    "123,Ann,CS102,Algo,4,BB,F23,3.41,CE\n"
    "456,Bob,CS101,Intro,4,CC,F23,2.00,CE\n"
    "456,Bob,CS102,Algo,4,AA,F23,3.80,CE\n"
)


def test_audit_table_scenario(scenario_csv):
    table = GraduationAuditor().audit_table(scenario_csv)

    assert len(table.reports) == 1
    report = table.reports[0]
    assert report.ok
    assert report.transcript.calculated_gpa == pytest.approx(3.5)
    assert report.transcript.total_credits == 8
    # default policy needs far more than two courses
    assert not report.verdict.is_eligible
    assert not report.verdict.has_min_credits


def test_audit_table_with_curriculum(small_curriculum):
    text = (
        ELIGIBILITY_HEADER + "\n"
        "1,Ann,CE,CS101,Intro,AA,4,F23,\n"
        "1,Ann,CE,CS102,Algo,BB,4,F23,\n"
        "1,Ann,CE,CS401,ML,BA,3,S24,\n"
        "1,Ann,CE,HUM101,Humanities,CC,2,S24,\n"
        "2,Bob,CE,CS101,Intro,FF,4,F23,\n"
    )
    table = GraduationAuditor().audit_table(text, small_curriculum)

    ann, bob = table.reports
    assert ann.verdict.is_eligible
    assert not bob.verdict.is_eligible
    assert bob.verdict.missing_requirements[0] == "Missing mandatory courses: CS101 (Intro), CS102 (Algo)"


def test_unclassified_course_fails_only_that_student(small_curriculum):
    text = (
        ELIGIBILITY_HEADER + "\n"
        "1,Ann,CE,CS999,Mystery,AA,4,F23,\n"
        "2,Bob,CE,CS101,Intro,AA,4,F23,\n"
    )
    table = GraduationAuditor().audit_table(text, small_curriculum)

    ann, bob = table.reports
    assert isinstance(ann.error, UnclassifiedCourseError)
    assert ann.transcript is None and ann.verdict is None
    assert bob.ok


def test_default_mandatory_flag(small_curriculum):
    text = ELIGIBILITY_HEADER + "\n1,Ann,CE,CS999,Mystery,AA,4,F23,\n"
    report = GraduationAuditor(default_to_mandatory=True).audit_table(text, small_curriculum).reports[0]

    assert report.ok
    assert [w.kind for w in report.warnings] == [WarningKind.UNCLASSIFIED_DEFAULT]


def test_file_and_identity_warnings_are_separated():
    text = (
        ELIGIBILITY_HEADER + "\n"
        "1,,CE,CS101,Intro,AA,4,F23,Mandatory\n"
        "1,,CE,CS102,Algo,QQ,4,F23,Mandatory\n"
        "broken row\n"
    )
    table = GraduationAuditor().audit_table(text)

    assert sorted(w.kind.value for w in table.warnings) == ["malformed_row", "unknown_grade"]
    assert [w.field for w in table.reports[0].warnings] == ["student_name"]


def test_audit_table_rejects_missing_headers():
    with pytest.raises(MissingHeadersError):
        GraduationAuditor().audit_table("Student ID\n1")


def test_audit_document(transcript_pdf):
    report = GraduationAuditor(default_to_mandatory=True).audit_document(transcript_pdf)

    assert report.ok
    assert report.draft.student_id == "2019510001"
    assert report.transcript.calculated_gpa == pytest.approx(46 / 15)
    assert report.transcript.total_credits == 15
    kinds = {w.kind for w in report.warnings}
    assert WarningKind.GPA_MISMATCH in kinds
    assert WarningKind.UNCLASSIFIED_DEFAULT in kinds


def test_ingest_batch_stores_valid_records_and_holds_conflicts():
    repository = InMemoryTranscriptRepository()
    auditor = GraduationAuditor(repository)

    detection = auditor.ingest_batch(BATCH, source="batch.csv")

    assert [d.student_id for d in repository.list()] == ["123"]
    assert [g.student_id for g in auditor.pending_conflicts()] == ["456"]
    assert detection.conflicts[0].source == "batch.csv"


def test_resolve_conflict_stores_canonical_record():
    repository = InMemoryTranscriptRepository()
    auditor = GraduationAuditor(repository)
    conflict = auditor.ingest_batch(BATCH, source="batch.csv").conflicts[0]

    with pytest.raises(InvalidResolutionError):
        auditor.resolve_conflict(conflict.conflict_id, 5)

    stored = auditor.resolve_conflict(conflict.conflict_id, 1)

    assert stored.courses == conflict.entries[1].draft.courses
    assert [d.student_id for d in repository.list()] == ["123", "456"]
    assert auditor.pending_conflicts() == []
    with pytest.raises(UnknownConflictError):
        auditor.resolve_conflict(conflict.conflict_id, 1)


def test_repository_replaces_and_deletes():
    repository = InMemoryTranscriptRepository()
    auditor = GraduationAuditor(repository)
    auditor.ingest_batch(BATCH)
    auditor.ingest_batch(BATCH)

    assert len(repository.list()) == 1
    assert repository.delete("123")
    assert not repository.delete("123")
    assert repository.list() == []


def test_repository_keeps_every_record_without_student_id():
    repository = InMemoryTranscriptRepository()
    auditor = GraduationAuditor(repository)
    text = (
        CONFLICT_HEADER + "\n"
        ",Ann,CS101,Intro,4,AA,F23,3.40,CE\n"
        ",Bob,CS102,Algo,4,BB,F23,3.40,EE\n"
    )

    detection = auditor.ingest_batch(text)

    assert detection.conflicts == []
    assert [d.student_name for d in repository.list()] == ["Ann", "Bob"]
    assert not repository.delete(detection.valid[0].student_id)
