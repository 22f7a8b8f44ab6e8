"""
Graduation Auditor - Main Orchestrator.

This module contains the GraduationAuditor class that wires ingestion,
classification, eligibility and conflict handling together. It holds no
display logic; callers render the returned reports however they like.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .data import TranscriptParser, Curriculum
from .engines import CourseClassifier, EligibilityAnalyzer, ConflictDetector, ConflictResolver
from .errors import GraduationError
from .models import ResolutionDecision, EligibilityConfig
from .repository import TranscriptRepository, InMemoryTranscriptRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditReport:
    """
    Audit result for one student.

    When classification failed, `error` holds the exception and
    `transcript`/`verdict` are None; the draft and the warnings gathered so
    far are still available.
    """
    draft: object
    transcript: Optional[object] = None
    verdict: Optional[object] = None
    warnings: list = field(default_factory=list)
    error: Optional[GraduationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TableAudit:
    """Reports for every student of one table, plus file-level warnings (skipped rows)."""
    reports: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


class GraduationAuditor:
    """
    Main interface for the graduation engine.

    ═══════════════════════════════════════════════════════════════════════════
    ROLE: ORCHESTRATOR
    ═══════════════════════════════════════════════════════════════════════════

    1. Parses an upload (TranscriptParser)
    2. Classifies each draft against a curriculum (CourseClassifier)
    3. Evaluates eligibility (EligibilityAnalyzer)
    4. For secretary batches, splits valid records from conflicts
       (ConflictDetector) and keeps conflicts until resolved (ConflictResolver)

    Storage is injected. Only canonical records (valid batch records and
    resolved conflicts) are written to the repository; audits are read-only.

    ═══════════════════════════════════════════════════════════════════════════

    USAGE:
        auditor = GraduationAuditor()
        curriculum = DataLoader().load_curriculum("computer_engineering")

        table = auditor.audit_table(csv_text, curriculum)
        for report in table.reports:
            print(report.draft.student_id, report.verdict.is_eligible)

        batch = auditor.ingest_batch(csv_text, source="upload.csv")
        draft = auditor.resolve_conflict(batch.conflicts[0].conflict_id, 1)
    """

    def __init__(self, repository: TranscriptRepository = None, default_to_mandatory: bool = False,
                 parser: TranscriptParser = None):
        self.repository = repository if repository is not None else InMemoryTranscriptRepository()
        self.default_to_mandatory = default_to_mandatory
        self.parser = parser or TranscriptParser()
        self.detector = ConflictDetector()
        self.resolver = ConflictResolver()

    # -------------------------------------------------------------------------
    # Eligibility audits
    # -------------------------------------------------------------------------

    def audit_table(self, text: str, curriculum: Curriculum = None) -> TableAudit:
        """
        Audit every student of an eligibility table.

        Raises:
            MissingHeadersError: the table lacks a required column
        """
        drafts, warnings = self.parser.parse_eligibility_table(text)
        # Identity warnings carry the student's first row; skipped rows stay file-level
        table = TableAudit(warnings=[w for w in warnings if w.field not in _IDENTITY_FIELDS])
        for draft in drafts:
            identity_warnings = [
                w for w in warnings
                if w.field in _IDENTITY_FIELDS and w.line == draft.source_row
            ]
            table.reports.append(self._audit_draft(draft, curriculum, identity_warnings))
        return table

    def audit_document(self, data: bytes, curriculum: Curriculum = None) -> AuditReport:
        """
        Audit one transcript document.

        Raises:
            NoReadableTextError: no text could be recovered
        """
        draft, warnings = self.parser.parse_document(data)
        return self._audit_draft(draft, curriculum, warnings)

    def _audit_draft(self, draft, curriculum, warnings) -> AuditReport:
        report = AuditReport(draft=draft, warnings=list(warnings))
        classifier = CourseClassifier(
            curriculum.course_types if curriculum else None,
            default_to_mandatory=self.default_to_mandatory,
        )
        analyzer = EligibilityAnalyzer(curriculum.config if curriculum else EligibilityConfig())

        try:
            transcript, class_warnings = classifier.classify_with_warnings(draft)
        except GraduationError as exc:
            logger.error("Cannot audit student %s: %s", draft.student_id, exc)
            report.error = exc
            return report

        report.transcript = transcript
        report.warnings.extend(class_warnings)
        report.verdict = analyzer.evaluate(transcript)
        return report

    # -------------------------------------------------------------------------
    # Batch ingestion and conflicts
    # -------------------------------------------------------------------------

    def ingest_batch(self, text: str, source: str = ""):
        """
        Ingest a secretary batch table.

        Valid records are stored in the repository right away; conflicts
        are registered for review.

        Returns:
            BatchDetection

        Raises:
            MissingHeadersError: the table lacks a required column
        """
        drafts, warnings = self.parser.parse_conflict_batch(text)
        detection = self.detector.detect(drafts, source)
        detection.warnings.extend(warnings)

        for draft in detection.valid:
            self.repository.create(draft)
        self.resolver.register(detection.conflicts)
        return detection

    def resolve_conflict(self, conflict_id: str, chosen_entry_index: int):
        """
        Resolve a pending conflict and store the canonical draft.

        Raises:
            UnknownConflictError: unknown or already resolved id
            InvalidResolutionError: index out of range (group stays pending)
        """
        draft = self.resolver.resolve(ResolutionDecision(conflict_id, chosen_entry_index))
        return self.repository.create(draft)

    def pending_conflicts(self) -> list:
        return self.resolver.pending()


_IDENTITY_FIELDS = ("student_id", "student_name", "department")
