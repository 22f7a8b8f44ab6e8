"""
Conflict data models.

A conflict exists when one upload contains two or more submissions for the
same student whose declared GPAs disagree. The group lives until a reviewer
picks the canonical submission.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConflictEntry:
    """One distinct submission inside a conflict, with the row it started on."""
    draft: object            # StudentTranscriptDraft
    source_row: int


@dataclass(frozen=True)
class ConflictGroup:
    """
    All distinct submissions for one student found in one upload.

    Invariant: len(entries) >= 2 and the entries' declared GPAs differ
    pairwise by more than GPA_EPSILON.
    """
    conflict_id: str
    student_id: object
    student_name: object
    department: object
    source: str
    entries: tuple


@dataclass(frozen=True)
class ResolutionDecision:
    """A reviewer's choice: keep entry `chosen_entry_index` of the conflict."""
    conflict_id: str
    chosen_entry_index: int


@dataclass
class BatchDetection:
    """
    Output of batch conflict detection.

    valid: drafts ready to persist (one per student without a conflict)
    conflicts: groups awaiting human review
    warnings: IngestionWarning values collected while parsing the batch
    """
    valid: list = field(default_factory=list)
    conflicts: list = field(default_factory=list)
    warnings: list = field(default_factory=list)
