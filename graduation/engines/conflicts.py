"""
Conflict detection and resolution for batch uploads.

A secretary upload may contain the same student twice with different
declared GPAs (two versions of one transcript pasted into one sheet). Those
submissions cannot both be right, so they are held back as a ConflictGroup
until a reviewer picks one.
"""

import hashlib
import logging
from dataclasses import replace

from ..config import GPA_EPSILON
from ..errors import UnknownConflictError, InvalidResolutionError
from ..models import ConflictEntry, ConflictGroup, BatchDetection

logger = logging.getLogger(__name__)


def gpas_agree(first, second, epsilon: float = GPA_EPSILON) -> bool:
    """
    Whether two declared GPAs belong to the same submission.

    Two missing GPAs agree; a missing GPA never agrees with a present one.
    The distance is rounded to 6 places so that float noise in values like
    3.41 - 3.40 does not push it past the tolerance.
    """
    if first is None or second is None:
        return first is None and second is None
    return round(abs(first - second), 6) <= epsilon


def conflict_id_for(source: str, student_id, gpas) -> str:
    """
    Deterministic conflict id: conflict_<student_id>_<digest>.

    The digest covers the upload name, the student and the entry GPAs, so
    re-uploading the same file yields the same id.
    """
    payload = "|".join([source, str(student_id)] + ["" if g is None else repr(g) for g in gpas])
    digest = hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]
    return f"conflict_{student_id}_{digest}"


class ConflictDetector:
    """
    Splits one upload's drafts into valid records and conflicts.

    ALGORITHM (single pass):
    -----------------------
    1. Group drafts by student_id, keeping first-appearance order. A draft
       with an unresolved student_id is a group of its own.
    2. Inside a group, each incoming draft merges into the FIRST entry whose
       declared GPA agrees within epsilon: course lists are concatenated and
       the entry keeps the provenance of its first row. A draft that agrees
       with no entry opens a new entry.
    3. A group that ends with one entry is a valid record; a group with two
       or more entries becomes a ConflictGroup.

    Example:
        rows for "123" with GPA 3.40, 3.41 -> one valid draft (2 courses)
        rows for "123" with GPA 3.40, 3.80 -> one ConflictGroup, 2 entries
    """

    def __init__(self, epsilon: float = GPA_EPSILON):
        self.epsilon = epsilon

    def detect(self, drafts, source: str = "") -> BatchDetection:
        """
        Run detection over one batch.

        Args:
            drafts: StudentTranscriptDraft values from one ingestion call
            source: Upload name, used for conflict ids

        Returns:
            BatchDetection (warnings are left for the caller to fill)
        """
        groups = {}  # group key -> [ConflictEntry, ...], insertion-ordered
        for draft in drafts:
            entries = groups.setdefault(draft.group_key, [])
            for index, entry in enumerate(entries):
                if gpas_agree(entry.draft.declared_gpa, draft.declared_gpa, self.epsilon):
                    merged = replace(entry.draft, courses=entry.draft.courses + draft.courses)
                    entries[index] = ConflictEntry(draft=merged, source_row=entry.source_row)
                    break
            else:
                entries.append(ConflictEntry(draft=draft, source_row=draft.source_row))

        result = BatchDetection()
        for entries in groups.values():
            if len(entries) == 1:
                result.valid.append(entries[0].draft)
                continue

            first = entries[0].draft
            student_id = first.student_id
            group = ConflictGroup(
                conflict_id=conflict_id_for(
                    source, student_id, [e.draft.declared_gpa for e in entries],
                ),
                student_id=student_id,
                student_name=first.student_name,
                department=first.department,
                source=source,
                entries=tuple(entries),
            )
            logger.warning(
                "Conflict %s: student %s has %s submissions with different GPAs",
                group.conflict_id, student_id, len(entries),
            )
            result.conflicts.append(group)

        logger.info(
            "Batch %s: %s valid records, %s conflicts",
            source or "<unnamed>", len(result.valid), len(result.conflicts),
        )
        return result


class ConflictResolver:
    """
    Holds pending conflicts until a reviewer resolves them.

    Every group is resolved at most once: resolution removes it, and any
    later attempt on the same id raises UnknownConflictError. An invalid
    entry index leaves the group pending so the reviewer can try again.
    """

    def __init__(self):
        self._pending = {}  # conflict_id -> ConflictGroup, registration order

    def register(self, groups) -> None:
        for group in groups:
            self._pending[group.conflict_id] = group

    def pending(self) -> list:
        return list(self._pending.values())

    def get(self, conflict_id: str) -> ConflictGroup:
        try:
            return self._pending[conflict_id]
        except KeyError:
            raise UnknownConflictError(conflict_id) from None

    def resolve(self, decision):
        """
        Commit the chosen entry of a conflict as the canonical draft.

        Args:
            decision: ResolutionDecision

        Returns:
            StudentTranscriptDraft: copy of the chosen entry, tagged with the
            group's student id, name and department

        Raises:
            UnknownConflictError: no pending group has this id
            InvalidResolutionError: the index is out of range
        """
        group = self.get(decision.conflict_id)
        index = decision.chosen_entry_index
        if not 0 <= index < len(group.entries):
            raise InvalidResolutionError(group.conflict_id, index, len(group.entries))

        chosen = group.entries[index].draft
        canonical = replace(
            chosen,
            student_id=group.student_id,
            student_name=group.student_name,
            department=group.department,
        )
        del self._pending[group.conflict_id]
        logger.info(
            "Resolved %s with entry %s (row %s)",
            group.conflict_id, index, group.entries[index].source_row,
        )
        return canonical
