"""
Transcript storage interface.

The engine never stores anything itself. Hosts inject a TranscriptRepository
into GraduationAuditor; the in-memory implementation serves the CLI and tests.
"""

import itertools
import logging
from abc import ABC, abstractmethod

from .models import UnresolvedField

logger = logging.getLogger(__name__)


class TranscriptRepository(ABC):
    """
    Minimal persistence contract for canonical transcripts.

    Records are keyed by student id. Creating a record for a student that
    already has one replaces it. A draft whose student id is unresolved
    has no key to replace by, so every such draft is stored separately.
    """

    @abstractmethod
    def create(self, draft):
        """Store a canonical StudentTranscriptDraft and return it."""

    @abstractmethod
    def list(self) -> list:
        """All stored drafts, in insertion order."""

    @abstractmethod
    def delete(self, student_id) -> bool:
        """Remove the record for a student. Returns False when there was none."""


class InMemoryTranscriptRepository(TranscriptRepository):
    """Dict-backed repository. Not shared between instances."""

    def __init__(self):
        self._records = {}
        self._unresolved = itertools.count()

    def create(self, draft):
        if isinstance(draft.student_id, UnresolvedField):
            logger.warning("Storing transcript from row %s without a student id", draft.source_row)
            key = (draft.student_id, next(self._unresolved))
        else:
            key = draft.student_id
        if key in self._records:
            logger.info("Replacing stored transcript for %s", key)
            del self._records[key]
        self._records[key] = draft
        return draft

    def list(self) -> list:
        return list(self._records.values())

    def delete(self, student_id) -> bool:
        return self._records.pop(student_id, None) is not None
