"""
Data models for the graduation engine.

This package contains all dataclasses and enums used throughout the system.
These serve as "contracts" between different parts of the system.
"""

from .course import CourseType, RawCourseRecord, ParsedCourse
from .transcript import UnresolvedField, StudentTranscriptDraft, ClassifiedTranscript
from .eligibility import EligibilityConfig, RuleOutcome, EligibilityVerdict
from .conflict import ConflictEntry, ConflictGroup, ResolutionDecision, BatchDetection
from .issues import WarningKind, IngestionWarning
from .serialize import to_plain

__all__ = [
    # Course models
    "CourseType",
    "RawCourseRecord",
    "ParsedCourse",
    # Transcripts
    "UnresolvedField",
    "StudentTranscriptDraft",
    "ClassifiedTranscript",
    # Eligibility
    "EligibilityConfig",
    "RuleOutcome",
    "EligibilityVerdict",
    # Conflicts
    "ConflictEntry",
    "ConflictGroup",
    "ResolutionDecision",
    "BatchDetection",
    # Warnings
    "WarningKind",
    "IngestionWarning",
    # Serialization
    "to_plain",
]
