"""
Non-fatal ingestion warnings.

Warnings are accumulated next to successful output so the caller can audit
partial-confidence extractions. Fatal conditions are exceptions instead
(see graduation.errors).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WarningKind(Enum):
    UNKNOWN_GRADE = "unknown_grade"
    MALFORMED_ROW = "malformed_row"
    MISSING_FIELD = "missing_field"
    UNCLASSIFIED_DEFAULT = "unclassified_default"
    GPA_MISMATCH = "gpa_mismatch"


@dataclass(frozen=True)
class IngestionWarning:
    kind: WarningKind
    message: str
    line: Optional[int] = None    # 1-based source line, when known
    field: Optional[str] = None   # affected field name, when known

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message
