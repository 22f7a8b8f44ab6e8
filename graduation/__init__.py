"""
Graduation Eligibility Package
==============================

Transcript ingestion and graduation eligibility checks for a dean's office.

ARCHITECTURE OVERVIEW
---------------------

┌─────────────────────────────────────────────────────────────────────────┐
│                          INGESTION LAYER                                │
│                                                                         │
│  ┌──────────────┐  ┌──────────────────────┐  ┌───────────────────────┐  │
│  │ parse_table  │  │ DocumentTextExtractor│  │    extract_fields     │  │
│  │ (CSV rows)   │  │ (PDF BT/ET text)     │  │ (label rules, tables) │  │
│  └──────────────┘  └──────────────────────┘  └───────────────────────┘  │
│                 TranscriptParser → StudentTranscriptDraft               │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                           ENGINE LAYER                                  │
│        (Pure logic - returns data structures, NO UI/printing)           │
│                                                                         │
│  ┌──────────────────┐  ┌─────────────────────┐  ┌────────────────────┐  │
│  │ CourseClassifier │  │ EligibilityAnalyzer │  │ ConflictDetector / │  │
│  │ (types, GPA)     │  │ (five rules)        │  │ ConflictResolver   │  │
│  └──────────────────┘  └─────────────────────┘  └────────────────────┘  │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│          GraduationAuditor (orchestrator, injected repository)          │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                 TerminalDisplay / summary CSV (cli.py)                  │
└─────────────────────────────────────────────────────────────────────────┘

PACKAGE STRUCTURE
-----------------

graduation/
├── __init__.py          # This file - main exports
├── config.py            # Grade table, thresholds, table schemas
├── errors.py            # GraduationError hierarchy
├── logger.py            # configure_logging (console + rotating files)
├── auditor.py           # GraduationAuditor orchestrator
├── repository.py        # TranscriptRepository interface + in-memory store
├── summary.py           # One-row-per-student summaries (pandas)
├── cli.py               # Command-line interface
│
├── models/              # Data classes and enums
├── data/                # Tables, documents, field extraction, curricula
├── engines/             # Classifier, eligibility, conflicts
└── ui/                  # TerminalDisplay

USAGE
-----

    from graduation import GraduationAuditor, DataLoader

    curriculum = DataLoader().load_curriculum("computer_engineering")
    auditor = GraduationAuditor()

    table = auditor.audit_table(open("students.csv", encoding="utf-8").read(), curriculum)
    for report in table.reports:
        print(report.draft.student_id, report.verdict.is_eligible)

Running from command line:

    python -m graduation audit students.csv --curriculum computer_engineering

"""

# Version
__version__ = "1.0.0"

# Main exports
from .auditor import GraduationAuditor, AuditReport, TableAudit
from .repository import TranscriptRepository, InMemoryTranscriptRepository
from .cli import main

# Model exports (for programmatic use)
from .models import (
    CourseType,
    RawCourseRecord,
    ParsedCourse,
    UnresolvedField,
    StudentTranscriptDraft,
    ClassifiedTranscript,
    EligibilityConfig,
    EligibilityVerdict,
    ConflictGroup,
    ResolutionDecision,
    BatchDetection,
    IngestionWarning,
    WarningKind,
    to_plain,
)

# Ingestion and engine exports (for advanced use)
from .data import (
    parse_table,
    extract_document_text,
    extract_fields,
    normalize_decimal,
    TranscriptParser,
    DataLoader,
)
from .engines import (
    calculate_gpa,
    CourseClassifier,
    EligibilityAnalyzer,
    ConflictDetector,
    ConflictResolver,
)
from .errors import (
    GraduationError,
    MissingHeadersError,
    NoReadableTextError,
    UnclassifiedCourseError,
    UnknownConflictError,
    InvalidResolutionError,
)
