"""
Configuration constants for the graduation engine.

This module contains all configuration values and constants used throughout
the ingestion and eligibility pipeline. Centralizing these makes it easy to
adjust behavior as faculty policies change.
"""

import os
from pathlib import Path

# =============================================================================
# FILE PATHS
# =============================================================================

# Base data directory (relative to this file's location)
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.environ.get("GRADUATION_DATA_DIR", BASE_DIR / "data"))
CURRICULA_DIR = DATA_DIR / "curricula"


# =============================================================================
# GRADE DEFINITIONS
# =============================================================================

# Letter grade -> grade points on the 4.0 scale.
# Anything outside this table is dropped at ingestion with a warning.
GRADE_POINTS = {
    "AA": 4.0,
    "BA": 3.5,
    "BB": 3.0,
    "CB": 2.5,
    "CC": 2.0,
    "DC": 1.5,
    "DD": 1.0,
    "FF": 0.0,
}

# The only failing grade. FF courses count for nothing: no GPA weight,
# no credits, no requirement coverage.
FAILING_GRADE = "FF"

# Two declared GPAs at most this far apart belong to the same submission.
# One step of the two-decimal precision transcripts print GPAs with.
GPA_EPSILON = 0.01

# Declared vs. calculated GPA difference that earns an audit warning
GPA_MISMATCH_TOLERANCE = 0.01


# =============================================================================
# GRADUATION POLICY DEFAULTS
# =============================================================================

# These reflect the engineering faculty policy observed in the dean's office.
# Every institution overrides them through curriculum files or EligibilityConfig.
DEFAULT_MIN_TECHNICAL_ELECTIVES = 6
DEFAULT_MIN_NON_TECHNICAL_ELECTIVES = 3
DEFAULT_MIN_TOTAL_CREDITS = 240
DEFAULT_MIN_GPA = 2.0


# =============================================================================
# TABULAR SCHEMAS
# =============================================================================

# Per-course rows used for eligibility analysis
ELIGIBILITY_HEADERS = [
    "Student ID",
    "Student Name",
    "Department",
    "Course Code",
    "Course Name",
    "Grade",
    "Credits",
    "Semester",
    "Course Type",
]

# Per-course rows uploaded by secretaries; GPA repeats on every row and is
# what tells two submissions for the same student apart.
CONFLICT_HEADERS = [
    "StudentID",
    "StudentName",
    "CourseCode",
    "CourseName",
    "Credit",
    "Grade",
    "Semester",
    "GPA",
    "Department",
]

TABLE_DELIMITER = ","


# =============================================================================
# DOCUMENT TEXT
# =============================================================================

# Kept by the permissive fallback scan in addition to printable ASCII
ACCENTED_CHARACTERS = "ÇĞİÖŞÜçğıöşüÂâÎîÛû"


# =============================================================================
# LOGGING
# =============================================================================

# Rotating log files written with --log-dir
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 10
