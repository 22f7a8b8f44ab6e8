"""
Tabular audit summaries.

Flattens audit reports into one row per student for the dean's office
spreadsheet.
"""

from pathlib import Path
from typing import Dict, List

import pandas as pd

from .models import to_plain

SUMMARY_COLUMNS = [
    "student_id",
    "student_name",
    "department",
    "gpa",
    "credits",
    "eligible",
    "missing_requirements",
    "warnings",
    "error",
]


def build_summary(reports) -> pd.DataFrame:
    """One row per AuditReport, in report order. Unresolved identity cells are empty."""
    rows: List[Dict[str, object]] = []
    for report in reports:
        draft = report.draft
        row = {
            "student_id": to_plain(draft.student_id),
            "student_name": to_plain(draft.student_name),
            "department": to_plain(draft.department),
            "gpa": None,
            "credits": None,
            "eligible": None,
            "missing_requirements": "",
            "warnings": len(report.warnings),
            "error": "" if report.error is None else str(report.error),
        }
        if report.verdict is not None:
            row["gpa"] = report.transcript.display_gpa
            row["credits"] = report.transcript.total_credits
            row["eligible"] = report.verdict.is_eligible
            row["missing_requirements"] = "; ".join(report.verdict.missing_requirements)
        rows.append(row)
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary(reports, path) -> pd.DataFrame:
    """Write the summary as CSV and return the frame that was written."""
    summary = build_summary(reports)
    summary.to_csv(Path(path), index=False)
    return summary
