"""
Command-Line Interface for the graduation engine.

This module parses arguments, runs the auditor and hands the results to
the terminal display.

COMMANDS:
---------
1. extract FILE      Print the text recovered from a transcript document
2. audit FILE...     Classify and evaluate eligibility (CSV tables or documents)
3. conflicts FILE    Detect (and optionally resolve) conflicting submissions

Run with:
    graduation audit transcripts.csv --curriculum computer_engineering
    python -m graduation conflicts upload.csv --interactive
"""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .auditor import GraduationAuditor
from .data import DataLoader, extract_document_text
from .errors import GraduationError, InvalidResolutionError
from .logger import configure_logging
from .models import to_plain
from .summary import write_summary
from .ui import TerminalDisplay

logger = logging.getLogger(__name__)

TABLE_SUFFIXES = (".csv", ".txt")


def _load_curriculum(args):
    loader = DataLoader()
    if args.catalog:
        return loader.load_curriculum_file(args.catalog)
    if args.curriculum:
        return loader.load_curriculum(args.curriculum)
    return None


def _run_extract(args) -> int:
    path = Path(args.file)
    try:
        text = extract_document_text(path.read_bytes())
    except (OSError, GraduationError) as exc:
        TerminalDisplay.print_file_error(path, exc)
        return 1
    TerminalDisplay.print_document_text(text)
    return 0


def _run_audit(args) -> int:
    """
    Audit every file independently.

    A file that cannot be read or parsed is reported and skipped; the
    remaining files still run. The exit code is 1 if any file failed.
    """
    try:
        curriculum = _load_curriculum(args)
    except (OSError, ValueError) as exc:
        TerminalDisplay.print_file_error(args.catalog or args.curriculum, exc)
        return 2

    auditor = GraduationAuditor(default_to_mandatory=args.default_mandatory)
    reports = []
    failures = 0

    for name in args.files:
        path = Path(name)
        try:
            if path.suffix.lower() in TABLE_SUFFIXES:
                table = auditor.audit_table(path.read_text(encoding="utf-8"), curriculum)
                file_reports = table.reports
                file_warnings = table.warnings
            else:
                file_reports = [auditor.audit_document(path.read_bytes(), curriculum)]
                file_warnings = []
        except (OSError, UnicodeDecodeError, GraduationError) as exc:
            logger.error("Failed to audit %s: %s", path, exc)
            TerminalDisplay.print_file_error(path, exc)
            failures += 1
            continue

        reports.extend(file_reports)
        if not args.json:
            TerminalDisplay.print_warnings(file_warnings)
            for report in file_reports:
                TerminalDisplay.print_report(report)

    if args.json:
        TerminalDisplay.print_document_text(json.dumps(
            [to_plain(report) for report in reports], ensure_ascii=False, indent=2, default=str,
        ))

    if args.summary:
        write_summary(reports, args.summary)
        if not args.json:
            TerminalDisplay.print_summary_written(args.summary, len(reports))

    return 1 if failures else 0


def _prompt_choice(group) -> Optional[int]:
    """Ask for an entry index; None means skip this conflict."""
    while True:
        answer = input(f"  Keep which entry for {group.student_id}? [0-{len(group.entries) - 1}, Enter to skip]: ").strip()
        if not answer:
            return None
        try:
            return int(answer)
        except ValueError:
            print("  Please enter a number.")


def _run_conflicts(args) -> int:
    path = Path(args.file)
    auditor = GraduationAuditor()
    try:
        detection = auditor.ingest_batch(path.read_text(encoding="utf-8"), source=path.name)
    except (OSError, UnicodeDecodeError, GraduationError) as exc:
        TerminalDisplay.print_file_error(path, exc)
        return 1

    TerminalDisplay.print_batch(detection)
    if not args.interactive:
        return 0

    for group in auditor.pending_conflicts():
        TerminalDisplay.print_conflict(group)
        while True:
            index = _prompt_choice(group)
            if index is None:
                break
            try:
                draft = auditor.resolve_conflict(group.conflict_id, index)
            except InvalidResolutionError as exc:
                TerminalDisplay.print_file_error(group.conflict_id, exc)
                continue
            TerminalDisplay.print_resolved(draft)
            break
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graduation",
        description="Transcript ingestion and graduation eligibility checks.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-dir", help="Also write rotating log files to this directory")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Print the text recovered from a document")
    extract.add_argument("file", help="Transcript document (PDF)")
    extract.set_defaults(handler=_run_extract)

    audit = subparsers.add_parser("audit", help="Evaluate graduation eligibility")
    audit.add_argument("files", nargs="+", help="Eligibility tables (.csv) or transcript documents")
    source = audit.add_mutually_exclusive_group()
    source.add_argument("--curriculum", help="Curriculum name under the data directory")
    source.add_argument("--catalog", help="Path to a curriculum JSON file")
    audit.add_argument(
        "--default-mandatory",
        action="store_true",
        help="Count courses missing from the catalog as Mandatory instead of failing",
    )
    audit.add_argument("--json", action="store_true", help="Print reports as JSON")
    audit.add_argument("--summary", help="Write a one-row-per-student CSV summary to this path")
    audit.set_defaults(handler=_run_audit)

    conflicts = subparsers.add_parser("conflicts", help="Detect conflicting submissions in a batch")
    conflicts.add_argument("file", help="Secretary batch table (.csv)")
    conflicts.add_argument("--interactive", action="store_true", help="Resolve each conflict at a prompt")
    conflicts.set_defaults(handler=_run_conflicts)

    return parser


def main(argv: List[str] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug_enabled=args.verbose, log_dir=args.log_dir)
    return args.handler(args)
