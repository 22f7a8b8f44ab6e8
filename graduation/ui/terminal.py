"""
Terminal Display Implementation.

This module handles all console/terminal output formatting.
It's the only place where reports, batches and errors are rendered.

To create a different UI (web, PDF, etc.), create a new class with
the same method signatures but different output handling.
"""

from ..models import UnresolvedField


class TerminalDisplay:
    """
    Pretty terminal output for audit results, batches and conflicts.

    ═══════════════════════════════════════════════════════════════════════════
    HOW TO REPLACE THIS UI
    ═══════════════════════════════════════════════════════════════════════════

    1. FOR WEB UI:
       Create a WebDisplay class with the same method signatures.
       Instead of print(), return HTML or render templates.

    2. FOR API RESPONSE:
       Skip the display entirely and return models.to_plain(report).

    ═══════════════════════════════════════════════════════════════════════════
    """

    # ANSI color codes for terminal styling
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"

    BG_GREEN = "\033[42m"
    BG_RED = "\033[41m"

    @classmethod
    def print_header(cls, title: str):
        """Print a major section header with decorative borders."""
        width = 70
        print()
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}  {title}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")

    @classmethod
    def print_subheader(cls, title: str):
        """Print a subsection header."""
        print()
        print(f"{cls.BOLD}{cls.WHITE}  ── {title} ──{cls.RESET}")

    @classmethod
    def status_badge(cls, eligible: bool) -> str:
        """Return a colored status badge."""
        if eligible:
            return f"{cls.BG_GREEN}{cls.WHITE} ✓ ELIGIBLE {cls.RESET}"
        return f"{cls.BG_RED}{cls.WHITE} ✗ NOT ELIGIBLE {cls.RESET}"

    @classmethod
    def _value(cls, value) -> str:
        if isinstance(value, UnresolvedField):
            return f"{cls.YELLOW}{value}{cls.RESET}"
        return str(value) if value else "-"

    @classmethod
    def print_student_info(cls, draft):
        """Print student identification information."""
        cls.print_header(f"STUDENT {draft.student_id}")
        print(f"  {cls.BOLD}Name:{cls.RESET} {cls._value(draft.student_name)}")
        print(f"  {cls.BOLD}Department:{cls.RESET} {cls._value(draft.department)}")
        if draft.faculty:
            print(f"  {cls.BOLD}Faculty:{cls.RESET} {draft.faculty}")
        if draft.declared_gpa is not None:
            print(f"  {cls.BOLD}Declared GPA:{cls.RESET} {draft.declared_gpa:.2f}")

    @classmethod
    def print_transcript(cls, transcript):
        """Print the classified course list with GPA and credit totals."""
        cls.print_subheader("COURSES")
        print(f"  {cls.BOLD}{'CODE':<10} {'NAME':<36} {'CR':>5} {'GRADE':<6} {'TYPE'}{cls.RESET}")
        print(f"  {cls.DIM}{'-' * 78}{cls.RESET}")
        for course in transcript.courses:
            color = cls.GREEN if course.is_passed else cls.RED
            print(
                f"  {color}{course.course_code:<10}{cls.RESET} {course.course_name[:36]:<36} "
                f"{course.credit:>5g} {course.grade:<6} {course.course_type.value}"
            )
        print()
        print(f"  {cls.BOLD}GPA:{cls.RESET} {transcript.display_gpa:.2f}    "
              f"{cls.BOLD}Credits:{cls.RESET} {transcript.total_credits:g}")
        print(f"  {cls.DIM}Mandatory {len(transcript.mandatory)} · "
              f"Technical electives {len(transcript.technical_electives)} · "
              f"Non-technical electives {len(transcript.non_technical_electives)}{cls.RESET}")

    @classmethod
    def print_verdict(cls, verdict):
        """Print the per-rule eligibility breakdown."""
        cls.print_subheader("GRADUATION ELIGIBILITY")
        print(f"\n  {cls.BOLD}Overall Status:{cls.RESET} {cls.status_badge(verdict.is_eligible)}\n")
        for outcome in verdict.rules:
            mark = f"{cls.GREEN}✓{cls.RESET}" if outcome.passed else f"{cls.RED}✗{cls.RESET}"
            print(f"  {mark} {outcome.rule:<26} {outcome.actual:>8g} / {outcome.required:g}")
        if verdict.missing_requirements:
            print()
            for message in verdict.missing_requirements:
                print(f"  {cls.YELLOW}• {message}{cls.RESET}")

    @classmethod
    def print_warnings(cls, warnings):
        if not warnings:
            return
        cls.print_subheader(f"WARNINGS ({len(warnings)})")
        for warning in warnings:
            print(f"  {cls.YELLOW}⚠ [{warning.kind.value}] {warning}{cls.RESET}")

    @classmethod
    def print_report(cls, report):
        """Print one AuditReport: identity, courses, verdict, warnings."""
        cls.print_student_info(report.draft)
        if report.error is not None:
            print(f"\n  {cls.RED}{cls.BOLD}Audit failed:{cls.RESET} {cls.RED}{report.error}{cls.RESET}")
        else:
            cls.print_transcript(report.transcript)
            cls.print_verdict(report.verdict)
        cls.print_warnings(report.warnings)

    @classmethod
    def print_file_error(cls, path, error):
        print(f"\n  {cls.RED}{cls.BOLD}✗ {path}:{cls.RESET} {cls.RED}{error}{cls.RESET}")

    @classmethod
    def print_document_text(cls, text: str):
        print(text)

    @classmethod
    def print_summary_written(cls, path, rows: int):
        print(f"\n  {cls.GREEN}Summary of {rows} student(s) written to {path}{cls.RESET}")

    @classmethod
    def print_batch(cls, detection):
        """Print valid records and pending conflicts of one batch."""
        cls.print_header(f"BATCH: {len(detection.valid)} VALID, {len(detection.conflicts)} CONFLICTS")
        if detection.valid:
            cls.print_subheader("VALID RECORDS")
            for draft in detection.valid:
                gpa = "-" if draft.declared_gpa is None else f"{draft.declared_gpa:.2f}"
                print(f"  {cls.GREEN}{draft.student_id!s:<12}{cls.RESET} {cls._value(draft.student_name):<30} "
                      f"GPA {gpa:<6} {len(draft.courses)} course(s)")
        for group in detection.conflicts:
            cls.print_conflict(group)
        cls.print_warnings(detection.warnings)

    @classmethod
    def print_conflict(cls, group):
        """Print one conflict group with its numbered entries."""
        cls.print_subheader(f"CONFLICT {group.conflict_id}")
        print(f"  {cls.BOLD}Student:{cls.RESET} {group.student_id} {cls._value(group.student_name)}")
        for index, entry in enumerate(group.entries):
            gpa = entry.draft.declared_gpa
            gpa_text = "-" if gpa is None else f"{gpa:.2f}"
            codes = ", ".join(c.course_code for c in entry.draft.courses)
            print(f"  {cls.YELLOW}[{index}]{cls.RESET} row {entry.source_row}  GPA {gpa_text}  {cls.DIM}{codes}{cls.RESET}")

    @classmethod
    def print_resolved(cls, draft):
        print(f"  {cls.GREEN}✓ Stored canonical record for {draft.student_id} "
              f"({len(draft.courses)} course(s)){cls.RESET}")
