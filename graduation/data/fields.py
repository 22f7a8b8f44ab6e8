"""
Rule-based transcript field extraction.

One pure function, extract_fields(), turns a line stream into transcript
fields and course records. Both ingestion front ends (document text and
flattened table rows) go through it with their own rule tables.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..config import GRADE_POINTS
from ..models import RawCourseRecord, UnresolvedField, IngestionWarning, WarningKind
from .numbers import normalize_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# RULES
# =============================================================================

@dataclass(frozen=True)
class ExtractionRule:
    """
    A label pattern and the field it fills.

    When the pattern defines named groups, each non-empty group fills the
    field of the same name (used for values that share one label, such as
    registration date and period). Otherwise group 1 fills `field`.
    """
    pattern: re.Pattern
    field: str

    def apply(self, line: str) -> Optional[dict]:
        match = self.pattern.search(line)
        if not match:
            return None
        if self.pattern.groupindex:
            values = {name: value for name, value in match.groupdict().items() if value}
        else:
            values = {self.field: match.group(1)}
        cleaned = {name: value.strip(" \t:;,") for name, value in values.items()}
        return {name: value for name, value in cleaned.items() if value} or None


def rule(pattern: str, field_name: str) -> ExtractionRule:
    return ExtractionRule(re.compile(pattern, re.IGNORECASE), field_name)


_SEP = r"\s*[:=]\s*"
_DATE = r"(\d{2}[./]\d{2}[./]\d{4})"
_NUMBER = r"(\d+[.,]\d+|\d+)"

# Ordered by priority: per line, the first matching rule wins.
TRANSCRIPT_RULES = [
    rule(r"^T\.?\s?C\.?\s*Kimlik\s*No" + _SEP + r"(\d{11})", "national_id"),
    rule(r"^(?:National\s*ID)" + _SEP + r"(\d{11})", "national_id"),
    rule(r"^Öğrenci\s*(?:No|Numarası)" + _SEP + r"(\w+)", "student_id"),
    rule(r"^Student\s*(?:ID|No\.?|Number)" + _SEP + r"(\S+)", "student_id"),
    rule(r"^(?:Adı\s*Soyadı|Student\s*Name|Name\s*Surname)" + _SEP + r"(.+)", "student_name"),
    rule(r"^(?:Adı|First\s*Name)" + _SEP + r"(.+)", "first_name"),
    rule(r"^(?:Soyadı|Surname|Last\s*Name)" + _SEP + r"(.+)", "surname"),
    rule(r"^(?:Fakülte|Faculty)" + _SEP + r"(.+)", "faculty"),
    rule(r"^(?:Bölüm|Department)" + _SEP + r"(.+)", "department"),
    rule(r"^Program" + _SEP + r"(.+)", "program"),
    rule(r"^(?:Eğitim\s*Düzeyi|Education\s*Level)" + _SEP + r"(.+)", "education_level"),
    rule(r"^(?:Eğitim\s*Dili|Education\s*Language)" + _SEP + r"(.+)", "education_language"),
    rule(
        r"^(?:Kayıt\s*Tarihi\s*/\s*Dönemi|Registration\s*Date\s*/\s*Period)" + _SEP
        + r"(?P<registration_date>\d{2}[./]\d{2}[./]\d{4})\s*/\s*(?P<registration_period>\w+)",
        "registration_date",
    ),
    rule(r"^(?:Kayıt\s*Tarihi|Registration\s*Date)" + _SEP + _DATE, "registration_date"),
    rule(r"^(?:Registration\s*Period)" + _SEP + r"(\w+)", "registration_period"),
    rule(r"^(?:Kayıt\s*Şekli|Registration\s*Type)" + _SEP + r"(.+)", "registration_type"),
    rule(r"^(?:AGNO|C?GPA)" + _SEP + _NUMBER, "declared_gpa"),
    rule(r"^Genel\s*Ağırlıklı\s*Not\s*Ortalaması" + _SEP + _NUMBER, "cumulative_gpa"),
    rule(r"^(?:Mezuniyet\s*Tarihi|Graduation\s*Date)" + _SEP + _DATE, "graduation_date"),
]

# Every label that may start a "label : value" segment. Labels without a
# rule (parents' names, semester averages, ...) are listed so that their
# values are split off and ignored instead of leaking into another field.
_LABELS = [
    r"T\.?\s?C\.?\s*Kimlik\s*No", r"National\s*ID",
    r"Öğrenci\s*Numarası", r"Öğrenci\s*No", r"Student\s*Number", r"Student\s*No\.?", r"Student\s*ID",
    r"Adı\s*Soyadı", r"Student\s*Name", r"Name\s*Surname", r"First\s*Name", r"Last\s*Name",
    r"Baba\s*Adı", r"Ana\s*Adı", r"Anne\s*Adı", r"Doğum\s*Yeri", r"Doğum\s*Tarihi",
    r"Soyadı", r"Surname", r"Adı",
    r"Fakülte", r"Faculty", r"Bölüm", r"Department", r"Program",
    r"Eğitim\s*Düzeyi", r"Education\s*Level", r"Eğitim\s*Dili", r"Education\s*Language",
    r"Kayıt\s*Tarihi\s*/\s*Dönemi", r"Registration\s*Date\s*/\s*Period", r"Kayıt\s*Tarihi",
    r"Registration\s*Date", r"Registration\s*Period", r"Kayıt\s*Şekli", r"Registration\s*Type",
    r"Genel\s*Ağırlıklı\s*Not\s*Ortalaması", r"AGNO", r"YANO", r"CGPA", r"GPA",
    r"Mezuniyet\s*Tarihi", r"Graduation\s*Date",
]
_LABEL_RE = re.compile(r"(?<!\w)(?:" + "|".join(_LABELS) + r")" + _SEP, re.IGNORECASE)

REQUIRED_FIELDS = ("student_id", "student_name", "department")


# =============================================================================
# COURSE TABLES
# =============================================================================

SEMESTER_HEADER_RE = re.compile(
    r"(?P<year>\d{4}\s*-\s*\d{4})\s*(?:Yılı\s*)?"
    r"(?P<term>Güz|Bahar|Yaz|Öğrenim\s*Öncesi\s*Alınan\s*Dersler|Fall|Spring|Summer)\s*"
    r"(?:Dönemi|Term|Semester)",
    re.IGNORECASE,
)

_CODE = r"(?P<code>[A-ZÇĞİÖŞÜ]{2,5}\s?\d{3,4}[A-Z]?)"
_NAME = r"(?P<name>.+?)"
_NUM = r"\d+(?:[.,]\d+)?"
_GRADE = r"(?P<grade>[A-Z]{1,3})"
_LANGUAGE = r"(?:\s*\((?P<language>[A-Z]{2,3})\))?"

# Tried in order; the first shape that matches the whole line wins.
COURSE_ROW_SHAPES = [
    # CENG111 CONCEPTS IN COMPUTER ENGINEERING 3|4 BA (EN)
    re.compile(
        r"^" + _CODE + r"\s+" + _NAME + r"\s+(?P<credit>" + _NUM + r")\s*[|/]\s*(?P<ects>" + _NUM
        + r")\s+" + _GRADE + _LANGUAGE + r"\s*$"
    ),
    # CENG111 CONCEPTS IN COMPUTER ENGINEERING 4 BA
    re.compile(
        r"^" + _CODE + r"\s+" + _NAME + r"\s+(?P<credit>" + _NUM + r")\s+" + _GRADE + _LANGUAGE + r"\s*$"
    ),
]

# Course-table lines that look like rows but summarize a term or repeat the header
_SUMMARY_MARKERS = (
    "toplam", "yarıyıl", "genel", "ağırlıklı not ortalaması", "ders kodu",
    "total", "semester average", "course code",
)

_TERM_LABELS = {"öğrenim öncesi alınan dersler": "Öncesi"}


def _normalize_term(term: str) -> str:
    collapsed = re.sub(r"\s+", " ", term).strip()
    return _TERM_LABELS.get(collapsed.lower(), collapsed)


# =============================================================================
# EXTRACTION
# =============================================================================

@dataclass
class FieldExtraction:
    """
    Output of extract_fields.

    fields: field name -> value (str, float for GPAs, UnresolvedField for
            required fields that were never found)
    courses: RawCourseRecord values in source order
    warnings: IngestionWarning values
    """
    fields: dict = field(default_factory=dict)
    courses: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def split_labeled_segments(lines) -> list:
    """
    Split lines that carry several "label : value" pairs into one line per pair.

    Text recovered from two-column transcript headers often puts two labels
    on the same baseline ("Öğrenci No : 123 TC Kimlik No : ..."). Lines without
    labels are returned unchanged. Returns (line_number, text) tuples.
    """
    segments = []
    for number, line in enumerate(lines, start=1):
        starts = [m.start() for m in _LABEL_RE.finditer(line)]
        if not starts or SEMESTER_HEADER_RE.search(line):
            segments.append((number, line.strip()))
            continue
        if starts[0] > 0:
            starts.insert(0, 0)
        for begin, end in zip(starts, starts[1:] + [len(line)]):
            piece = line[begin:end].strip()
            if piece:
                segments.append((number, piece))
    return segments


def _match_course_row(line: str) -> Optional[re.Match]:
    for shape in COURSE_ROW_SHAPES:
        match = shape.match(line)
        if match:
            name = match.group("name").lower()
            if any(marker in name for marker in _SUMMARY_MARKERS):
                return None
            return match
    return None


def _course_from_match(match: re.Match, semester: str, year: str) -> RawCourseRecord:
    local_credit = normalize_decimal(match.group("credit"))
    ects = match.group("ects") if "ects" in match.re.groupindex else None
    if ects:
        credit = normalize_decimal(ects)
    else:
        credit, local_credit = local_credit, None
    return RawCourseRecord(
        course_code=re.sub(r"\s+", "", match.group("code")),
        course_name=re.sub(r"\s+", " ", match.group("name")).strip(),
        credit=credit,
        grade=match.group("grade"),
        semester=semester,
        year=year,
        local_credit=local_credit,
        language=match.group("language"),
    )


def extract_fields(lines, rules=None, required=REQUIRED_FIELDS) -> FieldExtraction:
    """
    Extract transcript fields and course rows from a line stream.

    HOW LINES ARE READ:
    ------------------
    - Outside a course table, each line is tried against `rules` in order;
      the first rule that matches fills its field(s) and the extractor moves
      on. A field keeps the first value found.
    - A semester header ("2019-2020 Yılı Güz Dönemi") switches to course-table
      mode. Each line is then tried against COURSE_ROW_SHAPES; a match adds
      one RawCourseRecord tagged with the current term and year. Lines that
      are not course rows still go through the field rules.
    - A header with a different year closes the current table and opens a
      new one; the same year with another term only switches the term.

    AFTER THE LAST LINE:
    -------------------
    - Separately-labeled name and surname are joined into student_name.
    - GPAs are parsed with normalize_decimal; the cumulative average line is
      only used when no AGNO/GPA label was found.
    - program falls back to department.
    - Every field in `required` that is still missing becomes an
      UnresolvedField marker with a missing_field warning.

    Args:
        lines: Iterable of text lines
        rules: Ordered ExtractionRule list (defaults to TRANSCRIPT_RULES)
        required: Field names that must be present

    Returns:
        FieldExtraction
    """
    rules = TRANSCRIPT_RULES if rules is None else rules
    result = FieldExtraction()
    found = {}

    in_table = False
    year = ""
    semester = ""

    for line_number, line in split_labeled_segments(lines):
        header = SEMESTER_HEADER_RE.search(line)
        if header:
            new_year = re.sub(r"\s+", "", header.group("year"))
            if in_table and new_year != year:
                logger.debug("Closing course table for %s at line %s", year, line_number)
            year = new_year
            semester = _normalize_term(header.group("term"))
            in_table = True
            continue

        if in_table:
            match = _match_course_row(line)
            if match:
                course = _course_from_match(match, semester, year)
                if course.grade not in GRADE_POINTS:
                    message = f"Unknown grade '{course.grade}' for {course.course_code}; course skipped"
                    logger.warning("line %s: %s", line_number, message)
                    result.warnings.append(IngestionWarning(
                        WarningKind.UNKNOWN_GRADE, message, line=line_number, field="grade",
                    ))
                    continue
                result.courses.append(course)
                continue

        for extraction_rule in rules:
            values = extraction_rule.apply(line)
            if values:
                for name, value in values.items():
                    found.setdefault(name, value)
                break

    _finalize_fields(found, result)

    for name in required:
        if not found.get(name):
            message = f"Field '{name}' not found in document"
            logger.warning(message)
            result.warnings.append(IngestionWarning(WarningKind.MISSING_FIELD, message, field=name))
            found[name] = UnresolvedField(name)

    result.fields = found
    logger.debug("Extracted %s fields and %s courses", len(found), len(result.courses))
    return result


def _finalize_fields(found: dict, result: FieldExtraction) -> None:
    first_name = found.pop("first_name", None)
    surname = found.pop("surname", None)
    if not found.get("student_name"):
        joined = " ".join(part for part in (first_name, surname) if part)
        if joined:
            found["student_name"] = joined

    cumulative = found.pop("cumulative_gpa", None)
    raw_gpa = found.get("declared_gpa") or cumulative
    found.pop("declared_gpa", None)
    if raw_gpa:
        try:
            found["declared_gpa"] = normalize_decimal(raw_gpa)
        except ValueError:
            message = f"Unreadable GPA value '{raw_gpa}'"
            logger.warning(message)
            result.warnings.append(IngestionWarning(WarningKind.MISSING_FIELD, message, field="declared_gpa"))

    if not found.get("program") and found.get("department"):
        found["program"] = found["department"]
