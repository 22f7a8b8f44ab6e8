import logging
import zlib

import pytest

from graduation import logger as graduation_logger
from graduation.data import Curriculum
from graduation.engines import CourseClassifier
from graduation.models import (
    CourseType,
    EligibilityConfig,
    RawCourseRecord,
    StudentTranscriptDraft,
)

ELIGIBILITY_HEADER = (
    "Student ID,Student Name,Department,Course Code,Course Name,Grade,Credits,Semester,Course Type"
)
CONFLICT_HEADER = "StudentID,StudentName,CourseCode,CourseName,Credit,Grade,Semester,GPA,Department"


def course(code, grade="AA", credit=4.0, declared_type=None, name=None, semester="F23"):
    return RawCourseRecord(
        course_code=code,
        course_name=name or f"Course {code}",
        credit=credit,
        grade=grade,
        semester=semester,
        declared_type=declared_type,
    )


def draft(*courses, student_id="1", declared_gpa=None, source_row=None):
    return StudentTranscriptDraft(
        student_id=student_id,
        student_name="Ann Smith",
        department="Computer Engineering",
        courses=tuple(courses),
        declared_gpa=declared_gpa,
        source_row=source_row,
    )


def utf16_hex(text: str) -> bytes:
    """A PDF hex string holding UTF-16BE text with a byte order mark."""
    return b"<FEFF" + text.encode("utf-16-be").hex().upper().encode("ascii") + b">"


def text_object(lines) -> bytes:
    """One BT ... ET region showing each line and moving to the next with T*."""
    body = b"".join(utf16_hex(line) + b" Tj T*\n" for line in lines)
    return b"BT\n/F1 10 Tf\n" + body + b"ET"


def make_pdf(content: bytes, compress: bool = False) -> bytes:
    """Wrap a content stream into a minimal single-object PDF."""
    filter_entry = b" /Filter /FlateDecode" if compress else b""
    payload = zlib.compress(content) if compress else content
    return (
        b"%PDF-1.4\n"
        b"4 0 obj\n<< /Length " + str(len(payload)).encode("ascii") + filter_entry + b" >>\n"
        b"stream\n" + payload + b"\nendstream\nendobj\n"
        b"trailer\n<< /Root 1 0 R >>\n%%EOF\n"
    )


TRANSCRIPT_LINES = [
    "T.C. Kimlik No : 12345678901 Öğrenci No : 2019510001",
    "Adı : Ayşe Soyadı : Yılmaz",
    "Fakülte : Mühendislik Fakültesi",
    "Bölüm : Bilgisayar Mühendisliği",
    "Eğitim Düzeyi : Lisans Eğitim Dili : İngilizce",
    "Kayıt Tarihi / Dönemi : 16.09.2019 / Güz",
    "Kayıt Şekli : ÖSYM",
    "2019-2020 Yılı Güz Dönemi",
    "Ders Kodu Ders Adı Kredi AKTS Not",
    "CENG111 CONCEPTS IN COMPUTER ENGINEERING 3|4 BA (EN)",
    "MATH141 BASIC CALCULUS I 4|6 CC",
    "Yarıyıl Toplam 7 10",
    "2019-2020 Yılı Bahar Dönemi",
    "CENG113 PROGRAMMING BASICS 3|5 AA",
    "2020-2021 Yılı Güz Dönemi",
    "CENG211 PROGRAMMING FUNDAMENTALS 3|6 FF",
    "Genel Ağırlıklı Not Ortalaması : 2,91",
    "AGNO : 3,02",
]


@pytest.fixture
def transcript_lines():
    return list(TRANSCRIPT_LINES)


@pytest.fixture
def transcript_pdf():
    return make_pdf(text_object(TRANSCRIPT_LINES), compress=True)


@pytest.fixture
def scenario_csv():
    return (
        ELIGIBILITY_HEADER + "\n"
        "1,Ann,CE,CS101,Intro,AA,4,F23,Mandatory\n"
        "1,Ann,CE,CS102,Algo,BB,4,F23,Mandatory"
    )


@pytest.fixture
def eligibility_config():
    return EligibilityConfig(
        required_mandatory_course_codes=frozenset({"M1", "M2"}),
        min_technical_electives=2,
        min_non_technical_electives=1,
        min_total_credits=20,
        min_gpa=2.0,
        course_names={"M1": "Course One", "M2": "Course Two"},
    )


@pytest.fixture
def eligible_courses():
    """Meets every threshold of eligibility_config: 20 credits, GPA 3.3."""
    return [
        course("M1", "AA", 5, "Mandatory"),
        course("M2", "BB", 5, "Mandatory"),
        course("T1", "AA", 4, "Technical Elective"),
        course("T2", "CC", 4, "Technical Elective"),
        course("N1", "BA", 2, "Non-Technical Elective"),
    ]


@pytest.fixture
def classify():
    def _classify(courses, **kwargs):
        return CourseClassifier(**kwargs).classify(draft(*courses))
    return _classify


@pytest.fixture
def small_curriculum():
    course_types = {
        "CS101": CourseType.MANDATORY,
        "CS102": CourseType.MANDATORY,
        "CS401": CourseType.TECHNICAL_ELECTIVE,
        "HUM101": CourseType.NON_TECHNICAL_ELECTIVE,
    }
    names = {"CS101": "Intro", "CS102": "Algo", "CS401": "ML", "HUM101": "Humanities"}
    return Curriculum(
        name="Small",
        course_types=course_types,
        course_names=names,
        config=EligibilityConfig(
            required_mandatory_course_codes=frozenset({"CS101", "CS102"}),
            min_technical_electives=1,
            min_non_technical_electives=1,
            min_total_credits=10,
            min_gpa=2.0,
            course_names=names,
        ),
    )


@pytest.fixture
def reset_logging():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in graduation_logger._installed_handlers:
        root.removeHandler(handler)
        handler.close()
    graduation_logger._installed_handlers.clear()
