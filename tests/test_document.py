import pytest

from graduation.data import DocumentTextExtractor, extract_document_text
from graduation.errors import NoReadableTextError

from conftest import make_pdf, text_object, TRANSCRIPT_LINES


def test_single_show_operation():
    assert extract_document_text(b"BT (Hello) Tj ET") == "Hello"


def test_successive_shows_are_joined_with_a_space():
    assert extract_document_text(b"BT (Student) Tj (ID) Tj ET") == "Student ID"


def test_array_fragments_join_directly_and_large_kerning_is_a_space():
    data = b"BT [(Tran) -20 (script) -300 (No)] TJ ET"
    assert extract_document_text(data) == "Transcript No"


def test_line_breaking_operators():
    data = (
        b"BT (A) Tj T* (B) Tj 0 -14 Td (C) Tj 20 0 Td (D) Tj (E) ' ET"
    )
    assert extract_document_text(data).splitlines() == ["A", "B", "C D", "E"]


def test_each_region_starts_a_new_line():
    data = b"BT (First) Tj ET\nBT (Second) Tj ET"
    assert extract_document_text(data) == "First\nSecond"


def test_escapes_and_hex_strings():
    data = b"BT (\\(AGNO\\) caf\\351) Tj <48692E> Tj ET"
    assert extract_document_text(data) == "(AGNO) café Hi."


def test_utf16_hex_strings_are_decoded():
    data = text_object(["Öğrenci No : 42"])
    assert extract_document_text(data) == "Öğrenci No : 42"


def test_flate_streams_are_inflated():
    pdf = make_pdf(b"BT (Compressed text) Tj ET", compress=True)
    assert extract_document_text(pdf) == "Compressed text"


def test_full_transcript_round_trips_through_a_compressed_stream(transcript_pdf):
    assert extract_document_text(transcript_pdf).splitlines() == TRANSCRIPT_LINES


def test_undecodable_flate_stream_is_scanned_raw():
    pdf = make_pdf(b"BT (Plain) Tj ET").replace(b"/Length", b"/Filter /FlateDecode /Length")
    assert extract_document_text(pdf) == "Plain"


def test_permissive_fallback_keeps_ascii_and_accented_characters(caplog):
    data = b"\x00\x01Ogrenci\tNo:  123\x02\n\x03" + "Çalışkan Ö".encode("latin-1", errors="ignore")
    with caplog.at_level("INFO"):
        text = DocumentTextExtractor().extract(data)

    assert text.splitlines() == ["Ogrenci No: 123", "Çalkan Ö"]
    assert "permissive" in caplog.text


def test_nothing_readable_raises():
    with pytest.raises(NoReadableTextError):
        extract_document_text(b"\x00\x01\x02\x9f")


def test_whitespace_only_regions_fall_back():
    assert extract_document_text(b"BT ( ) Tj ET") == "BT ( ) Tj ET"
