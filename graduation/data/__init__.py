"""
Data ingestion: tables, documents, field extraction and curriculum files.
"""

from .tabular import TableRow, TableParseResult, parse_table
from .document import DocumentTextExtractor, extract_document_text
from .fields import ExtractionRule, FieldExtraction, TRANSCRIPT_RULES, extract_fields
from .numbers import normalize_decimal
from .parser import TranscriptParser
from .loader import Curriculum, DataLoader

__all__ = [
    "TableRow",
    "TableParseResult",
    "parse_table",
    "DocumentTextExtractor",
    "extract_document_text",
    "ExtractionRule",
    "FieldExtraction",
    "TRANSCRIPT_RULES",
    "extract_fields",
    "normalize_decimal",
    "TranscriptParser",
    "Curriculum",
    "DataLoader",
]
