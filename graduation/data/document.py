"""
Document text extraction.

Recovers a flat, line-oriented text stream from the bytes of a PDF
transcript. This is a heuristic, not a PDF parser: it only needs to surface
the human-readable label/value text and the course listing, not layout.
"""

import logging
import re
import zlib

from ..config import ACCENTED_CHARACTERS
from ..errors import NoReadableTextError

logger = logging.getLogger(__name__)


# Stream bodies; the dictionary before "stream" says whether they are deflated
_STREAM_RE = re.compile(r"\bstream\r?\n(.*?)\r?\nendstream", re.S)

# BT ... ET text objects
_TEXT_REGION_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.S)

# Literal strings may nest one level of balanced parentheses
_LITERAL = r"\((?:\\.|[^\\()]|\((?:\\.|[^\\()])*\))*\)"
_HEX = r"<[0-9A-Fa-f\s]*>"

_OPERATION_RE = re.compile(
    r"(?P<array>\[(?:" + _LITERAL + r"|" + _HEX + r"|[^\]()<])*\])\s*TJ"
    r"|(?P<string>" + _LITERAL + r"|" + _HEX + r")\s*(?P<op>Tj|'|\")"
    r"|(?P<tx>[-+]?(?:\d+\.?\d*|\.\d+))\s+(?P<ty>[-+]?(?:\d+\.?\d*|\.\d+))\s+T[dD]\b"
    r"|(?P<nextline>T\*)",
    re.S,
)

# Strings and kerning adjustments inside a TJ array
_ARRAY_ITEM_RE = re.compile(r"(?P<string>" + _LITERAL + r"|" + _HEX + r")|(?P<kern>[-+]?(?:\d+\.?\d*|\.\d+))")

_ESCAPE_RE = re.compile(r"\\([0-7]{1,3}|\r\n|.)", re.S)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "(": "(", ")": ")", "\\": "\\"}

# A TJ kerning value at or below this (in thousandths of an em) is a word gap
_WORD_GAP = -200

_WHITESPACE_RE = re.compile(r"\s+")


def _unescape(match: re.Match) -> str:
    token = match.group(1)
    if token[0] in "01234567":
        return chr(int(token, 8) & 0xFF)
    if token in ("\r\n", "\n", "\r"):
        return ""   # line continuation
    return _ESCAPES.get(token, token)


def _decode_string(token: str) -> str:
    """Decode a literal "(...)" or hex "<...>" string operand."""
    if token.startswith("<"):
        digits = re.sub(r"\s", "", token[1:-1])
        if len(digits) % 2:
            digits += "0"
        text = bytes.fromhex(digits).decode("latin-1")
    else:
        text = _ESCAPE_RE.sub(_unescape, token[1:-1])

    # UTF-16BE strings carry a byte order mark
    if text.startswith("\xfe\xff"):
        text = text[2:].encode("latin-1").decode("utf-16-be", errors="ignore")
    return text


def _normalize(text: str) -> str:
    """Strip non-printable residue, collapse whitespace per line, drop blank lines."""
    lines = []
    for raw_line in text.splitlines():
        cleaned = "".join(ch if ch.isprintable() else " " for ch in raw_line)
        cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
        if cleaned:
            lines.append(cleaned)
    return "\n".join(lines)


class DocumentTextExtractor:
    """
    Recovers readable text from document bytes.

    STRATEGY:
    1. Decode bytes as Latin-1 and inflate FlateDecode content streams.
    2. Structured scan: read the show-text operators of every BT ... ET
       region. Fragments of one TJ array are joined directly (a large
       negative kerning becomes a space); successive show operations are
       joined with a single space; T*, ', " and vertical Td/TD moves start
       a new line, as does every new region.
    3. Permissive scan (only when step 2 found nothing): keep printable
       ASCII plus the fixed accented-character set.

    Usage:
        text = DocumentTextExtractor().extract(pdf_bytes)
        lines = text.splitlines()
    """

    def __init__(self, accented_characters: str = ACCENTED_CHARACTERS):
        self.accented_characters = set(accented_characters)

    def extract(self, data: bytes) -> str:
        """
        Extract normalized text from document bytes.

        Raises:
            NoReadableTextError: if neither strategy recovers any text
        """
        raw = data.decode("latin-1")
        content = self._inflate_streams(raw)

        text = _normalize(self._scan_text_regions(content))
        if text:
            logger.debug("Structured scan recovered %s characters", len(text))
            return text

        logger.info("No BT/ET text recovered, falling back to permissive scan")
        text = _normalize(self._permissive_scan(content))
        if not text:
            raise NoReadableTextError()
        return text

    def _inflate_streams(self, raw: str) -> str:
        """Replace FlateDecode stream bodies with their inflated content when possible."""
        def replace(match: re.Match) -> str:
            dictionary = raw[max(0, match.start() - 512):match.start()]
            dictionary = dictionary[dictionary.rfind("obj") + 1:]
            if "FlateDecode" not in dictionary:
                return match.group(0)
            try:
                inflated = zlib.decompressobj().decompress(match.group(1).encode("latin-1"))
            except zlib.error as exc:
                logger.debug("Could not inflate stream at offset %s: %s", match.start(), exc)
                return match.group(0)
            return "stream\n" + inflated.decode("latin-1") + "\nendstream"

        return _STREAM_RE.sub(replace, raw)

    def _scan_text_regions(self, content: str) -> str:
        lines = []
        for region in _TEXT_REGION_RE.finditer(content):
            current = []
            for op in _OPERATION_RE.finditer(region.group(1)):
                if op.group("array") is not None:
                    current.append(self._join_array(op.group("array")))
                elif op.group("string") is not None:
                    if op.group("op") in ("'", '"') and current:
                        lines.append(" ".join(current))
                        current = []
                    current.append(_decode_string(op.group("string")))
                elif op.group("nextline") is not None or float(op.group("ty")) != 0:
                    if current:
                        lines.append(" ".join(current))
                        current = []
            if current:
                lines.append(" ".join(current))
        return "\n".join(lines)

    @staticmethod
    def _join_array(array: str) -> str:
        parts = []
        for item in _ARRAY_ITEM_RE.finditer(array[1:-1]):
            if item.group("string") is not None:
                parts.append(_decode_string(item.group("string")))
            elif float(item.group("kern")) <= _WORD_GAP:
                parts.append(" ")
        return "".join(parts)

    def _permissive_scan(self, content: str) -> str:
        kept = []
        for ch in content:
            if ch == "\n" or " " <= ch <= "~" or ch in self.accented_characters:
                kept.append(ch)
            else:
                kept.append(" ")
        return "".join(kept)


def extract_document_text(data: bytes) -> str:
    """Convenience wrapper around DocumentTextExtractor().extract()."""
    return DocumentTextExtractor().extract(data)
