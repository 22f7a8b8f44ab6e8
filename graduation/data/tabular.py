"""
Delimited table parsing.

Splits uploaded CSV text into header-validated rows of raw string fields.
Numeric and enum conversion is left to the caller.
"""

import logging
from dataclasses import dataclass, field

from ..config import TABLE_DELIMITER
from ..errors import MissingHeadersError
from ..models import IngestionWarning, WarningKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableRow:
    """One data row. `line` is the 1-based line number in the source text."""
    line: int
    fields: dict


@dataclass
class TableParseResult:
    headers: list
    rows: list = field(default_factory=list)
    warnings: list = field(default_factory=list)


def parse_table(text: str, required_headers, delimiter: str = TABLE_DELIMITER) -> TableParseResult:
    """
    Parse delimited text into ordered rows.

    The first non-empty line is the header. Every name in `required_headers`
    must be present (extra columns are allowed), otherwise the whole file is
    rejected with MissingHeadersError. A data line whose field count differs
    from the header count is skipped with a malformed_row warning. Fields are
    not quoted or type-converted; cells are only stripped of surrounding
    whitespace.

    Args:
        text: Complete file contents
        required_headers: Column names that must appear in the header row
        delimiter: Field separator

    Returns:
        TableParseResult with rows in source order
    """
    lines = text.lstrip("\ufeff").splitlines()

    header_index = None
    for index, line in enumerate(lines):
        if line.strip():
            header_index = index
            break

    if header_index is None:
        raise MissingHeadersError(list(required_headers))

    headers = [cell.strip() for cell in lines[header_index].split(delimiter)]
    missing = [name for name in required_headers if name not in headers]
    if missing:
        raise MissingHeadersError(missing)

    result = TableParseResult(headers=headers)

    for index in range(header_index + 1, len(lines)):
        line = lines[index].strip()
        if not line:
            continue

        line_number = index + 1
        values = line.split(delimiter)
        if len(values) != len(headers):
            message = (
                f"Skipping row with {len(values)} fields (expected {len(headers)}): {line}"
            )
            logger.warning("line %s: %s", line_number, message)
            result.warnings.append(
                IngestionWarning(WarningKind.MALFORMED_ROW, message, line=line_number)
            )
            continue

        result.rows.append(TableRow(
            line=line_number,
            fields={name: value.strip() for name, value in zip(headers, values)},
        ))

    logger.debug("Parsed %s rows (%s skipped)", len(result.rows), len(result.warnings))
    return result
