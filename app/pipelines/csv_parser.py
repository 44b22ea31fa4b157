"""
CSV Parser
app/pipelines/csv_parser.py

Splits raw delimited text into a header and string-keyed rows.

  - Comma or semicolon delimiter, detected from the header line
  - Quote-aware splitting (a delimiter inside "..." does not split)
  - Blank lines are discarded; missing trailing cells become ""
  - Rows that cannot be split are reported as RowErrors, not raised
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from app.core.exceptions import EmptyInputError, NoDataRowsError, NoHeaderError, RowError

logger = logging.getLogger(__name__)

RawRow = Dict[str, str]

COMMA = ","
SEMICOLON = ";"


@dataclass
class ParsedTable:
    """Header plus the rows that split cleanly."""
    headers: List[str]
    delimiter: str
    rows: List[RawRow] = field(default_factory=list)
    # Data row numbers (1-based, header excluded) for each entry in `rows`
    row_numbers: List[int] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)

    @property
    def data_row_count(self) -> int:
        return len(self.rows) + len(self.errors)


def split_line(line: str, delimiter: str) -> List[str]:
    """Split one line on `delimiter`, honoring double-quoted fields."""
    reader = csv.reader([line], delimiter=delimiter, quotechar='"', strict=True,
                        skipinitialspace=True)
    return next(reader, [])


def clean_cell(cell: str) -> str:
    """Trim and strip a single layer of surrounding double quotes (unsplittable lines only)."""
    cell = cell.strip()
    if len(cell) >= 2 and cell.startswith('"') and cell.endswith('"'):
        cell = cell[1:-1]
    return cell


def _field_count(line: str, delimiter: str) -> int:
    try:
        return len(split_line(line, delimiter))
    except csv.Error:
        return len(line.split(delimiter))


def detect_delimiter(header_line: str) -> str:
    """
    Semicolon wins when the header has no commas, or when it splits into
    strictly more fields on ";" than on ",".
    """
    if SEMICOLON not in header_line:
        return COMMA
    if COMMA not in header_line:
        return SEMICOLON
    if _field_count(header_line, SEMICOLON) > _field_count(header_line, COMMA):
        return SEMICOLON
    return COMMA


def _non_blank_lines(content: str) -> List[str]:
    lines = []
    for line in content.split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            lines.append(line)
    return lines


def parse_csv_content(content: str) -> ParsedTable:
    """
    Parse raw CSV text.

    Raises:
        EmptyInputError: content is empty after trimming
        NoHeaderError: no non-blank line remains
        NoDataRowsError: only a header line is present
    """
    if content is None or not content.strip():
        raise EmptyInputError()

    lines = _non_blank_lines(content.lstrip("\ufeff"))
    if not lines:
        raise NoHeaderError()

    header_line = lines[0]
    delimiter = detect_delimiter(header_line)
    try:
        headers = [h.strip() for h in split_line(header_line, delimiter)]
    except csv.Error:
        headers = [clean_cell(h) for h in header_line.split(delimiter)]
    logger.info(f"CSV headers detected: {len(headers)} columns, delimiter {delimiter!r}")

    if len(lines) == 1:
        raise NoDataRowsError(headers)

    table = ParsedTable(headers=headers, delimiter=delimiter)
    for row_number, line in enumerate(lines[1:], start=1):
        try:
            values = [v.strip() for v in split_line(line, delimiter)]
        except csv.Error as e:
            table.errors.append(RowError(row_number, f"malformed quoting: {e}"))
            continue

        extra = [v for v in values[len(headers):] if v]
        if extra:
            table.errors.append(
                RowError(row_number, f"row has {len(values)} cells but header has {len(headers)}")
            )
            continue

        row: RawRow = {}
        for index, header in enumerate(headers):
            if header in row:
                continue  # duplicate header, first column wins
            row[header] = values[index] if index < len(values) else ""
        table.rows.append(row)
        table.row_numbers.append(row_number)

    logger.info(
        f"CSV parsing completed: {len(table.rows)} rows parsed, {len(table.errors)} rejected"
    )
    return table
