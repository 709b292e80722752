"""
Raw row reader.

Thin adapter over the standard library csv module: it turns a buffered
document into rows of string cells and nothing more. Typing happens later.
"""

from __future__ import annotations

import csv
import io
import logging
import sys
from typing import Iterator, List, Optional, Union

from .errors import RowSyntaxError
from .models import DecoderConfig

log = logging.getLogger("csv_decoder.reader")

Rows = List[List[str]]

# Cells are bounded by the buffered document only.
csv.field_size_limit(sys.maxsize)


def decode_text(data: Union[bytes, str]) -> str:
    """Decode a UTF-8 buffer, dropping a leading BOM."""
    if isinstance(data, str):
        return data[1:] if data.startswith("\ufeff") else data

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise RowSyntaxError(f"input is not valid UTF-8 at byte offset {e.start}") from e


class _Lines:
    """
    Feeds physical lines to csv.reader, dropping comment lines.

    A line is a comment only when it starts a record; continuation lines of a
    quoted multi-line cell pass through untouched.
    """

    def __init__(self, text: str, comment: Optional[str]) -> None:
        self._lines = io.StringIO(text, newline="")
        self._comment = comment
        self.at_record_start = True

    def __iter__(self) -> Iterator[str]:
        for line in self._lines:
            if self.at_record_start and self._comment is not None and line.startswith(self._comment):
                continue
            self.at_record_start = False
            yield line


def read_rows(data: Union[bytes, str], config: DecoderConfig) -> Rows:
    """
    Tokenize `data` into rows of cells.

    Rules:
    - empty lines are skipped
    - a line starting with the comment character at a record boundary is skipped
    - quotes are lax: a quote inside an unquoted field is kept literally
    - rows may have any width
    - trim_leading_space strips leading whitespace from every cell
    """
    text = decode_text(data)

    lines = _Lines(text, config.comment)
    reader = csv.reader(
        iter(lines),
        delimiter=config.delimiter,
        quotechar='"',
        doublequote=True,
        skipinitialspace=config.trim_leading_space,
        strict=False,
    )

    rows: Rows = []
    try:
        for row in reader:
            lines.at_record_start = True
            if not row:
                continue
            if config.trim_leading_space:
                row = [cell.lstrip() for cell in row]
            rows.append(row)
    except csv.Error as e:
        raise RowSyntaxError(str(e), row=reader.line_num) from e

    log.debug("read %d rows (%d physical lines)", len(rows), reader.line_num)
    return rows
