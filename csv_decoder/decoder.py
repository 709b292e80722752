"""
Row decoding.

Responsibilities:
- split the header row(s) off the document and build the schema once
- skip comment rows and fully blank rows
- coerce every cell of the remaining rows according to the schema
- fail the whole document on the first coercion error
"""

from __future__ import annotations

import enum
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .coerce import coerce_field
from .errors import DecodeError, DocumentTooShortError, NonFiniteValueError
from .models import DecoderConfig
from .reader import read_rows
from .rules import DEFAULT_COMMENT, DEFAULT_DELIMITER
from .schema import Schema, extract_schema

log = logging.getLogger("csv_decoder.decoder")

Record = Dict[str, Any]


class Mode(enum.Enum):
    UNTYPED = "untyped"
    TYPED = "typed"

    @property
    def header_rows(self) -> int:
        return 2 if self is Mode.TYPED else 1


def _is_comment_row(row: Sequence[str], comment: Optional[str]) -> bool:
    # The reader only sees the raw first cell; after trimming, indented
    # comment lines still show up here.
    return comment is not None and bool(row) and row[0].startswith(comment)


def decode_rows(
    schema: Schema,
    rows: Sequence[Sequence[str]],
    mode: Mode,
    config: DecoderConfig,
    first_row: int = 1,
) -> List[Record]:
    """
    Turn raw data rows into records.

    `first_row` is the 1-based position of rows[0] in the document and is
    only used to report error positions.
    """
    skip_untyped = mode is Mode.TYPED and config.skip_empty_typed_columns
    width = len(schema)

    records: List[Record] = []
    skipped = 0
    for offset, row in enumerate(rows):
        if _is_comment_row(row, config.comment):
            skipped += 1
            continue

        record: Record = {}
        blank = True
        for idx, cell in enumerate(row[:width]):
            field = schema[idx]
            if cell:
                blank = False

            if skip_untyped and not field.is_typed:
                continue

            if field.is_typed:
                try:
                    record[field.name] = coerce_field(cell, field, config)
                except DecodeError as e:
                    raise e.with_position(first_row + offset, idx)
                continue

            record[field.name] = cell

        if blank:
            skipped += 1
            continue
        records.append(record)

    log.debug("decoded %d records, skipped %d rows", len(records), skipped)
    return records


class Decoder:
    """
    Decodes delimited documents into lists of records.

    A decoder holds nothing but its frozen config, so one instance may be
    shared freely; the typed/untyped choice is made per call.
    """

    def __init__(self, config: Optional[DecoderConfig] = None) -> None:
        self.config = config or DecoderConfig()

    @classmethod
    def create(
        cls,
        delimiter: str = DEFAULT_DELIMITER,
        comment: Optional[str] = DEFAULT_COMMENT,
        trim_leading_space: bool = False,
        skip_empty_typed_columns: bool = False,
    ) -> "Decoder":
        return cls(
            DecoderConfig(
                delimiter=delimiter,
                comment=comment,
                trim_leading_space=trim_leading_space,
                skip_empty_typed_columns=skip_empty_typed_columns,
            )
        )

    def decode_document(self, data: Union[bytes, str], mode: Mode = Mode.UNTYPED) -> Tuple[Schema, List[Record]]:
        rows = read_rows(data, self.config)

        needed = mode.header_rows
        if len(rows) < needed:
            raise DocumentTooShortError(
                f"{mode.value} documents need at least {needed} header row(s), got {len(rows)}"
            )

        types = rows[1] if mode is Mode.TYPED else None
        schema = extract_schema(rows[0], types)
        records = decode_rows(schema, rows[needed:], mode, self.config, first_row=needed + 1)
        return schema, records

    def decode(self, data: Union[bytes, str], mode: Mode = Mode.UNTYPED) -> List[Record]:
        _, records = self.decode_document(data, mode)
        return records

    def untyped(self, data: Union[bytes, str]) -> List[Record]:
        """Every value is the raw cell string."""
        return self.decode(data, Mode.UNTYPED)

    def typed(self, data: Union[bytes, str]) -> List[Record]:
        """The second row must declare the column types."""
        return self.decode(data, Mode.TYPED)


def _is_finite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, list):
        return all(_is_finite(v) for v in value)
    return True


def _require_finite(records: List[Record]) -> None:
    # JSON has no nan or inf; serializing them would silently turn into null.
    for number, record in enumerate(records, start=1):
        for name, value in record.items():
            if not _is_finite(value):
                raise NonFiniteValueError(
                    f"record {number}, field {name!r}: {value!r} has no JSON representation"
                )


def decode_csv_bytes(raw: bytes, config: Optional[DecoderConfig] = None, typed: bool = False) -> Dict[str, Any]:
    """
    Decode an uploaded document.
    Returns a dict matching the API's response envelope.
    """
    mode = Mode.TYPED if typed else Mode.UNTYPED
    schema, records = Decoder(config).decode_document(raw, mode)
    _require_finite(records)

    return {
        "records": records,
        "summary": {
            "rows": len(records),
            "columns": len(schema),
            "typed": typed,
        },
    }
