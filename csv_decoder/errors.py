"""
Decode error hierarchy.

Every failure aborts the whole document; nothing here is recovered from
inside the decoder.
"""

from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """Base exception for all decode failures."""

    code = "decode_error"

    def __init__(self, message: str, *, row: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.row = row
        self.column = column

    def with_position(self, row: int, column: int) -> "DecodeError":
        # Inner coercions know nothing about positions; the row decoder fills them in.
        if self.row is None:
            self.row = row
        if self.column is None:
            self.column = column
        return self

    def __str__(self) -> str:
        if self.row is None:
            return self.message
        if self.column is None:
            return f"row {self.row}: {self.message}"
        return f"row {self.row}, column {self.column}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "row": self.row,
            "column": self.column,
        }


class DocumentTooShortError(DecodeError):
    """Raised when the document lacks the header rows the mode requires."""

    code = "document_too_short"


class RowSyntaxError(DecodeError):
    """Raised when the raw reader cannot tokenize the input."""

    code = "syntax_error"


class ArrayMultiRowNotAllowedError(DecodeError):
    """Raised when an embedded array cell spans more than one row."""

    code = "array_multi_row_not_allowed"
    element_type = ""

    def __init__(self, *, row: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__(
            f"only one row is allowed for type '{self.element_type},array'",
            row=row,
            column=column,
        )


class ArrayMultiRowNotAllowedString(ArrayMultiRowNotAllowedError):
    element_type = "string"


class ArrayMultiRowNotAllowedInt64(ArrayMultiRowNotAllowedError):
    element_type = "int64"


class ArrayMultiRowNotAllowedFloat64(ArrayMultiRowNotAllowedError):
    element_type = "float64"


class ArrayMultiRowNotAllowedBool(ArrayMultiRowNotAllowedError):
    element_type = "bool"


class EmbeddedDocumentParseError(DecodeError):
    """Raised when a `json` cell does not hold a valid document."""

    code = "embedded_document_parse_error"


class NumericParseError(DecodeError):
    """Raised when a scalar literal does not match its declared type."""

    code = "numeric_parse_error"

    def __init__(self, value: str, type_tag: str, reason: str = "invalid syntax") -> None:
        super().__init__(f"cannot parse {value!r} as {type_tag}: {reason}")
        self.value = value
        self.type_tag = type_tag


class UnsupportedTypeError(DecodeError):
    """Raised for a type tag outside the supported vocabulary."""

    code = "unsupported_type"

    def __init__(self, type_tag: str) -> None:
        super().__init__(f"unsupported type format type: {type_tag}")
        self.type_tag = type_tag


class NonFiniteValueError(DecodeError):
    """Raised when a decoded float has no JSON representation."""

    code = "non_finite_value"
