"""
Type coercion for single cells.

Rules:
- empty input yields the type's zero value, or None when the column is nullable
- non-empty scalars must match their type's literal grammar exactly
- array cells are one-row embedded documents split with the same dialect
- `json` cells hold any JSON document; empty input is always None
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict, List, Optional

from .errors import (
    ArrayMultiRowNotAllowedBool,
    ArrayMultiRowNotAllowedFloat64,
    ArrayMultiRowNotAllowedInt64,
    ArrayMultiRowNotAllowedString,
    EmbeddedDocumentParseError,
    NumericParseError,
    UnsupportedTypeError,
)
from .models import DecoderConfig
from .reader import read_rows
from .rules import BOOL_FALSE, BOOL_TRUE, INT64_MAX, INT64_MIN
from .schema import ColumnType, Field

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan",
    re.IGNORECASE,
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?[0-9]+",
    re.IGNORECASE,
)

_DEFAULT_CONFIG = DecoderConfig()

_ZERO: Dict[ColumnType, Any] = {
    ColumnType.STRING: "",
    ColumnType.INT: 0,
    ColumnType.INT64: 0,
    ColumnType.FLOAT64: 0.0,
    ColumnType.BOOL: False,
}

_MULTI_ROW_ERRORS: Dict[ColumnType, type] = {
    ColumnType.STRING: ArrayMultiRowNotAllowedString,
    ColumnType.INT: ArrayMultiRowNotAllowedInt64,
    ColumnType.INT64: ArrayMultiRowNotAllowedInt64,
    ColumnType.FLOAT64: ArrayMultiRowNotAllowedFloat64,
    ColumnType.BOOL: ArrayMultiRowNotAllowedBool,
}


def parse_int(text: str, type_tag: str = "int64") -> int:
    if not _INT_RE.fullmatch(text):
        raise NumericParseError(text, type_tag)
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise NumericParseError(text, type_tag, "value out of range")
    return value


def parse_float(text: str, type_tag: str = "float64") -> float:
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            raise NumericParseError(text, type_tag, "value out of range")

    if not _FLOAT_RE.fullmatch(text):
        raise NumericParseError(text, type_tag)
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise NumericParseError(text, type_tag, "value out of range")
    return value


def parse_bool(text: str, type_tag: str = "bool") -> bool:
    if text in BOOL_TRUE:
        return True
    if text in BOOL_FALSE:
        return False
    raise NumericParseError(text, type_tag)


_SCALAR_PARSERS: Dict[ColumnType, Callable[[str, str], Any]] = {
    ColumnType.STRING: lambda text, _tag: text,
    ColumnType.INT: parse_int,
    ColumnType.INT64: parse_int,
    ColumnType.FLOAT64: parse_float,
    ColumnType.BOOL: parse_bool,
}


def _array_cells(raw: str, element: ColumnType, config: DecoderConfig) -> List[str]:
    rows = read_rows(raw, config)
    if len(rows) > 1:
        error_cls = _MULTI_ROW_ERRORS[element]
        raise error_cls()
    if not rows:
        return []
    return rows[0]


def _array_item(cell: str, element: ColumnType) -> Any:
    if element is ColumnType.STRING:
        return cell

    if element is ColumnType.BOOL:
        # Anything but the exact literal is False; scalar bool cells are strict.
        return cell.strip() == "true"
    # Only a truly empty item is zero; whitespace still has to parse.
    if cell == "":
        return _ZERO[element]
    return _SCALAR_PARSERS[element](cell.strip(), element.value)


def _coerce_array(raw: str, kind: ColumnType, config: DecoderConfig) -> List[Any]:
    element = kind.element
    return [_array_item(cell, element) for cell in _array_cells(raw, element, config)]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid literal {name}")


def _coerce_json(raw: str) -> Any:
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise EmbeddedDocumentParseError(f"unable to parse json in csv: {e}") from e


def coerce_field(raw: str, field: Field, config: Optional[DecoderConfig] = None) -> Any:
    """Coerce one cell using the column type parsed when the schema was built."""
    kind = field.kind
    if kind is None:
        raise UnsupportedTypeError(field.type_tag)

    if raw == "":
        if field.optional or kind is ColumnType.JSON:
            return None
        if kind.is_array:
            return []
        return _ZERO[kind]

    if kind is ColumnType.JSON:
        return _coerce_json(raw)
    if kind.is_array:
        return _coerce_array(raw, kind, config or _DEFAULT_CONFIG)
    return _SCALAR_PARSERS[kind](raw, kind.value)


def coerce(raw: str, type_tag: str, nullable: bool = False, config: Optional[DecoderConfig] = None) -> Any:
    """
    Convert `raw` into the value declared by `type_tag`.

    >>> coerce("10,11", "int64,array")
    [10, 11]
    >>> coerce("", "int64", nullable=True) is None
    True
    """
    field = Field(name="", type_tag=type_tag, optional=nullable, kind=ColumnType.parse(type_tag))
    return coerce_field(raw, field, config)
