"""
Header extraction.

The first row of a document names the columns; in typed mode the second row
declares their types, e.g. `string`, `*int64`, `float64,array`, `json`.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .rules import ARRAY_SUFFIX, JSON_TAG, NULLABLE_MARKER

log = logging.getLogger("csv_decoder.schema")


class ColumnType(enum.Enum):
    STRING = "string"
    INT = "int"
    INT64 = "int64"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING_ARRAY = "string" + ARRAY_SUFFIX
    INT_ARRAY = "int" + ARRAY_SUFFIX
    INT64_ARRAY = "int64" + ARRAY_SUFFIX
    FLOAT64_ARRAY = "float64" + ARRAY_SUFFIX
    BOOL_ARRAY = "bool" + ARRAY_SUFFIX
    JSON = JSON_TAG

    @property
    def is_array(self) -> bool:
        return self.value.endswith(ARRAY_SUFFIX)

    @property
    def element(self) -> "ColumnType":
        """Scalar type of an array's items; scalars return themselves."""
        if not self.is_array:
            return self
        return ColumnType(self.value[: -len(ARRAY_SUFFIX)])

    @classmethod
    def parse(cls, type_tag: str) -> Optional["ColumnType"]:
        try:
            return cls(type_tag)
        except ValueError:
            return None


@dataclass(frozen=True)
class Field:
    name: str
    type_tag: str = ""
    optional: bool = False
    kind: Optional[ColumnType] = None

    @classmethod
    def from_declaration(cls, name: str, declared: str) -> "Field":
        optional = declared.startswith(NULLABLE_MARKER)
        type_tag = declared[len(NULLABLE_MARKER):] if optional else declared
        return cls(name=name, type_tag=type_tag, optional=optional, kind=ColumnType.parse(type_tag))

    @property
    def is_typed(self) -> bool:
        return self.type_tag != ""


@dataclass(frozen=True)
class Schema:
    fields: Tuple[Field, ...]

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> Field:
        return self.fields[index]

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def duplicate_names(self) -> List[str]:
        counts = Counter(self.names)
        return [name for name, n in counts.items() if n > 1]

    def as_dict(self) -> Dict[int, Field]:
        return dict(enumerate(self.fields))


def extract_schema(names: Sequence[str], types: Optional[Sequence[str]] = None) -> Schema:
    """
    Build the positional schema from the name row and optional type row.

    One field per name; type declarations overlay by index. Extra type cells
    without a name are ignored, names without a type stay untyped.
    """
    declared = list(types or ())
    fields = []
    for idx, name in enumerate(names):
        declaration = declared[idx] if idx < len(declared) else ""
        fields.append(Field.from_declaration(name, declaration))

    schema = Schema(fields=tuple(fields))

    duplicates = schema.duplicate_names()
    if duplicates:
        log.warning("duplicate field names %s: the last column wins", ", ".join(repr(d) for d in duplicates))
    log.debug("extracted schema with %d fields (%d typed)", len(schema), sum(f.is_typed for f in fields))

    return schema
