"""
Decoding rules shared by the reader, the schema and the coercer.

This file exists to keep the type-tag mini-language in one place.
"""

DEFAULT_DELIMITER = ","
DEFAULT_COMMENT = "#"

# Characters the raw reader reserves for itself.
RESERVED_CHARACTERS = ('"', "\r", "\n")

NULLABLE_MARKER = "*"
ARRAY_SUFFIX = ",array"
JSON_TAG = "json"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Literals accepted by scalar `bool` cells.
BOOL_TRUE = ("1", "t", "T", "true", "TRUE", "True")
BOOL_FALSE = ("0", "f", "F", "false", "FALSE", "False")
