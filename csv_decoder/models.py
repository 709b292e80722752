from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .rules import DEFAULT_COMMENT, DEFAULT_DELIMITER, RESERVED_CHARACTERS


class DecoderConfig(BaseModel):
    """
    Immutable decoder settings.

    Defaults are resolved here, at construction, so a config can be shared
    between concurrent decode calls.
    """

    model_config = ConfigDict(frozen=True)

    delimiter: str = DEFAULT_DELIMITER
    comment: Optional[str] = DEFAULT_COMMENT
    trim_leading_space: bool = False
    skip_empty_typed_columns: bool = False

    @field_validator("delimiter", "comment")
    @classmethod
    def _single_character(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) != 1:
            raise ValueError("must be exactly one character")
        if value in RESERVED_CHARACTERS:
            raise ValueError(f"{value!r} is reserved by the csv reader")
        return value

    @model_validator(mode="after")
    def _distinct_runes(self) -> "DecoderConfig":
        if self.comment is not None and self.comment == self.delimiter:
            raise ValueError("comment and delimiter must differ")
        return self


class DecodeSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    typed: bool = False


class DecodeResponse(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    summary: DecodeSummary


class ErrorDetail(BaseModel):
    code: str
    message: str
    row: Optional[int] = None
    column: Optional[int] = None


class HealthResponse(BaseModel):
    ok: bool = True
