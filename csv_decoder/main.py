import logging
from typing import Optional

from charset_normalizer import from_bytes
from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from pydantic import ValidationError

from .decoder import decode_csv_bytes
from .errors import DecodeError
from .models import DecodeResponse, DecoderConfig, ErrorDetail, HealthResponse

log = logging.getLogger("csv_decoder.api")

app = FastAPI(
    title="csv-decoder",
    description="Schema-guided decoding of delimited text into typed records",
    version="0.1.0",
)


def _require_utf8(raw: bytes) -> None:
    try:
        raw.decode("utf-8")
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        detected = match.encoding if match is not None else "unknown"
        raise HTTPException(
            status_code=422,
            detail=f"Only UTF-8 input is supported (detected {detected})",
        )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post(
    "/decode",
    response_model=DecodeResponse,
    responses={422: {"model": ErrorDetail}},
)
async def decode_csv(
    file: UploadFile = File(...),
    typed: bool = Query(False),
    delimiter: str = Query(","),
    comment: Optional[str] = Query("#", description="Empty string disables comments"),
    trim_leading_space: bool = Query(False),
    skip_empty_typed_columns: bool = Query(False),
):
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    try:
        config = DecoderConfig(
            delimiter=delimiter,
            comment=comment or None,
            trim_leading_space=trim_leading_space,
            skip_empty_typed_columns=skip_empty_typed_columns,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    raw = await file.read()
    _require_utf8(raw)

    try:
        return decode_csv_bytes(raw, config, typed=typed)
    except DecodeError as e:
        log.warning("decode of %s failed: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=e.to_dict())
