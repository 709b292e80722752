from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .decoder import decode_csv_bytes
from .errors import DecodeError
from .models import DecoderConfig

log = logging.getLogger("csv_decoder.cli")

EXIT_OK = 0
EXIT_USAGE_OR_CONFIG = 2
EXIT_DECODE_ERROR = 3
EXIT_IO_ERROR = 4


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-decoder",
        description="Decode a delimited file into JSON records.",
    )
    parser.add_argument("file", type=str, help="Path to the document to decode.")
    parser.add_argument(
        "--typed",
        action="store_true",
        help="Read column types from the second row.",
    )
    parser.add_argument("--delimiter", type=str, default=",", help="Cell delimiter (default ',').")
    comments = parser.add_mutually_exclusive_group()
    comments.add_argument("--comment", type=str, default="#", help="Comment character (default '#').")
    comments.add_argument("--no-comment", action="store_true", help="Treat no line as a comment.")
    parser.add_argument("--trim-leading-space", action="store_true", help="Strip leading whitespace from cells.")
    parser.add_argument(
        "--skip-empty-typed-columns",
        action="store_true",
        help="With --typed, drop columns that declare no type.",
    )
    parser.add_argument("--indent", type=int, default=None, help="Indent the JSON output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def run(args: argparse.Namespace) -> int:
    try:
        config = DecoderConfig(
            delimiter=args.delimiter,
            comment=None if args.no_comment else args.comment,
            trim_leading_space=args.trim_leading_space,
            skip_empty_typed_columns=args.skip_empty_typed_columns,
        )
    except ValidationError as e:
        _eprint(f"error: invalid options: {e}")
        return EXIT_USAGE_OR_CONFIG

    try:
        data = Path(args.file).read_bytes()
    except OSError as e:
        _eprint(f"error: cannot read {args.file}: {e.strerror or e}")
        return EXIT_IO_ERROR

    try:
        records = decode_csv_bytes(data, config, typed=args.typed)["records"]
    except DecodeError as e:
        log.debug("decode of %s failed", args.file, exc_info=True)
        _eprint(f"error: {e}")
        return EXIT_DECODE_ERROR

    print(json.dumps(records, indent=args.indent, ensure_ascii=False))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_USAGE_OR_CONFIG

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
