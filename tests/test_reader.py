import csv

import pytest

from csv_decoder.errors import RowSyntaxError
from csv_decoder.models import DecoderConfig
from csv_decoder.reader import decode_text, read_rows

TRIMMED = DecoderConfig(trim_leading_space=True)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"foo,bar", [["foo", "bar"]]),
        (b"\n\t\t\t\tfoo,bar\n\t\t\t\t,", [["foo", "bar"], ["", ""]]),
        (b"\n\t\t\t\tfoo,bar\n\n\t\t\t\tfirst,second", [["foo", "bar"], ["first", "second"]]),
        (b"foo,bar\r\nfirst,second\r\n", [["foo", "bar"], ["first", "second"]]),
    ],
)
def test_read_rows_with_trimming(data, expected):
    assert read_rows(data, TRIMMED) == expected


def test_comment_lines_are_skipped():
    rows = read_rows(b"foo,bar\n#third,fourth\nfirst,second", DecoderConfig())
    assert rows == [["foo", "bar"], ["first", "second"]]


def test_quoted_first_cell_is_not_a_comment():
    rows = read_rows(b'"#id",name\n1,a\n', DecoderConfig())
    assert rows == [["#id", "name"], ["1", "a"]]


def test_continuation_line_is_not_a_comment():
    rows = read_rows(b'a,b\n"x\n#y",z\n#skipped\n', DecoderConfig())
    assert rows == [["a", "b"], ["x\n#y", "z"]]


def test_indented_comment_reaches_the_caller():
    # Only lines starting with the comment character are dropped here.
    rows = read_rows(b"foo,bar\n\t#third,fourth", TRIMMED)
    assert rows == [["foo", "bar"], ["#third", "fourth"]]


def test_comments_disabled():
    rows = read_rows(b"#foo,bar", DecoderConfig(comment=None))
    assert rows == [["#foo", "bar"]]


def test_quoting_is_lax():
    rows = read_rows(b'a,b"c,"d,e",{"key": 10}', DecoderConfig())
    assert rows == [["a", 'b"c', "d,e", '{"key": 10}']]


def test_rows_may_have_any_width():
    rows = read_rows(b"a,b,c\nx\ny,z", DecoderConfig())
    assert [len(r) for r in rows] == [3, 1, 2]


def test_custom_delimiter_without_trimming():
    rows = read_rows(b"a;b\n x; y", DecoderConfig(delimiter=";"))
    assert rows == [["a", "b"], [" x", " y"]]


def test_utf8_bom_is_dropped():
    assert read_rows(b"\xef\xbb\xbffoo,bar", DecoderConfig()) == [["foo", "bar"]]
    assert decode_text("\ufefffoo") == "foo"


def test_invalid_utf8_is_a_syntax_error():
    with pytest.raises(RowSyntaxError) as exc:
        read_rows(b"foo,\xff\n", DecoderConfig())
    assert "byte offset 4" in str(exc.value)


def test_reader_errors_are_wrapped():
    limit = csv.field_size_limit()
    csv.field_size_limit(8)
    try:
        with pytest.raises(RowSyntaxError) as exc:
            read_rows(b"a,b\n" + b"x" * 32 + b"\n", DecoderConfig())
    finally:
        csv.field_size_limit(limit)

    assert isinstance(exc.value.__cause__, csv.Error)
    assert "field larger than field limit" in exc.value.message


def test_large_cells_are_read():
    cell = "x" * 200_000
    rows = read_rows(f'big,small\n"{cell}",1\n'.encode(), DecoderConfig())
    assert rows[1] == [cell, "1"]
