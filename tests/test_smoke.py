from fastapi.testclient import TestClient
from csv_decoder.main import app

client = TestClient(app)


def _upload(content: bytes, name: str = "test.csv"):
    return {"file": (name, content, "text/csv")}


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_decode_untyped():
    raw = b"foo,bar\nfirst,second\n#third,fourth\n"

    r = client.post("/decode", files=_upload(raw))
    assert r.status_code == 200

    data = r.json()
    assert data["records"] == [{"foo": "first", "bar": "second"}]
    assert data["summary"] == {"rows": 1, "columns": 2, "typed": False}


def test_decode_typed():
    raw = b'foo,bar,subtype,names\n*string,int64,json,"int64,array"\n,10,{"key": 10},"1,2"\n'

    r = client.post("/decode", params={"typed": True}, files=_upload(raw))
    assert r.status_code == 200

    data = r.json()
    assert data["records"] == [
        {"foo": None, "bar": 10, "subtype": {"key": 10}, "names": [1, 2]},
    ]
    assert data["summary"]["typed"] is True


def test_decode_with_custom_delimiter_and_no_comment():
    raw = b"a;b\n#x;y\n"

    r = client.post("/decode", params={"delimiter": ";", "comment": ""}, files=_upload(raw))
    assert r.status_code == 200
    assert r.json()["records"] == [{"a": "#x", "b": "y"}]


def test_decode_rejects_non_csv_filename():
    r = client.post("/decode", files=_upload(b"a,b\n", name="data.txt"))
    assert r.status_code == 422
    assert r.json()["detail"] == "Only CSV files are supported"


def test_decode_rejects_non_utf8_input():
    # Include a Latin-1 character to force non-UTF-8 bytes
    raw = "name,city\nPaul,Montréal\n".encode("latin-1")

    r = client.post("/decode", files=_upload(raw))
    assert r.status_code == 422
    assert r.json()["detail"].startswith("Only UTF-8 input is supported")


def test_decode_reports_coercion_error_position():
    raw = b"a\nint64\n1\nnope\n"

    r = client.post("/decode", params={"typed": True}, files=_upload(raw))
    assert r.status_code == 422

    detail = r.json()["detail"]
    assert detail["code"] == "numeric_parse_error"
    assert detail["row"] == 4
    assert detail["column"] == 0
    assert "nope" in detail["message"]


def test_decode_rejects_invalid_config():
    r = client.post("/decode", params={"delimiter": "ab"}, files=_upload(b"a,b\n"))
    assert r.status_code == 422
    assert isinstance(r.json()["detail"], list)


def test_decode_rejects_document_without_type_row():
    r = client.post("/decode", params={"typed": True}, files=_upload(b"foo,bar\n"))
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "document_too_short"


def test_decode_rejects_non_finite_floats():
    r = client.post("/decode", params={"typed": True}, files=_upload(b"x\nfloat64\nnan\n"))
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "non_finite_value"
