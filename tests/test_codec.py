from __future__ import annotations

import gzip

import pytest

from minihttp import codec
from minihttp.constants import HTTPMethod, HTTPStatus
from minihttp.exceptions import CompressionFailureError
from minihttp.http_request import HTTPRequest
from minihttp.http_response import HTTPResponse


def _request(accept_encoding: str | None) -> HTTPRequest:
    headers = {} if accept_encoding is None else {"accept-encoding": accept_encoding}
    return HTTPRequest(method=HTTPMethod.GET, path="/echo/x", headers=headers)


def test_accepted_encodings_are_trimmed() -> None:
    assert codec.accepted_encodings(_request(" deflate ,gzip,  br ")) == ["deflate", "gzip", "br"]
    assert codec.accepted_encodings(_request(None)) == []


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("gzip", "gzip"),
        ("invalid-encoding-1, gzip, invalid-encoding-2", "gzip"),
        ("deflate", None),
        ("GZIP", None),
        ("gzipx", None),
        ("", None),
        (None, None),
    ],
)
def test_negotiate_encoding(header: str | None, expected: str | None) -> None:
    assert codec.negotiate_encoding(_request(header)) == expected


def test_encode_response_gzips_and_marks_body() -> None:
    body = b"abc" * 100
    response = HTTPResponse(status_code=HTTPStatus.OK, headers={"Content-Type": "text/plain"}, body=body)
    encoded = codec.encode_response(_request("gzip"), response)
    assert encoded.get_header("Content-Encoding") == "gzip"
    assert gzip.decompress(encoded.body) == body
    assert f"Content-Length: {len(encoded.body)}\r\n".encode() in encoded.to_bytes()


def test_encode_response_passes_through_without_gzip() -> None:
    response = HTTPResponse(status_code=HTTPStatus.OK, body=b"plain")
    encoded = codec.encode_response(_request("deflate"), response)
    assert encoded.body == b"plain"
    assert encoded.get_header("Content-Encoding") is None


def test_compressor_failure_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(data: bytes) -> bytes:
        raise OSError("disk on fire")

    monkeypatch.setattr(codec.gzip, "compress", fail)
    with pytest.raises(CompressionFailureError) as excinfo:
        codec.compress(b"data")
    assert excinfo.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
