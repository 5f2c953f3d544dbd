from __future__ import annotations

import os
from pathlib import Path

import pytest

from minihttp import handlers
from minihttp.config import ServerConfig
from minihttp.constants import HTTPMethod, HTTPStatus
from minihttp.exceptions import HTTPForbiddenError, HTTPNotFoundError, MissingHeaderError, WriteFailureError
from minihttp.http_request import HTTPRequest


def _get(path: str, headers: dict[str, str] | None = None) -> HTTPRequest:
    return HTTPRequest(method=HTTPMethod.GET, path=path, headers=headers or {})


def _post(path: str, body: bytes) -> HTTPRequest:
    return HTTPRequest(method=HTTPMethod.POST, path=path, headers={"content-length": str(len(body))}, body=body)


def test_root_greets(config: ServerConfig) -> None:
    response = handlers.handle_root(_get("/", {"accept-encoding": "gzip"}), {}, config)
    assert response.status_code == HTTPStatus.OK
    assert response.body == b"Hello, World!"
    assert response.get_header("Content-Type") == "text/plain"


def test_echo_returns_text(config: ServerConfig) -> None:
    response = handlers.handle_echo(_get("/echo/abc"), {"text": "abc"}, config)
    assert response.status_code == HTTPStatus.OK
    assert response.body == b"abc"
    assert response.get_header("Content-Type") == "text/plain"


def test_user_agent_reflects_header(config: ServerConfig) -> None:
    response = handlers.handle_user_agent(_get("/user-agent", {"user-agent": "foo/1.0"}), {}, config)
    assert response.status_code == HTTPStatus.OK
    assert response.body == b"foo/1.0"


def test_user_agent_missing_is_bad_request(config: ServerConfig) -> None:
    with pytest.raises(MissingHeaderError) as excinfo:
        handlers.handle_user_agent(_get("/user-agent"), {}, config)
    assert excinfo.value.status_code == HTTPStatus.BAD_REQUEST


def test_file_get_reads_bytes(config: ServerConfig, tmp_path: Path) -> None:
    (tmp_path / "data.bin").write_bytes(b"\x00\x01binary")
    response = handlers.handle_file_get(_get("/files/data.bin"), {"filename": "data.bin"}, config)
    assert response.status_code == HTTPStatus.OK
    assert response.body == b"\x00\x01binary"
    assert response.get_header("Content-Type") == "application/octet-stream"


@pytest.mark.parametrize("filename", ["missing.txt", "", "."])
def test_file_get_missing_or_not_a_file(config: ServerConfig, filename: str) -> None:
    with pytest.raises(HTTPNotFoundError):
        handlers.handle_file_get(_get(f"/files/{filename}"), {"filename": filename}, config)


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file permissions")
def test_file_get_unreadable_is_not_found(config: ServerConfig, tmp_path: Path) -> None:
    secret = tmp_path / "secret.txt"
    secret.write_text("x")
    secret.chmod(0)
    try:
        with pytest.raises(HTTPNotFoundError):
            handlers.handle_file_get(_get("/files/secret.txt"), {"filename": "secret.txt"}, config)
    finally:
        secret.chmod(0o644)


def test_file_get_refuses_parent_directory(config: ServerConfig) -> None:
    with pytest.raises(HTTPForbiddenError):
        handlers.handle_file_get(_get("/files/.."), {"filename": ".."}, config)


def test_file_post_creates_and_truncates(config: ServerConfig, tmp_path: Path) -> None:
    target = tmp_path / "test.txt"
    target.write_bytes(b"a much longer previous content")

    response = handlers.handle_file_post(_post("/files/test.txt", b"hello"), {"filename": "test.txt"}, config)
    assert response.status_code == HTTPStatus.CREATED
    assert response.body == b""
    assert target.read_bytes() == b"hello"


def test_file_post_then_get_round_trips(config: ServerConfig) -> None:
    handlers.handle_file_post(_post("/files/test.txt", b"hello"), {"filename": "test.txt"}, config)
    response = handlers.handle_file_get(_get("/files/test.txt"), {"filename": "test.txt"}, config)
    assert response.body == b"hello"


def test_file_post_into_missing_directory_fails(tmp_path: Path) -> None:
    config = ServerConfig(base_directory=str(tmp_path / "does-not-exist"))
    with pytest.raises(WriteFailureError) as excinfo:
        handlers.handle_file_post(_post("/files/a.txt", b"x"), {"filename": "a.txt"}, config)
    assert excinfo.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR


def test_file_post_onto_directory_fails(config: ServerConfig, tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    with pytest.raises(WriteFailureError):
        handlers.handle_file_post(_post("/files/sub", b"x"), {"filename": "sub"}, config)
