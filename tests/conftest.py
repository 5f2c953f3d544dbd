from __future__ import annotations

import socket
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

from minihttp.config import ServerConfig
from minihttp.server import HTTPServer


@dataclass
class RawResponse:
    status_line: str
    headers: dict[str, str]
    body: bytes

    @property
    def status(self) -> int:
        return int(self.status_line.split(" ")[1])


def parse_raw_response(data: bytes) -> RawResponse:
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return RawResponse(status_line=lines[0], headers=headers, body=body)


@pytest.fixture()
def config(tmp_path: Path) -> ServerConfig:
    return ServerConfig(base_directory=str(tmp_path), host="127.0.0.1", port=0, socket_timeout=5)


@pytest.fixture()
def server(config: ServerConfig) -> Iterator[HTTPServer]:
    srv = HTTPServer(config=config)
    srv.bind()
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.stop()
    thread.join(timeout=5)


@pytest.fixture()
def send_raw(server: HTTPServer) -> Callable[[bytes], bytes]:
    def _send(data: bytes) -> bytes:
        with socket.create_connection(server.server_address, timeout=5) as sock:
            sock.sendall(data)
            chunks = []
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    return _send
