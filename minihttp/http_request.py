import io
import logging
from typing import BinaryIO, Dict, Optional

from .constants import (
    CRLF,
    HTTPHeader,
    HTTPMethod,
    IDENTITY_ENCODING,
    MAX_BODY_SIZE,
    MAX_HEADER_COUNT,
    MAX_LINE_LENGTH,
    PROTOCOL_PREFIX,
    PROTOCOL_VERSION,
)
from .exceptions import IncompleteBodyError, MalformedRequestError

logger = logging.getLogger(__name__)

_CRLF_BYTES = CRLF.encode("ascii")

class HTTPRequest:
    """Represents a parsed HTTP request."""

    def __init__(self,
                 method: HTTPMethod,
                 path: str,
                 headers: Dict[str, str],
                 body: bytes = b"",
                 protocol: str = PROTOCOL_VERSION):
        """Initializes an HTTPRequest object."""
        self.method = method
        self.path = path
        self.protocol = protocol
        self.headers = headers # Keys are lower-cased by the parser
        self.body = body

    @classmethod
    def from_bytes(cls, request_bytes: bytes) -> Optional["HTTPRequest"]:
        """Parses a complete raw request held in memory."""
        return cls.from_stream(io.BytesIO(request_bytes))

    @classmethod
    def from_stream(cls, reader: BinaryIO) -> Optional["HTTPRequest"]:
        """Reads exactly one request from a binary stream.

        The stream is left positioned right after the request body, so the
        same reader can be handed back in for the next request on a
        keep-alive connection.

        Args:
            reader: A buffered binary reader, e.g. ``socket.makefile("rb")``.

        Returns:
            The parsed request, or None if the stream ended before any byte
            of a new request was read.

        Raises:
            MalformedRequestError: The request line or a header is invalid.
            IncompleteBodyError: The stream closed inside the body.
        """
        start_line = _read_line(reader)
        if start_line is None:
            return None

        parts = start_line.split(" ")
        if len(parts) != 3 or not all(parts):
            raise MalformedRequestError(f"Malformed start line: {start_line!r}")
        method_str, path, protocol = parts

        if not path.startswith("/"):
            raise MalformedRequestError(f"Request target must start with '/': {path!r}")
        if not protocol.startswith(PROTOCOL_PREFIX):
            raise MalformedRequestError(f"Unknown protocol: {protocol!r}")

        # Methods are case-sensitive
        method = HTTPMethod(method_str)
        headers = _read_headers(reader)
        body = _read_body(reader, headers)

        return cls(method=method, path=path, headers=headers, body=body, protocol=protocol)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Gets a header value by name (case-insensitive)."""
        return self.headers.get(name.lower(), default)

    @property
    def has_unsupported_transfer_encoding(self) -> bool:
        transfer_encoding = self.get_header(HTTPHeader.TRANSFER_ENCODING)
        return transfer_encoding is not None and transfer_encoding.lower() != IDENTITY_ENCODING

    @property
    def should_close_connection(self) -> bool:
        """Checks if the connection cannot carry another request after this one."""
        if self.has_unsupported_transfer_encoding:
            # The unread body is still in the stream
            return True
        return self.get_header(HTTPHeader.CONNECTION, "").lower() == "close"

    def __repr__(self) -> str:
        return f"HTTPRequest(method={self.method}, path='{self.path}', headers={self.headers}, body_len={len(self.body)})"


def _read_line(reader: BinaryIO) -> Optional[str]:
    """Reads one CRLF-terminated line and returns it without the CRLF."""
    raw = reader.readline(MAX_LINE_LENGTH + 1)
    if not raw:
        return None
    if len(raw) > MAX_LINE_LENGTH:
        raise MalformedRequestError("Line exceeds maximum length")
    if not raw.endswith(_CRLF_BYTES):
        raise MalformedRequestError(f"Line not terminated by CRLF: {raw!r}")
    try:
        return raw[:-2].decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedRequestError("Invalid encoding in request")


def _read_headers(reader: BinaryIO) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    count = 0
    while True:
        line = _read_line(reader)
        if line is None:
            raise MalformedRequestError("Stream ended before end of headers")
        if line == "":
            return headers

        count += 1
        if count > MAX_HEADER_COUNT:
            raise MalformedRequestError("Too many header lines")

        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            raise MalformedRequestError(f"Malformed header line: {line!r}")
        # Last occurrence wins
        headers[name.lower()] = value.strip()


def _read_body(reader: BinaryIO, headers: Dict[str, str]) -> bytes:
    transfer_encoding = headers.get(HTTPHeader.TRANSFER_ENCODING.lower())
    if transfer_encoding is not None and transfer_encoding.lower() != IDENTITY_ENCODING:
        logger.warning(f"Unsupported Transfer-Encoding {transfer_encoding!r}, treating body as empty")
        return b""

    raw_length = headers.get(HTTPHeader.CONTENT_LENGTH.lower())
    if raw_length is None:
        return b""
    if not (raw_length.isascii() and raw_length.isdigit()):
        raise MalformedRequestError(f"Invalid Content-Length: {raw_length!r}")

    length = int(raw_length)
    if length > MAX_BODY_SIZE:
        raise MalformedRequestError(f"Content-Length {length} exceeds limit of {MAX_BODY_SIZE} bytes")
    if length == 0:
        return b""
    body = reader.read(length)
    if len(body) < length:
        raise IncompleteBodyError(f"Expected {length} body bytes, got {len(body)}")
    return body
