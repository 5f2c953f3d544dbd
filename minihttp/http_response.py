from typing import Dict, Optional, Union
from .constants import HTTPStatus, STATUS_TEXT, CRLF, PROTOCOL_VERSION, HTTPHeader
from .exceptions import HTTPException

class HTTPResponse:
    """Represents an HTTP response to be sent."""

    def __init__(self,
                 status_code: HTTPStatus,
                 headers: Optional[Dict[str, str]] = None,
                 body: Optional[Union[str, bytes]] = None,
                 status_text: Optional[str] = None):
        """Initializes an HTTPResponse object.

        A str body is stored UTF-8 encoded; None means an empty body.
        """
        self.status_code = status_code
        self.status_text = status_text or STATUS_TEXT.get(status_code, "Unknown")
        self.headers = headers if headers is not None else {}
        self.body = _encode_body(body)

    @classmethod
    def from_exception(cls, exc: HTTPException) -> "HTTPResponse":
        """Builds the empty-bodied response for a raised HTTP error."""
        return cls(status_code=exc.status_code)

    def get_header(self, name: str) -> Optional[str]:
        """Gets a header value by name (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return None

    def to_bytes(self, close_connection: bool = False) -> bytes:
        """Builds the full HTTP response as bytes.

        Content-Length is always derived from the body being sent, so it stays
        correct after the body has been replaced (e.g. by compression).
        """
        response_line = f"{PROTOCOL_VERSION} {self.status_code.value} {self.status_text}{CRLF}"

        headers = {
            key: value for key, value in self.headers.items()
            if key.lower() != HTTPHeader.CONTENT_LENGTH.lower()
        }
        headers[HTTPHeader.CONTENT_LENGTH] = str(len(self.body))
        if close_connection:
            headers[HTTPHeader.CONNECTION] = "close"

        response_headers = ""
        for key, value in headers.items():
            response_headers += f"{key}: {value}{CRLF}"

        headers_part = response_headers + CRLF # End of headers

        return response_line.encode("ascii") + headers_part.encode("latin-1") + self.body

    def __repr__(self) -> str:
        return f"HTTPResponse(status={self.status_code}, headers={self.headers}, body_len={len(self.body)})"


def _encode_body(body: Optional[Union[str, bytes]]) -> bytes:
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")
