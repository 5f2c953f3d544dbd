from enum import IntEnum, StrEnum

# HTTP Methods
class HTTPMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    UNSUPPORTED = "UNSUPPORTED"

    @classmethod
    def _missing_(cls, value):
        # Any other token parses, but no route will ever match it
        return cls.UNSUPPORTED

# HTTP Status Codes
class HTTPStatus(IntEnum):
    # 2xx Success
    OK = 200
    CREATED = 201

    # 4xx Client Error
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404

    # 5xx Server Error
    INTERNAL_SERVER_ERROR = 500

STATUS_TEXT = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}

# Header names, canonical form (lookups are case-insensitive)
class HTTPHeader(StrEnum):
    CONTENT_TYPE = "Content-Type"
    CONTENT_LENGTH = "Content-Length"
    CONTENT_ENCODING = "Content-Encoding"
    TRANSFER_ENCODING = "Transfer-Encoding"
    USER_AGENT = "User-Agent"
    ACCEPT_ENCODING = "Accept-Encoding"
    CONNECTION = "Connection"

class ContentType(StrEnum):
    TEXT_PLAIN = "text/plain"
    APP_OCTET_STREAM = "application/octet-stream"

GZIP_ENCODING = "gzip"
IDENTITY_ENCODING = "identity"

# Other Constants
CRLF = "\r\n"
PROTOCOL_VERSION = "HTTP/1.1"
PROTOCOL_PREFIX = "HTTP/"
DEFAULT_PORT = 4221
DEFAULT_ADDRESS = "localhost"
DEFAULT_DIRECTORY = "/tmp/"
SOCKET_TIMEOUT = 10 # seconds
RECV_BUFFER_SIZE = 2048
MAX_LINE_LENGTH = 8192
MAX_HEADER_COUNT = 100
MAX_BODY_SIZE = 16 * 1024 * 1024
