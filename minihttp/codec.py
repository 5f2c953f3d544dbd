import gzip
import logging
import zlib
from typing import List, Optional

from .constants import GZIP_ENCODING, HTTPHeader
from .exceptions import CompressionFailureError
from .http_request import HTTPRequest
from .http_response import HTTPResponse

logger = logging.getLogger(__name__)

def accepted_encodings(request: HTTPRequest) -> List[str]:
    """Returns the Accept-Encoding tokens, trimmed, in the order sent."""
    accept_encoding = request.get_header(HTTPHeader.ACCEPT_ENCODING, "")
    return [enc.strip() for enc in accept_encoding.split(",") if enc.strip()]

def negotiate_encoding(request: HTTPRequest) -> Optional[str]:
    """Picks the response content coding, or None for the identity coding."""
    # Exact, case-sensitive token match; q-values are not interpreted
    if GZIP_ENCODING in accepted_encodings(request):
        return GZIP_ENCODING
    return None

def compress(body: bytes) -> bytes:
    try:
        return gzip.compress(body)
    except (OSError, zlib.error) as e:
        raise CompressionFailureError(f"gzip compression failed: {e}") from e

def encode_response(request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
    """Applies the negotiated content coding to the response body in place.

    Raises:
        CompressionFailureError: The compressor failed.
    """
    encoding = negotiate_encoding(request)
    if encoding is None:
        return response

    original_length = len(response.body)
    response.body = compress(response.body)
    response.headers[HTTPHeader.CONTENT_ENCODING] = encoding
    logger.debug(f"Compressed response body {original_length} -> {len(response.body)} bytes")
    return response
