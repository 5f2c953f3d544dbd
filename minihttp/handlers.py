import logging
import os
from typing import Dict

from .config import ServerConfig
from .http_request import HTTPRequest
from .http_response import HTTPResponse
from .constants import HTTPStatus, HTTPHeader, ContentType
from .exceptions import HTTPNotFoundError, HTTPForbiddenError, MissingHeaderError, WriteFailureError

logger = logging.getLogger(__name__)

GREETING = "Hello, World!"

def handle_root(request: HTTPRequest, params: Dict[str, str], config: ServerConfig) -> HTTPResponse:
    """Handles requests to the root path ('/')."""
    headers = {HTTPHeader.CONTENT_TYPE: ContentType.TEXT_PLAIN}
    return HTTPResponse(status_code=HTTPStatus.OK, headers=headers, body=GREETING)

def handle_echo(request: HTTPRequest, params: Dict[str, str], config: ServerConfig) -> HTTPResponse:
    """Handles requests to '/echo/{text}'."""
    headers = {HTTPHeader.CONTENT_TYPE: ContentType.TEXT_PLAIN}
    # Compression, when negotiated, is applied by the router
    return HTTPResponse(status_code=HTTPStatus.OK, headers=headers, body=params["text"])

def handle_user_agent(request: HTTPRequest, params: Dict[str, str], config: ServerConfig) -> HTTPResponse:
    """Handles requests to '/user-agent'."""
    user_agent = request.get_header(HTTPHeader.USER_AGENT)
    if user_agent is None:
        raise MissingHeaderError(HTTPHeader.USER_AGENT)
    headers = {HTTPHeader.CONTENT_TYPE: ContentType.TEXT_PLAIN}
    return HTTPResponse(status_code=HTTPStatus.OK, headers=headers, body=user_agent)

def _resolve_file(config: ServerConfig, filename: str) -> str:
    full_file_path = config.resolve_file(filename)
    if full_file_path is None:
        raise HTTPForbiddenError(f"Access denied to file path: {filename}")
    return full_file_path

def handle_file_get(request: HTTPRequest, params: Dict[str, str], config: ServerConfig) -> HTTPResponse:
    """Handles GET requests to '/files/{filename}'."""
    filename = params["filename"]
    full_file_path = _resolve_file(config, filename)

    if not os.path.isfile(full_file_path):
        raise HTTPNotFoundError(f"File not found: {filename}")

    try:
        with open(full_file_path, "rb") as f:
            file_data = f.read()
    except OSError as e:
        logger.warning(f"Error reading file '{full_file_path}': {e}")
        raise HTTPNotFoundError(f"File not readable: {filename}") from e

    headers = {HTTPHeader.CONTENT_TYPE: ContentType.APP_OCTET_STREAM}
    return HTTPResponse(status_code=HTTPStatus.OK, headers=headers, body=file_data)

def handle_file_post(request: HTTPRequest, params: Dict[str, str], config: ServerConfig) -> HTTPResponse:
    """Handles POST requests to '/files/{filename}'.

    Creates or truncates the file. The file is closed, and so flushed, before
    the 201 is returned. Missing parent directories are not created.
    """
    filename = params["filename"]
    full_file_path = _resolve_file(config, filename)

    try:
        with open(full_file_path, "wb") as f:
            f.write(request.body)
    except OSError as e:
        logger.error(f"Error writing file '{full_file_path}': {e}")
        raise WriteFailureError(f"Error writing file: {filename}") from e

    logger.info(f"Wrote {len(request.body)} bytes to '{full_file_path}'")
    return HTTPResponse(status_code=HTTPStatus.CREATED)
