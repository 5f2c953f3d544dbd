from .config import ServerConfig
from .http_request import HTTPRequest
from .http_response import HTTPResponse
from .router import Router, default_router
from .server import HTTPServer

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HTTPServer",
    "Router",
    "ServerConfig",
    "default_router",
]
