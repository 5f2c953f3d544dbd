import logging
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from .codec import encode_response
from .config import ServerConfig
from .constants import HTTPMethod
from .exceptions import HTTPException, HTTPInternalServerError, HTTPNotFoundError
from .handlers import handle_echo, handle_file_get, handle_file_post, handle_root, handle_user_agent
from .http_request import HTTPRequest
from .http_response import HTTPResponse

logger = logging.getLogger(__name__)

# Type alias for the handler function signature
HandlerFunction = Callable[[HTTPRequest, Dict[str, str], ServerConfig], HTTPResponse]

class Route(NamedTuple):
    """A method plus a path pattern such as '/files/{filename}'."""
    method: HTTPMethod
    pattern: str
    handler: HandlerFunction
    compress: bool = False

    @property
    def segments(self) -> List[str]:
        return self.pattern.split("/")

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Returns the bound path variables, or None if the path does not match."""
        path_segments = path.split("/")
        if len(path_segments) != len(self.segments):
            return None

        params: Dict[str, str] = {}
        for pattern_segment, path_segment in zip(self.segments, path_segments):
            name = _variable_name(pattern_segment)
            if name is not None:
                # Bound verbatim, percent-escapes are not decoded
                params[name] = path_segment
            elif pattern_segment != path_segment:
                return None
        return params

def _variable_name(segment: str) -> Optional[str]:
    if len(segment) > 2 and segment.startswith("{") and segment.endswith("}"):
        return segment[1:-1]
    return None

class Router:
    """Manages route definitions and dispatches requests to handlers."""

    def __init__(self):
        """Initializes the Router with an empty list of routes."""
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def add_route(self, method: HTTPMethod, path_pattern: str, handler: HandlerFunction,
                  compress: bool = False):
        """
        Adds a route to the router. Routes are tried in the order added.

        Args:
            method: The HTTP method (e.g., HTTPMethod.GET).
            path_pattern: A path whose segments are literals or one '{name}' variable.
            handler: The function to handle requests matching the method and path.
            compress: Whether the response body goes through content negotiation.
        """
        if not path_pattern.startswith("/"):
            raise ValueError(f"Path pattern must start with '/': {path_pattern!r}")
        variables = [s for s in path_pattern.split("/") if _variable_name(s) is not None]
        if len(variables) > 1:
            raise ValueError(f"At most one variable segment is supported: {path_pattern!r}")
        self._routes.append(Route(method, path_pattern, handler, compress))

    def find_handler(self, request: HTTPRequest) -> Tuple[Route, Dict[str, str]]:
        """
        Finds the route for the given request.

        Returns:
            The first matching route and the path variables it bound.

        Raises:
            HTTPNotFoundError: If no route matches both method and path.
        """
        for route in self._routes:
            if route.method != request.method:
                continue
            params = route.match(request.path)
            if params is not None:
                return route, params

        # A known path with the wrong method is also a 404
        raise HTTPNotFoundError(f"No route for {request.method.value} {request.path}")

    def dispatch(self, request: HTTPRequest, config: ServerConfig) -> HTTPResponse:
        """Runs a request through routing, its handler and the content codec.

        Every failure is turned into the matching error response; nothing
        raised here escapes to the connection.
        """
        try:
            route, params = self.find_handler(request)
            response = route.handler(request, params, config)
            if route.compress:
                response = encode_response(request, response)
            return response
        except HTTPException as e:
            logger.warning(f"{request.method.value} {request.path} -> {e}")
            return HTTPResponse.from_exception(e)
        except Exception as e:
            logger.exception(f"Unexpected error handling {request.method.value} {request.path}: {e}")
            return HTTPResponse.from_exception(HTTPInternalServerError())

def default_router() -> Router:
    """Builds the server's fixed route table."""
    router = Router()
    router.add_route(HTTPMethod.GET, "/", handle_root)
    router.add_route(HTTPMethod.GET, "/echo/{text}", handle_echo, compress=True)
    router.add_route(HTTPMethod.GET, "/user-agent", handle_user_agent)
    router.add_route(HTTPMethod.GET, "/files/{filename}", handle_file_get)
    router.add_route(HTTPMethod.POST, "/files/{filename}", handle_file_post)
    return router
