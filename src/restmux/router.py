"""Per-request router with first-match-wins dispatch.

Declarations are not stored: each get/post/put/delete call is checked against
the current request immediately. The first one that matches runs its handler
and raises RequestHandled, so nothing after it runs.
"""

import logging
from collections.abc import Callable
from http import HTTPMethod, HTTPStatus

from restmux.config import CorsConfig
from restmux.errors import RequestHandled
from restmux.inbound import InboundRequest, decode_body
from restmux.matching import EMPTY_PARAMS, match_exact, match_template, normalize_path
from restmux.request import RequestContext
from restmux.response import Response

logger = logging.getLogger(__name__)

type Handler = Callable[[RequestContext], None]

NOT_FOUND_BODY = "404 Not Found"


class Router:
    __slots__ = ("_handled", "method", "request", "url")
    method: HTTPMethod
    url: str
    request: RequestContext
    _handled: bool

    def __init__(
        self, method: HTTPMethod | str, url: str, request: RequestContext
    ) -> None:
        self.method = HTTPMethod(method)
        self.url = url
        self.request = request
        self._handled = False

    @property
    def handled(self) -> bool:
        return self._handled

    def map(self, method: HTTPMethod, pattern: str, handler: Handler) -> None:
        """Runs handler and ends the request if method and pattern match.

        A templated match is tried first, then an exact string match. Returns
        without side effects when neither matches.
        """
        if not pattern.startswith("/"):
            msg = f"pattern must start with '/', provided {pattern=}"
            raise ValueError(msg)
        if self.method != method:
            return
        params = match_template(pattern, self.url)
        if params is None:
            if not match_exact(pattern, self.url):
                return
            params = EMPTY_PARAMS
        logger.debug("%s %s matched %s", self.method, self.url, pattern)
        self._handled = True
        self.request.bind_path_variables(params)
        self._run(handler, route=pattern)

    def get(self, pattern: str, handler: Handler) -> None:
        """Runs handler for GET requests matching pattern."""
        self.map(HTTPMethod.GET, pattern, handler)

    def post(self, pattern: str, handler: Handler) -> None:
        """Runs handler for POST requests matching pattern."""
        self.map(HTTPMethod.POST, pattern, handler)

    def put(self, pattern: str, handler: Handler) -> None:
        """Runs handler for PUT requests matching pattern."""
        self.map(HTTPMethod.PUT, pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> None:
        """Runs handler for DELETE requests matching pattern."""
        self.map(HTTPMethod.DELETE, pattern, handler)

    def no_mapping(self, handler: Handler | None = None) -> None:
        """Fallback for requests no declaration claimed.

        Runs handler, or sends "404 Not Found" with NOT_FOUND when handler is None.
        No-op if the request was already handled.
        """
        if self._handled:
            return
        self._handled = True
        logger.debug("%s %s matched no declaration", self.method, self.url)
        if handler is None:
            self.request.send_response(NOT_FOUND_BODY, HTTPStatus.NOT_FOUND)
        else:
            self._run(handler)

    def _run(self, handler: Handler, route: str = "") -> None:
        try:
            handler(self.request)
        except RequestHandled as e:
            e.route = route
            raise
        # handler returned without sending: end the request with an empty 200
        raise RequestHandled(Response(), route=route)


def get_controller(
    inbound: InboundRequest, cors: CorsConfig | None = None
) -> Router:
    """Builds the Router for one inbound request.

    OPTIONS ends the request immediately with an empty 200 (the caller adds the
    CORS headers). Methods not in cors.allowed_methods end it with
    METHOD_NOT_ALLOWED. Either way no Router is constructed.
    """
    cors = cors if cors is not None else CorsConfig()
    if inbound.method == HTTPMethod.OPTIONS:
        logger.debug("preflight %s", inbound.url())
        raise RequestHandled(Response())
    if not cors.allows(inbound.method):
        logger.debug("method %s not allowed", inbound.method)
        raise RequestHandled(Response(status=HTTPStatus.METHOD_NOT_ALLOWED))
    request = RequestContext(decode_body(inbound.body), inbound.public_query_params())
    return Router(inbound.method, normalize_path(inbound.url()), request)
