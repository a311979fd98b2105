"""Request harness and RSGI application.

dispatch() runs one request through a controller function and turns the
RequestHandled signal into the final Response. App serves dispatch() over RSGI.
"""

import logging
from collections.abc import Callable
from functools import reduce
from http import HTTPStatus

from restmux.config import CorsConfig
from restmux.errors import RequestHandled
from restmux.inbound import InboundRequest, parse_query_string
from restmux.matching import http_route, path_params
from restmux.response import Response
from restmux.router import Router, get_controller
from restmux.rsgi import HTTPProtocol, HTTPScope, RSGIHTTPHandler

logger = logging.getLogger(__name__)

type Controller = Callable[[Router], None]
type Middleware[T] = Callable[[T], T]


def dispatch(
    inbound: InboundRequest,
    controller: Controller,
    cors: CorsConfig | None = None,
) -> Response:
    """Handles one request start to finish.

    The controller makes its declarations against a fresh Router. If it returns
    without any declaration claiming the request, the default 404 fallback runs.
    Every response carries the CORS headers.
    """
    cors = cors if cors is not None else CorsConfig()
    response, _route, _params = _dispatch(inbound, controller, cors)
    return response


def _dispatch(
    inbound: InboundRequest, controller: Controller, cors: CorsConfig
) -> tuple[Response, str, dict[str, str]]:
    router: Router | None = None
    try:
        router = get_controller(inbound, cors)
        controller(router)
        router.no_mapping()
    except RequestHandled as e:
        params = dict(router.request.path_variables) if router is not None else {}
        return e.response.with_headers(cors.headers()), e.route, params
    msg = "request finished without a response"  # no_mapping always raises
    raise RuntimeError(msg)


class App:
    """RSGI application running a controller function for every request.

    Example:
        def controller(router: Router) -> None:
            router.get("/users/{id}", get_user)
            router.post("/users", create_user)
            router.no_mapping()

        app = App(controller)
        Server(app, address="127.0.0.1", port=8000)
    """

    __slots__ = ("_controller", "_cors", "_handler", "_middleware")
    _controller: Controller
    _cors: CorsConfig
    _middleware: tuple[Middleware[RSGIHTTPHandler], ...]
    _handler: RSGIHTTPHandler

    def __init__(
        self, controller: Controller, *, cors: CorsConfig | None = None
    ) -> None:
        self._controller = controller
        self._cors = cors if cors is not None else CorsConfig()
        self._middleware = ()
        self._handler = self._handle

    async def __rsgi__(self, scope: HTTPScope, proto: HTTPProtocol) -> None:
        if scope.proto != "http":
            msg = f"unsupported protocol {scope.proto!r}"
            raise ValueError(msg)
        await self._handler(scope, proto)

    def use(self, *middleware: Middleware[RSGIHTTPHandler]) -> None:
        """Wraps the whole app; the first middleware given is outermost."""
        self._middleware = self._middleware + middleware
        self._handler = reduce(
            lambda h, m: m(h), reversed(self._middleware), self._handle
        )

    async def _handle(self, scope: HTTPScope, proto: HTTPProtocol) -> None:
        inbound = InboundRequest(
            method=scope.method.upper(),
            body=await proto(),
            query_params=parse_query_string(scope.query_string),
            path=scope.path,
        )
        try:
            response, route, params = _dispatch(inbound, self._controller, self._cors)
        except Exception:
            logger.exception("unhandled error for %s %s", scope.method, scope.path)
            response, route, params = (
                Response(
                    status=HTTPStatus.INTERNAL_SERVER_ERROR,
                    headers=self._cors.headers(),
                ),
                "",
                {},
            )
        # visible to wrapping middleware once this coroutine returns
        path_params.set(params)
        http_route.set(route)

        if response.body:
            proto.response_str(
                int(response.status), list(response.headers), response.body
            )
        else:
            proto.response_empty(int(response.status), list(response.headers))
