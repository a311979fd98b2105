from importlib.metadata import version

from .app import App, dispatch
from .config import CorsConfig
from .errors import (
    ConfigurationError,
    RequestHandled,
    ResponseAlreadySentError,
    RestmuxError,
)
from .inbound import RESERVED_URL_KEY, InboundRequest
from .matching import http_route, path_params
from .request import RequestContext
from .response import Response
from .router import Router, get_controller

__all__ = [
    "RESERVED_URL_KEY",
    "App",
    "ConfigurationError",
    "CorsConfig",
    "InboundRequest",
    "RequestContext",
    "RequestHandled",
    "Response",
    "ResponseAlreadySentError",
    "RestmuxError",
    "Router",
    "__version__",
    "dispatch",
    "get_controller",
    "http_route",
    "path_params",
]

__version__ = version("restmux")
