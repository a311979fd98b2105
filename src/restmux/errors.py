from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from restmux.response import Response


class RestmuxError(Exception):
    """Base class for restmux errors."""


class ResponseAlreadySentError(RestmuxError):
    """send_response was called twice for the same request."""


class ConfigurationError(RestmuxError):
    """Deployment configuration could not be written."""


class RequestHandled(BaseException):  # noqa: N818  - control flow signal, not an error
    """Stops all further processing of the current request.

    Raised once a declaration, the fallback, or the entry point has produced the
    final response. Derives from BaseException like SystemExit so handler code
    catching Exception does not swallow it.
    """

    def __init__(self, response: Response, route: str = "") -> None:
        super().__init__(response.status)
        self.response = response
        self.route = route
