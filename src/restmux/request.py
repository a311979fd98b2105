from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from restmux.errors import RequestHandled, ResponseAlreadySentError
from restmux.matching import EMPTY_PARAMS, FrozenDict
from restmux.response import Response


class RequestContext:
    """What a handler sees of the current request.

    Holds the decoded body, the query params (reserved key already removed) and,
    once a declaration matched, its path variables.
    """

    __slots__ = ("_path_variables", "_response", "body", "query_params")
    body: Any
    query_params: Mapping[str, str]
    _path_variables: FrozenDict[str, str] | None
    _response: Response | None

    def __init__(self, body: Any, query_params: Mapping[str, str]) -> None:
        self.body = body
        self.query_params = query_params
        self._path_variables = None
        self._response = None

    @property
    def path_variables(self) -> Mapping[str, str]:
        if self._path_variables is None:
            return EMPTY_PARAMS
        return self._path_variables

    @property
    def response(self) -> Response | None:
        """The response recorded by send_response, None until sent."""
        return self._response

    def bind_path_variables(self, params: Mapping[str, str]) -> None:
        """Sets path variables for the matched declaration. Only once per request."""
        if self._path_variables is not None:
            msg = "path variables are already bound"
            raise ValueError(msg)
        self._path_variables = FrozenDict(params)

    def send_response(self, data: Any, status: HTTPStatus = HTTPStatus.OK) -> None:
        """Serializes data as the JSON response body and ends the request.

        Raises ResponseAlreadySentError if a response was already sent.
        """
        if self._response is not None:
            msg = f"response already sent with status {self._response.status}"
            raise ResponseAlreadySentError(msg)
        self._response = Response.from_data(data, status)
        raise RequestHandled(self._response)
