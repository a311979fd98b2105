from http import HTTPStatus

import pytest

from restmux.errors import RequestHandled, ResponseAlreadySentError
from restmux.request import RequestContext


def test_send_response_defaults_to_ok() -> None:
    req = RequestContext(None, {})

    with pytest.raises(RequestHandled) as exc_info:
        req.send_response({"ok": True, "items": [1, 2]})
    response = exc_info.value.response
    assert response.status == HTTPStatus.OK
    assert response.body == '{"ok": true, "items": [1, 2]}'
    assert req.response is response


def test_send_response_status() -> None:
    req = RequestContext(None, {})

    with pytest.raises(RequestHandled) as exc_info:
        req.send_response(None, HTTPStatus.CREATED)
    assert exc_info.value.response.status == HTTPStatus.CREATED
    assert exc_info.value.response.body == "null"


def test_send_response_twice_raises() -> None:
    req = RequestContext(None, {})

    with pytest.raises(RequestHandled):
        req.send_response("first")
    with pytest.raises(ResponseAlreadySentError, match="response already sent"):
        req.send_response("second")
    assert req.response is not None
    assert req.response.body == '"first"'


def test_path_variables_default_empty() -> None:
    assert RequestContext(None, {}).path_variables == {}


def test_bind_path_variables_once() -> None:
    req = RequestContext(None, {})
    req.bind_path_variables({"id": "42"})
    assert req.path_variables == {"id": "42"}

    with pytest.raises(ValueError, match="path variables are already bound"):
        req.bind_path_variables({"id": "43"})
    assert req.path_variables == {"id": "42"}


def test_bind_path_variables_copies() -> None:
    params = {"id": "42"}
    req = RequestContext(None, {})
    req.bind_path_variables(params)
    params["id"] = "changed"
    assert req.path_variables == {"id": "42"}


def test_body_and_query_params_exposed() -> None:
    req = RequestContext([1, 2, 3], {"q": "x"})
    assert req.body == [1, 2, 3]
    assert req.query_params == {"q": "x"}
