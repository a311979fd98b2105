from http import HTTPMethod, HTTPStatus

import pytest

from restmux.config import CorsConfig
from restmux.response import Response


def test_cors_defaults() -> None:
    cors = CorsConfig()
    assert cors.headers() == (
        ("Access-Control-Allow-Origin", "*"),
        ("Content-Type", "application/json"),
        ("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS"),
        ("Access-Control-Allow-Headers", "Content-Type"),
    )


def test_cors_custom() -> None:
    cors = CorsConfig(
        allowed_methods=(HTTPMethod.GET, HTTPMethod.OPTIONS),
        allowed_origin="https://example.com",
        allowed_headers=("Content-Type", "Authorization"),
    )
    headers = dict(cors.headers())
    assert headers["Access-Control-Allow-Origin"] == "https://example.com"
    assert headers["Access-Control-Allow-Methods"] == "GET, OPTIONS"
    assert headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"


def test_cors_allows() -> None:
    cors = CorsConfig()
    assert cors.allows("GET")
    assert cors.allows(HTTPMethod.DELETE)
    assert not cors.allows("PATCH")


def test_cors_empty_methods_raises() -> None:
    with pytest.raises(ValueError, match="allowed_methods must not be empty"):
        CorsConfig(allowed_methods=())


def test_cors_empty_origin_raises() -> None:
    with pytest.raises(ValueError, match="allowed_origin must not be empty"):
        CorsConfig(allowed_origin="")


def test_response_from_data() -> None:
    response = Response.from_data(["a", 1], HTTPStatus.ACCEPTED)
    assert response.status == HTTPStatus.ACCEPTED
    assert response.body == '["a", 1]'
    assert response.headers == ()


def test_response_with_headers_prepends() -> None:
    response = Response(headers=(("X-Extra", "1"),)).with_headers(
        (("Content-Type", "application/json"),)
    )
    assert response.headers == (
        ("Content-Type", "application/json"),
        ("X-Extra", "1"),
    )
