"""OpenTelemetry tracing and metrics middleware.

Creates HTTP server spans and metrics with semantic conventions for each request.

Install with: uv add "restmux[otel]"
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from restmux.rsgi import (
        HTTPProtocol,
        HTTPScope,
        RSGIHTTPHandler,
    )

try:
    from opentelemetry import metrics, trace
    from opentelemetry.propagate import extract
    from opentelemetry.trace import (
        SpanKind,
        StatusCode,
        TracerProvider,
    )
except ImportError as e:
    msg = (
        "OpenTelemetry middleware requires the 'otel' extra. "
        "Install with: uv add 'restmux[otel]'"
    )
    raise ImportError(msg) from e

from restmux.matching import http_route, path_params


class _TracingHTTPProtocol:
    """Wraps HTTPProtocol to capture the response status code for the span.

    App only answers through response_empty and response_str; everything else
    is delegated untouched.
    """

    __slots__ = ("_proto", "status")

    def __init__(self, proto: HTTPProtocol) -> None:
        self._proto = proto
        self.status: int | None = None

    async def __call__(self) -> bytes:
        return await self._proto()

    def __getattr__(self, name: str) -> object:
        return getattr(self._proto, name)

    def response_empty(self, status: int, headers: list[tuple[str, str]]) -> None:
        self.status = status
        self._proto.response_empty(status, headers)

    def response_str(
        self, status: int, headers: list[tuple[str, str]], body: str
    ) -> None:
        self.status = status
        self._proto.response_str(status, headers, body)


_DURATION_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)


def otel(
    *,
    tracer_provider: TracerProvider | None = None,
    meter_provider: metrics.MeterProvider | None = None,
) -> Callable[[RSGIHTTPHandler], RSGIHTTPHandler]:
    """Create OpenTelemetry tracing and metrics middleware.

    Wraps the whole App. The matched route is only known once the controller
    has run, so the span starts named after the method and is renamed to
    ``METHOD route`` (or ``METHOD status`` when nothing matched) afterwards.

    Metrics emitted:
        - ``http.server.request.duration`` (histogram, seconds)
        - ``http.server.active_requests`` (up-down counter)

    Args:
        tracer_provider: Optional TracerProvider. If None, uses the global provider.
        meter_provider: Optional MeterProvider. If None, uses the global provider.

    Example:
        app = App(controller)
        app.use(otel())
    """
    tracer = trace.get_tracer("restmux", tracer_provider=tracer_provider)
    meter = metrics.get_meter("restmux", meter_provider=meter_provider)
    duration_histogram = meter.create_histogram(
        "http.server.request.duration",
        unit="s",
        description="Duration of HTTP server requests.",
        explicit_bucket_boundaries_advisory=_DURATION_BUCKETS,
    )
    active_requests_counter = meter.create_up_down_counter(
        "http.server.active_requests",
        unit="{request}",
        description="Number of active HTTP server requests.",
    )

    def middleware(handler: RSGIHTTPHandler) -> RSGIHTTPHandler:
        async def traced_handler(scope: HTTPScope, proto: HTTPProtocol) -> None:
            ctx = extract(scope.headers)
            method = scope.method

            attributes: dict[str, str | int] = {
                "http.request.method": method,
                "url.path": scope.path,
                "url.scheme": scope.scheme,
                "network.protocol.version": scope.http_version,
                "server.address": scope.server,
                "client.address": scope.client,
            }
            if scope.query_string:
                attributes["url.query"] = scope.query_string
            user_agent = scope.headers.get("user-agent")
            if user_agent is not None:
                attributes["user_agent.original"] = user_agent

            active_attrs: dict[str, str | int] = {
                "http.request.method": method,
                "url.scheme": scope.scheme,
            }
            active_requests_counter.add(1, active_attrs)
            start = time.perf_counter()

            with tracer.start_as_current_span(
                method,
                context=ctx,
                kind=SpanKind.SERVER,
                attributes=attributes,
                record_exception=True,
                set_status_on_exception=True,
            ) as span:
                wrapped_proto = _TracingHTTPProtocol(proto)
                try:
                    await handler(scope, wrapped_proto)  # type: ignore[arg-type]
                finally:
                    duration = time.perf_counter() - start
                    active_requests_counter.add(-1, active_attrs)
                    duration_attrs = dict(active_attrs)

                    # set by App once the controller has run
                    route = http_route.get("")
                    if route:
                        span.set_attribute("http.route", route)
                        span.update_name(f"{method} {route}")
                        duration_attrs["http.route"] = route
                    # not part of semantic conventions but useful
                    for key, value in path_params.get({}).items():
                        span.set_attribute(f"http.route.param.{key}", value)

                    status = wrapped_proto.status
                    if status is not None:
                        span.set_attribute("http.response.status_code", status)
                        duration_attrs["http.response.status_code"] = status
                        if not route:
                            span.update_name(f"{method} {status}")
                        if status >= 500:
                            span.set_status(StatusCode.ERROR)
                    duration_histogram.record(duration, duration_attrs)

        return traced_handler

    return middleware
