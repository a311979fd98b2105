"""Inbound request value object and its decoding.

Everything the router needs about a request is passed in explicitly through
InboundRequest; nothing is read from process-wide state.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

logger = logging.getLogger(__name__)

# Query key carrying the real path when every path is rewritten to one entry point
RESERVED_URL_KEY = "__url__"


@dataclass(slots=True, frozen=True)
class InboundRequest:
    method: str
    body: bytes | str | None = None
    query_params: Mapping[str, str] = field(default_factory=dict)
    path: str = "/"

    def url(self) -> str:
        """The request path: the reserved query key if present, else the native path."""
        return self.query_params.get(RESERVED_URL_KEY, self.path)

    def public_query_params(self) -> dict[str, str]:
        """Query params with the reserved key removed."""
        return {k: v for k, v in self.query_params.items() if k != RESERVED_URL_KEY}


def decode_body(raw: bytes | str | None) -> Any:
    """Decodes a JSON payload; empty or malformed payloads decode to None."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:  # includes too deeply nested input
        logger.debug("discarding malformed request body: %s", e)
        return None


def parse_query_string(query_string: str) -> dict[str, str]:
    """Flat str -> str mapping; for repeated keys the last value wins."""
    return dict(parse_qsl(query_string, keep_blank_values=True))
