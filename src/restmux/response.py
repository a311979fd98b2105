from __future__ import annotations

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


@dataclass(slots=True, frozen=True)
class Response:
    status: HTTPStatus = HTTPStatus.OK
    body: str = ""  # serialized JSON, "" for no body
    headers: tuple[tuple[str, str], ...] = field(default=())

    @classmethod
    def from_data(cls, data: Any, status: HTTPStatus = HTTPStatus.OK) -> Response:
        return cls(status=status, body=json.dumps(data))

    def with_headers(self, headers: tuple[tuple[str, str], ...]) -> Response:
        return Response(
            status=self.status, body=self.body, headers=headers + self.headers
        )
