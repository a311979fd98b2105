from dataclasses import dataclass, field
from http import HTTPMethod

DEFAULT_ALLOWED_METHODS: tuple[HTTPMethod, ...] = (
    HTTPMethod.GET,
    HTTPMethod.POST,
    HTTPMethod.PUT,
    HTTPMethod.DELETE,
    HTTPMethod.OPTIONS,
)


@dataclass(slots=True, frozen=True)
class CorsConfig:
    """CORS values emitted on every response.

    Example:
        CorsConfig(
            allowed_methods=(HTTPMethod.GET, HTTPMethod.OPTIONS),
            allowed_origin="https://example.com",
            allowed_headers=("Content-Type", "Authorization"),
        )
    """

    allowed_methods: tuple[str, ...] = field(default=DEFAULT_ALLOWED_METHODS)
    allowed_origin: str = "*"
    allowed_headers: tuple[str, ...] = ("Content-Type",)

    def __post_init__(self) -> None:
        if not self.allowed_methods:
            msg = "allowed_methods must not be empty"
            raise ValueError(msg)
        if not self.allowed_origin:
            msg = "allowed_origin must not be empty"
            raise ValueError(msg)

    def allows(self, method: str) -> bool:
        return method in self.allowed_methods

    def headers(self) -> tuple[tuple[str, str], ...]:
        return (
            ("Access-Control-Allow-Origin", self.allowed_origin),
            ("Content-Type", "application/json"),
            ("Access-Control-Allow-Methods", ", ".join(self.allowed_methods)),
            ("Access-Control-Allow-Headers", ", ".join(self.allowed_headers)),
        )
