"""Zero dependency path template matching.

A pattern like ``/users/{id}/posts`` is compared segment by segment against a
request path. Literal segments must be equal, ``{name}`` segments bind the
request segment to ``name``.
"""

from contextvars import ContextVar
from typing import Never

path_params: ContextVar[dict[str, str]] = ContextVar("path_params")
http_route: ContextVar[str] = ContextVar("http_route")


class FrozenDict[K, V](dict[K, V]):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._hash: int | None = None

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self.items()))
        return self._hash

    def _immutable(self, *args, **kwargs) -> Never:
        msg = "FrozenDict is immutable"
        raise TypeError(msg)

    __setitem__ = __delitem__ = clear = pop = popitem = setdefault = update = _immutable
    __ior__ = _immutable


EMPTY_PARAMS: FrozenDict[str, str] = FrozenDict()


def placeholder_name(segment: str) -> str | None:
    """Returns the placeholder name for a ``{name}`` segment, None for literals.

    ``{}`` is a placeholder whose name is the empty string.
    """
    if len(segment) >= 2 and segment.startswith("{") and segment.endswith("}"):
        return segment[1:-1].strip()
    return None


def match_template(pattern: str, url: str) -> FrozenDict[str, str] | None:
    """Matches url against pattern segment by segment.

    Returns the bound path variables (possibly empty) or None if the segment
    counts differ or any literal segment mismatches. Never partially binds.
    """
    pattern_segments = pattern.split("/")
    url_segments = url.split("/")
    if len(pattern_segments) != len(url_segments):
        return None

    params: dict[str, str] = {}
    for pattern_seg, url_seg in zip(pattern_segments, url_segments, strict=True):
        if pattern_seg == url_seg:  # literal match
            continue
        name = placeholder_name(pattern_seg)
        if name is None:  # literal mismatch
            return None
        params[name] = url_seg
    return FrozenDict(params)


def match_exact(pattern: str, url: str) -> bool:
    return pattern == url


def normalize_path(path: str) -> str:
    """Strips any query suffix and ensures exactly one leading slash.

    Rewritten entry points pass ``users/42`` while native routing passes
    ``/users/42``; both normalize to ``/users/42``.
    """
    path = path.split("?", 1)[0]
    return "/" + path.lstrip("/")
