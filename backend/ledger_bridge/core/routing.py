"""Route Table — declarative (method, path pattern, handler) triples with ordered matching.

Invariants:
    - Patterns are split into segments; "{name}" is a capture, anything else a literal
    - A capture matches exactly one non-empty segment and is URL-unescaped on match
    - Matching is against the whole path shape (segment count and every literal)
    - Routes are ordered most-specific-literal-first: at the first segment where two
      routes of equal length differ, the literal wins over the capture; ties keep
      declaration order
    - The table is immutable once built

Design Decisions:
    - Segment comparison over compiled regexes: the raw (percent-encoded) path is
      split on "/" before unescaping, so an encoded slash stays inside its segment
    - Method mismatch on a matching path is reported the same as no match
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

Handler = Callable[..., Awaitable[Any]]

_LITERAL, _CAPTURE = 0, 1


def _split(path: str) -> list[str]:
    return path.strip("/").split("/") if path.strip("/") else []


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    handler: Handler
    summary: str = ""
    segments: tuple[tuple[int, str], ...] = field(init=False, repr=False)

    def __post_init__(self):
        parsed = []
        for seg in _split(self.pattern):
            if seg.startswith("{") and seg.endswith("}"):
                parsed.append((_CAPTURE, seg[1:-1]))
            else:
                parsed.append((_LITERAL, seg))
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "segments", tuple(parsed))

    @property
    def param_names(self) -> list[str]:
        return [name for kind, name in self.segments if kind == _CAPTURE]

    def specificity(self) -> tuple[int, ...]:
        return tuple(kind for kind, _ in self.segments)

    def match_path(self, raw_segments: list[str]) -> dict[str, str] | None:
        """Return captured params if the path shape matches, else None."""
        if len(raw_segments) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for (kind, value), raw in zip(self.segments, raw_segments):
            if kind == _LITERAL:
                if raw != value:
                    return None
            else:
                if not raw:
                    return None
                params[value] = unquote(raw)
        return params


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: dict[str, str]


class RouteTable:
    """Immutable ordered route collection, evaluated in a single pass."""

    def __init__(self, routes: Iterable[Route]):
        # sorted() is stable: equal-specificity routes keep declaration order
        self._routes: tuple[Route, ...] = tuple(
            sorted(routes, key=lambda r: (len(r.segments), r.specificity())),
        )

    def __iter__(self):
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, raw_path: str) -> RouteMatch | None:
        method = method.upper()
        raw_segments = _split(raw_path)
        for route in self._routes:
            if route.method != method:
                continue
            params = route.match_path(raw_segments)
            if params is not None:
                return RouteMatch(route, params)
        return None
