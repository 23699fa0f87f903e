"""Method + regex path routing with first-match-wins lookup.

Routes are registered on a :class:`RouterBuilder` during setup and frozen
into an immutable :class:`Router` by :meth:`RouterBuilder.build`.  A frozen
router has no mutators, so it can be shared across threads and queried
concurrently without locks.
"""

from __future__ import annotations

import logging
import re
from enum import IntEnum, StrEnum
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol

from regexrouter.validation import validate_handler_signature

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing import Self

logger = logging.getLogger(__name__)


class Method(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"


class RouteError(IntEnum):
    """Why a request could not be resolved to a handler.

    Returned by :meth:`Router.find_handler`, never raised.  The host maps
    each member to an HTTP response with the matching status code.
    """

    NOT_FOUND = 404
    NOT_IMPLEMENTED = 501

    @property
    def status_code(self) -> int:
        return int(self)

    @property
    def phrase(self) -> str:
        return HTTPStatus(self).phrase


class InvalidPatternError(ValueError):
    """A path pattern is not a valid regular expression."""


class Handler(Protocol):
    def __call__(self, request: Any, /) -> Any: ...


class PathPattern:
    """Compiled regex matched against the whole request path."""

    __slots__ = ("_regex",)

    def __new__(cls, pattern: str) -> Self:
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            msg = f"Invalid path pattern {pattern!r}: {exc}"
            raise InvalidPatternError(msg) from exc
        self = super().__new__(cls)
        object.__setattr__(self, "_regex", regex)
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def matches(self, path: str) -> bool:
        """Return ``True`` if *path* matches the pattern in full."""
        return self._regex.fullmatch(path) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPattern):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern!r})"


class Route(NamedTuple):
    """A single route mapping a method + path pattern to a handler."""

    method: Method
    pattern: PathPattern
    handler: Handler


class RouterBuilder:
    """Mutable, chainable route registration.

    Parameters
    ----------
    strict:
        When ``True``, each handler's signature is checked at registration
        time; it must accept exactly one positional argument (the request).
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._routes: list[Route] = []

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def add_route(self, method: Method | str, pattern: str, handler: Handler) -> Self:
        method = Method(method.upper())
        if self.strict:
            validate_handler_signature(handler, pattern, method)
        route = Route(method, PathPattern(pattern), handler)
        self._routes.append(route)
        logger.debug("Registered route #%d %s %s -> %s", len(self._routes), method, pattern, handler_name(handler))
        return self

    def route(self, method: Method | str, pattern: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`add_route`; returns the handler unchanged."""

        def decorator(handler: Handler) -> Handler:
            self.add_route(method, pattern, handler)
            return handler

        return decorator

    def get(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.GET, pattern, handler)

    def post(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.POST, pattern, handler)

    def put(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.PUT, pattern, handler)

    def patch(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.PATCH, pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.DELETE, pattern, handler)

    def options(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.OPTIONS, pattern, handler)

    def head(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.HEAD, pattern, handler)

    def trace(self, pattern: str, handler: Handler) -> Self:
        return self.add_route(Method.TRACE, pattern, handler)

    # ------------------------------------------------------------------
    # Freezing
    # ------------------------------------------------------------------

    def build(self) -> Router:
        """Freeze the routes registered so far into a :class:`Router`.

        Later registrations on this builder do not affect the result.
        """
        router = Router(tuple(self._routes))
        logger.debug("Built router with %d route(s)", len(router))
        return router

    def __len__(self) -> int:
        return len(self._routes)


class Router:
    """Immutable, ordered route table with first-match-wins lookup."""

    __slots__ = ("_routes",)

    # Built in __new__ so a second __init__ call cannot swap the routes.
    def __new__(cls, routes: tuple[Route, ...] = ()) -> Self:
        self = super().__new__(cls)
        object.__setattr__(self, "_routes", tuple(routes))
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def find_handler(self, method: Method | str, path: str) -> Handler | RouteError:
        """Return the handler for *method* and *path*, or a :class:`RouteError`.

        ``NOT_IMPLEMENTED`` means no route exists for *method* at all;
        ``NOT_FOUND`` means routes exist for *method* but none matches *path*.
        Method strings are compared case-insensitively, as at registration.
        """
        method = method.upper()
        candidates = [route for route in self._routes if route.method == method]
        if not candidates:
            return RouteError.NOT_IMPLEMENTED
        for route in candidates:
            if route.pattern.matches(path):
                return route.handler
        return RouteError.NOT_FOUND

    def resolve(self, request: Any) -> Handler | RouteError:
        """Resolve using ``request.method`` and ``request.path``."""
        return self.find_handler(request.method, request.path)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"Router({len(self._routes)} routes)"


def handler_name(handler: Any) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)
