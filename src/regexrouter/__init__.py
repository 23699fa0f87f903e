"""Minimal HTTP request router: method + regex path to handler, first match wins."""

__version__ = "0.1.0"

from regexrouter.app import RouterApp
from regexrouter.request import Request
from regexrouter.response import JSONResponse, PlainTextResponse, Response
from regexrouter.routing import (
    Handler,
    InvalidPatternError,
    Method,
    PathPattern,
    Route,
    RouteError,
    Router,
    RouterBuilder,
)

__all__ = [
    "Handler",
    "InvalidPatternError",
    "JSONResponse",
    "Method",
    "PathPattern",
    "PlainTextResponse",
    "Request",
    "Response",
    "Route",
    "RouteError",
    "Router",
    "RouterApp",
    "RouterBuilder",
]
