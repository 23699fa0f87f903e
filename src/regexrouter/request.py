"""The request object handed to handlers by :class:`~regexrouter.app.RouterApp`."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

if TYPE_CHECKING:
    from regexrouter._types import Receive, Scope


class Request:
    """An HTTP request as seen by a handler.

    ``method`` and ``path`` are what the router resolved on; the body is
    pulled from the ASGI channel on first access and kept.
    """

    __slots__ = ("_body", "_receive", "method", "path", "query_params")

    def __init__(self, scope: Scope, receive: Receive) -> None:
        self.method: str = scope["method"]
        self.path: str = scope["path"]
        self.query_params = parse_qs(scope.get("query_string", b"").decode("latin-1"))
        self._receive = receive
        self._body: bytes | None = None

    async def body(self) -> bytes:
        if self._body is None:
            buffer = bytearray()
            more_body = True
            while more_body:
                message = await self._receive()
                buffer += message.get("body", b"")
                more_body = message.get("more_body", False)
            self._body = bytes(buffer)
        return self._body

    async def json(self) -> Any:
        return json.loads(await self.body())

    def __repr__(self) -> str:
        return f"Request({self.method!r}, {self.path!r})"
