"""ASGI host adapter for a frozen :class:`~regexrouter.routing.Router`."""

from __future__ import annotations

import asyncio
import inspect
import logging
import traceback
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from regexrouter.request import Request
from regexrouter.response import JSONResponse, PlainTextResponse, Response
from regexrouter.routing import RouteError, Router

if TYPE_CHECKING:
    from regexrouter._types import Receive, Scope, Send
    from regexrouter.routing import Handler

logger = logging.getLogger(__name__)


class _HandlerMeta:
    """Pre-computed handler metadata, built once per route."""

    __slots__ = ("handler", "is_coroutine")

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.is_coroutine = inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(handler, "__call__", None)
        )


class RouterApp:
    """ASGI 3.0 application that dispatches through a :class:`Router`.

    The router only says which handler applies; this adapter turns a
    :class:`RouteError` into the matching 404 or 501 response and relays
    handler responses unchanged.

    Parameters
    ----------
    router:
        A frozen router, as returned by :meth:`RouterBuilder.build`.
    debug:
        When ``True``, 500 responses include the full traceback.
    """

    def __init__(self, router: Router, *, debug: bool = False) -> None:
        if not isinstance(router, Router):
            msg = f"RouterApp needs a frozen Router, got {type(router).__name__}; call .build() first"
            raise TypeError(msg)
        self.router = router
        self.debug = debug
        self._handler_meta: dict[int, _HandlerMeta] = {
            id(route.handler): _HandlerMeta(route.handler) for route in router
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _acknowledge_lifespan(receive, send)
        elif scope["type"] == "http":
            response = await self._dispatch(scope, receive)
            await response.send(send)

    async def _dispatch(self, scope: Scope, receive: Receive) -> Response:
        result = self.router.find_handler(scope["method"], scope["path"])
        if isinstance(result, RouteError):
            return JSONResponse({"detail": result.phrase}, status_code=result.status_code)

        request = Request(scope, receive)
        try:
            return _as_response(await self._invoke(result, request))
        except Exception:
            logger.exception("Handler failed for %s %s", request.method, request.path)
            body: dict[str, Any] = {"detail": "Internal Server Error"}
            if self.debug:
                body["traceback"] = traceback.format_exc()
            return JSONResponse(body, status_code=500)

    async def _invoke(self, handler: Handler, request: Request) -> Any:
        meta = self._handler_meta[id(handler)]
        if meta.is_coroutine:
            return await handler(request)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, handler, request)


def serve(target: str, *, host: str = "127.0.0.1", port: int = 8000, workers: int = 1, dev: bool = False) -> None:
    """Run the :class:`RouterApp` importable as ``module:var`` under Granian.

    *dev* turns on reload, debug logging and access logs.
    """
    from granian import Granian

    Granian(
        target=target,
        address=host,
        port=port,
        interface="asgi",
        workers=workers,
        reload=dev,
        log_level="debug" if dev else "info",
        log_access=dev,
    ).serve()


async def _acknowledge_lifespan(receive: Receive, send: Send) -> None:
    """Answer ``lifespan.startup`` and ``lifespan.shutdown`` with ``.complete``."""
    event = ""
    while event != "lifespan.shutdown":
        event = (await receive())["type"]
        await send({"type": f"{event}.complete"})


def _as_response(value: Any) -> Response:
    if isinstance(value, Response):
        return value
    if isinstance(value, dict | list | BaseModel):
        return JSONResponse(value)
    return PlainTextResponse(str(value))
