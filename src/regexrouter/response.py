"""ASGI response types."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from regexrouter._types import Send


class Response:
    """A complete, non-streaming HTTP response."""

    media_type: str = "application/octet-stream"

    __slots__ = ("body", "headers", "status_code")

    def __init__(
        self,
        body: bytes | str = b"",
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        media_type: str | None = None,
    ) -> None:
        self.body = self.render(body)
        self.status_code = status_code
        self.headers: dict[str, str] = {"content-type": media_type or self.media_type}
        if headers:
            self.headers.update({k.lower(): v for k, v in headers.items()})
        self.headers["content-length"] = str(len(self.body))

    def render(self, content: Any) -> bytes:
        if isinstance(content, bytes):
            return content
        return str(content).encode("utf-8")

    async def send(self, send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in self.headers.items()],
            }
        )
        await send({"type": "http.response.body", "body": self.body})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code})"


class PlainTextResponse(Response):
    media_type = "text/plain; charset=utf-8"

    __slots__ = ()


class JSONResponse(Response):
    """JSON body from a dict, list, or pydantic model."""

    media_type = "application/json"

    __slots__ = ()

    def render(self, content: Any) -> bytes:
        if isinstance(content, BaseModel):
            return content.model_dump_json().encode("utf-8")
        return json.dumps(content, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
