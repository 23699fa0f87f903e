"""End-to-end tests for the ASGI host adapter."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from regexrouter import JSONResponse, PlainTextResponse, Request, Response, RouterApp, RouterBuilder


def _make_client(app: RouterApp) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    )


def _hello_get(request: Request) -> Response:
    return PlainTextResponse("Hello, Get!")


async def _hello_post(request: Request) -> Response:
    return PlainTextResponse("Hello, Post!")


def test_requires_frozen_router() -> None:
    with pytest.raises(TypeError, match="call .build"):
        RouterApp(RouterBuilder().get("/x", _hello_get))


@pytest.mark.asyncio
async def test_hello_get_and_post() -> None:
    app = RouterApp(RouterBuilder().get("/hello_get", _hello_get).post("/hello_post", _hello_post).build())

    async with _make_client(app) as client:
        resp = await client.get("/hello_get")
        assert resp.status_code == 200
        assert resp.text == "Hello, Get!"
        assert resp.headers["content-type"].startswith("text/plain")

        resp = await client.post("/hello_post")
        assert resp.status_code == 200
        assert resp.text == "Hello, Post!"


@pytest.mark.asyncio
async def test_404_when_method_known_but_path_unknown() -> None:
    app = RouterApp(RouterBuilder().get("/hello_get", _hello_get).post("/hello_post", _hello_post).build())

    async with _make_client(app) as client:
        resp = await client.get("/hello_post")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Not Found"}


@pytest.mark.asyncio
async def test_501_when_method_has_no_routes() -> None:
    app = RouterApp(RouterBuilder().get("/hello_get", _hello_get).build())

    async with _make_client(app) as client:
        resp = await client.post("/hello_get")
        assert resp.status_code == 501
        assert resp.json() == {"detail": "Not Implemented"}

        resp = await client.request("PROPFIND", "/hello_get")
        assert resp.status_code == 501


@pytest.mark.asyncio
async def test_anchored_regex_routes() -> None:
    async def show_user(request: Request) -> JSONResponse:
        return JSONResponse({"user": request.path.rsplit("/", 1)[1]})

    async def new_user(request: Request) -> JSONResponse:
        return JSONResponse({"form": "new"})

    app = RouterApp(RouterBuilder().get("/user/[0-9]+", show_user).get("/user/new", new_user).build())

    async with _make_client(app) as client:
        assert (await client.get("/user/42")).json() == {"user": "42"}
        assert (await client.get("/user/new")).json() == {"form": "new"}
        assert (await client.get("/user/42/edit")).status_code == 404


@pytest.mark.asyncio
async def test_query_string_ignored_for_matching() -> None:
    async def search(request: Request) -> JSONResponse:
        return JSONResponse(request.query_params)

    app = RouterApp(RouterBuilder().get("/search", search).build())

    async with _make_client(app) as client:
        resp = await client.get("/search", params={"q": "router"})
        assert resp.status_code == 200
        assert resp.json() == {"q": ["router"]}


@pytest.mark.asyncio
async def test_post_with_body() -> None:
    async def echo(request: Request) -> JSONResponse:
        return JSONResponse(await request.json())

    app = RouterApp(RouterBuilder().post("/echo", echo).build())

    async with _make_client(app) as client:
        resp = await client.post("/echo", json={"key": "value"})
        assert resp.status_code == 200
        assert resp.json() == {"key": "value"}


@pytest.mark.asyncio
async def test_handler_response_relayed_unchanged() -> None:
    def created(request: Request) -> Response:
        return Response(b"\x00\x01", status_code=201, headers={"X-Custom": "yes"})

    app = RouterApp(RouterBuilder().put("/blob", created).build())

    async with _make_client(app) as client:
        resp = await client.put("/blob")
        assert resp.status_code == 201
        assert resp.content == b"\x00\x01"
        assert resp.headers["x-custom"] == "yes"
        assert resp.headers["content-type"] == "application/octet-stream"


@pytest.mark.asyncio
async def test_stateful_handler_object() -> None:
    class Greeter:
        def __init__(self, name: str) -> None:
            self.name = name

        async def __call__(self, request: Request) -> JSONResponse:
            return JSONResponse({"hello": self.name})

    app = RouterApp(RouterBuilder().get("/greet", Greeter("world")).build())

    async with _make_client(app) as client:
        resp = await client.get("/greet")
        assert resp.json() == {"hello": "world"}


@pytest.mark.asyncio
async def test_dict_and_model_returns_become_json() -> None:
    class Item(BaseModel):
        name: str
        price: float

    def as_dict(request: Request) -> dict:
        return {"auto": True}

    async def as_model(request: Request) -> Item:
        return Item(name="Widget", price=9.99)

    app = RouterApp(RouterBuilder().get("/dict", as_dict).get("/model", as_model).build())

    async with _make_client(app) as client:
        assert (await client.get("/dict")).json() == {"auto": True}
        assert (await client.get("/model")).json() == {"name": "Widget", "price": 9.99}


@pytest.mark.asyncio
async def test_500_on_handler_error(caplog: pytest.LogCaptureFixture) -> None:
    async def boom(request: Request) -> Response:
        raise RuntimeError("kaboom")

    app = RouterApp(RouterBuilder().get("/boom", boom).build())

    async with _make_client(app) as client:
        resp = await client.get("/boom")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal Server Error"}

    assert "Handler failed for GET /boom" in caplog.text


@pytest.mark.asyncio
async def test_debug_includes_traceback() -> None:
    def boom(request: Request) -> Response:
        raise RuntimeError("kaboom")

    app = RouterApp(RouterBuilder().get("/boom", boom).build(), debug=True)

    async with _make_client(app) as client:
        resp = await client.get("/boom")
        assert resp.status_code == 500
        assert "kaboom" in resp.json()["traceback"]


@pytest.mark.asyncio
async def test_all_http_methods() -> None:
    builder = RouterBuilder()
    for method_name in ("get", "post", "put", "delete", "patch", "options", "head", "trace"):

        async def handler(request: Request, _method: str = method_name) -> JSONResponse:
            return JSONResponse({"method": _method})

        getattr(builder, method_name)(f"/{method_name}", handler)

    app = RouterApp(builder.build())

    async with _make_client(app) as client:
        for method_name in ("get", "post", "put", "delete", "patch", "options", "trace"):
            resp = await client.request(method_name.upper(), f"/{method_name}")
            assert resp.status_code == 200
            assert resp.json() == {"method": method_name}

        resp = await client.head("/head")
        assert resp.status_code == 200


@pytest.mark.asyncio
async def test_unserialisable_return_goes_through_error_path(caplog: pytest.LogCaptureFixture) -> None:
    def bad_json(request: Request) -> dict:
        return {"x": object()}

    app = RouterApp(RouterBuilder().get("/bad", bad_json).build(), debug=True)

    async with _make_client(app) as client:
        resp = await client.get("/bad")
        assert resp.status_code == 500
        body = resp.json()
        assert body["detail"] == "Internal Server Error"
        assert "TypeError" in body["traceback"]

    assert "Handler failed for GET /bad" in caplog.text


@pytest.mark.asyncio
async def test_lifespan_startup_and_shutdown() -> None:
    app = RouterApp(RouterBuilder().build())
    incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
    sent: list[dict] = []

    async def receive() -> dict:
        return incoming.pop(0)

    async def send(message: dict) -> None:
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    assert sent == [{"type": "lifespan.startup.complete"}, {"type": "lifespan.shutdown.complete"}]
