from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

SAMPLE_ROUTES = textwrap.dedent(
    """
    from regexrouter import PlainTextResponse, RouterApp, RouterBuilder


    def show_user(request):
        return PlainTextResponse("user")


    def new_user(request):
        return PlainTextResponse("new")


    def no_args():
        return PlainTextResponse("never")


    def create_user(request):
        return PlainTextResponse("created")


    builder = RouterBuilder().get("/user/[0-9]+", show_user).get("/user/new", new_user).post("/user", create_user)
    router = builder.build()
    app = RouterApp(router)
    empty = RouterBuilder().build()
    not_a_router = 42
    """
)


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write an importable ``sample_routes`` module and return its name."""
    (tmp_path / "sample_routes.py").write_text(SAMPLE_ROUTES, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delitem(sys.modules, "sample_routes", raising=False)
    return "sample_routes"
